"""Ports for reading uploaded source files."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class SourceFetcher(Protocol):
    """Fetch uploaded file content by its stable key.

    Fetching the same key twice must return the same bytes; implementations
    raise ``SourceUnavailableError`` when the content cannot be read.
    """

    def fetch(self, source_key: str) -> bytes: ...


@runtime_checkable
class SourceStore(SourceFetcher, Protocol):
    """A source that also accepts new uploads."""

    def put(self, name: str, content: bytes) -> str:
        """Store ``content`` and return the key to fetch it by."""
        ...


__all__ = ["SourceFetcher", "SourceStore"]
