"""Source stores: uploaded files on local disk or behind an HTTP(S) URL."""

from __future__ import annotations

import logging
import re
import secrets
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

import httpx
from httpx_retries import Retry, RetryTransport

from outreach_import.config import HttpSourceConfig, get_http_source_config, get_storage_config
from outreach_import.domain.errors import SourceUnavailableError

if TYPE_CHECKING:
    from types import TracebackType

    from outreach_import.domain.ports import SourceFetcher, SourceStore

log = logging.getLogger(__name__)

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
_REMOTE_SCHEMES = ("http://", "https://")


def _safe_file_name(name: str) -> str:
    cleaned = _UNSAFE_NAME_CHARS.sub("_", PurePosixPath(name.replace("\\", "/")).name)
    return cleaned.strip("._") or "upload.csv"


class LocalFileStore:
    """Keeps uploads under ``root``; keys are paths relative to it."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def put(self, name: str, content: bytes) -> str:
        self.root.mkdir(parents=True, exist_ok=True)
        key = f"{secrets.token_hex(8)}-{_safe_file_name(name)}"
        (self.root / key).write_bytes(content)
        log.info("Stored upload %s (%s bytes)", key, len(content))
        return key

    def fetch(self, source_key: str) -> bytes:
        path = self._resolve(source_key)
        try:
            return path.read_bytes()
        except OSError as exc:
            raise SourceUnavailableError(source_key, exc.strerror or str(exc)) from exc

    def _resolve(self, source_key: str) -> Path:
        root = self.root.resolve()
        path = (root / source_key).resolve()
        if not path.is_relative_to(root):
            raise SourceUnavailableError(source_key, "key escapes the upload directory")
        return path


class HttpFileStore:
    """Read-only store for files published at an absolute HTTP(S) URL."""

    def __init__(
        self,
        config: HttpSourceConfig | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        settings = config or get_http_source_config()
        retry = Retry(total=settings.max_retries, backoff_factor=settings.backoff_factor)
        self._client = httpx.Client(
            timeout=settings.timeout_seconds,
            follow_redirects=True,
            transport=RetryTransport(transport=transport or httpx.HTTPTransport(), retry=retry),
        )

    def __enter__(self) -> HttpFileStore:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    def fetch(self, source_key: str) -> bytes:
        try:
            response = self._client.get(source_key)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise SourceUnavailableError(
                source_key, f"HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise SourceUnavailableError(source_key, str(exc) or type(exc).__name__) from exc
        return response.content


class RoutingSourceFetcher:
    """Send URL keys to the HTTP store and everything else to local storage."""

    def __init__(self, local: SourceStore, remote: HttpFileStore) -> None:
        self.local = local
        self.remote = remote

    def __enter__(self) -> RoutingSourceFetcher:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self.remote.close()

    def put(self, name: str, content: bytes) -> str:
        return self.local.put(name, content)

    def fetch(self, source_key: str) -> bytes:
        if source_key.lower().startswith(_REMOTE_SCHEMES):
            return self.remote.fetch(source_key)
        return self.local.fetch(source_key)


def build_source_store(
    *,
    uploads_dir: Path | None = None,
    http_config: HttpSourceConfig | None = None,
) -> RoutingSourceFetcher:
    root = uploads_dir or get_storage_config().uploads_path()
    return RoutingSourceFetcher(LocalFileStore(root), HttpFileStore(http_config))


if TYPE_CHECKING:
    _local_check: SourceStore = LocalFileStore(Path())
    _http_check: SourceFetcher = HttpFileStore()
    _routing_check: SourceStore = build_source_store()
