"""Slice sizing and materialization defaults for the import pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .env import positive_int_env

DEFAULT_CHUNK_SIZE = 1000
DEFAULT_IMPORT_BATCH_SIZE = 200
DEFAULT_INVITE_TTL_DAYS = 7


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    chunk_size: int = DEFAULT_CHUNK_SIZE
    import_batch_size: int = DEFAULT_IMPORT_BATCH_SIZE
    invite_ttl: timedelta = timedelta(days=DEFAULT_INVITE_TTL_DAYS)

    def __post_init__(self) -> None:
        if self.chunk_size <= 0 or self.import_batch_size <= 0:
            raise ValueError("Slice sizes must be positive")
        if self.invite_ttl <= timedelta(0):
            raise ValueError("Invite TTL must be positive")


def get_pipeline_config() -> PipelineConfig:
    return PipelineConfig(
        chunk_size=positive_int_env("OUTREACH_IMPORT_CHUNK_SIZE", DEFAULT_CHUNK_SIZE),
        import_batch_size=positive_int_env(
            "OUTREACH_IMPORT_BATCH_SIZE", DEFAULT_IMPORT_BATCH_SIZE
        ),
        invite_ttl=timedelta(
            days=positive_int_env("OUTREACH_IMPORT_INVITE_TTL_DAYS", DEFAULT_INVITE_TTL_DAYS)
        ),
    )
