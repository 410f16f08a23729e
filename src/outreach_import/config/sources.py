"""Settings for fetching uploaded files over HTTP."""

from __future__ import annotations

from dataclasses import dataclass

from .env import positive_float_env, positive_int_env

DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0
DEFAULT_HTTP_RETRIES = 3


@dataclass(frozen=True, slots=True)
class HttpSourceConfig:
    timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    max_retries: int = DEFAULT_HTTP_RETRIES
    backoff_factor: float = 0.5


def get_http_source_config() -> HttpSourceConfig:
    return HttpSourceConfig(
        timeout_seconds=positive_float_env(
            "OUTREACH_IMPORT_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT_SECONDS
        ),
        max_retries=positive_int_env("OUTREACH_IMPORT_HTTP_RETRIES", DEFAULT_HTTP_RETRIES),
    )
