"""Application configuration helpers."""

from __future__ import annotations

from .env import positive_float_env, positive_int_env
from .errors import ConfigurationError
from .logging import configure_logging
from .pipeline import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_IMPORT_BATCH_SIZE,
    DEFAULT_INVITE_TTL_DAYS,
    PipelineConfig,
    get_pipeline_config,
)
from .sources import HttpSourceConfig, get_http_source_config
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_database_uri,
    get_storage_config,
)

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_IMPORT_BATCH_SIZE",
    "DEFAULT_INVITE_TTL_DAYS",
    "ConfigurationError",
    "DatabaseConfig",
    "HttpSourceConfig",
    "PipelineConfig",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_database_uri",
    "get_http_source_config",
    "get_pipeline_config",
    "get_storage_config",
    "positive_float_env",
    "positive_int_env",
]
