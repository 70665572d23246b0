"""Application configuration helpers."""

from __future__ import annotations

from .errors import ConfigurationError
from .fx import FX_RATE_ENV, FxRateConfig, get_fx_config
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .waterfall import default_waterfalls, get_priority_configuration

__all__ = [
    "FX_RATE_ENV",
    "ConfigurationError",
    "DatabaseConfig",
    "FxRateConfig",
    "StorageConfig",
    "configure_logging",
    "default_waterfalls",
    "get_database_config",
    "get_fx_config",
    "get_priority_configuration",
    "get_storage_config",
]
