"""Application configuration helpers."""

from __future__ import annotations

from publishstatus.common.logging import configure_logging

from .authoring import AuthoringConfig, get_authoring_config
from .edge import DEFAULT_EDGE_URL, EdgeConfig, get_edge_config
from .env import optional_env_var, optional_float_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import (
    CacheConfig,
    ClientInitConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
)
from .storage import StorageConfig, get_storage_config

__all__ = [
    "DEFAULT_EDGE_URL",
    "AuthoringConfig",
    "CacheConfig",
    "ClientInitConfig",
    "ConfigurationError",
    "EdgeConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_authoring_config",
    "get_edge_config",
    "get_storage_config",
    "optional_env_var",
    "optional_float_env_var",
    "require_env_vars",
]
