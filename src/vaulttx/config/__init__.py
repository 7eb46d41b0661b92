"""Application configuration helpers."""

from __future__ import annotations

from .env import env_float, env_list, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging, parse_log_level
from .vault import DEFAULT_VAULT_ADDR, VaultConfig, get_vault_config

__all__ = [
    "DEFAULT_VAULT_ADDR",
    "ConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "VaultConfig",
    "configure_logging",
    "env_float",
    "env_list",
    "get_vault_config",
    "parse_log_level",
    "require_env_var",
    "require_env_vars",
]
