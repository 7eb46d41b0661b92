"""Vault connection and access configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .env import env_float, env_list, require_env_vars
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_VAULT_ADDR = "http://127.0.0.1:8200"
DEFAULT_VAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True, slots=True)
class VaultConfig:
    """Holds the Vault endpoint, token and the client-side access rules."""

    endpoint: str
    token: str
    allow_read: bool = True
    allow_write: bool = False
    allowed_paths: tuple[str, ...] = ()
    resilience: ResilienceConfig = field(
        default_factory=lambda: ResilienceConfig(name="vault", base_url=DEFAULT_VAULT_ADDR)
    )


def get_vault_config(*, resilience: ResilienceConfig | None = None) -> VaultConfig:
    values = require_env_vars(("VAULT_TOKEN",))
    endpoint = (os.getenv("VAULT_ADDR") or DEFAULT_VAULT_ADDR).strip().rstrip("/")
    if not endpoint.startswith(("http://", "https://")):
        raise ConfigurationError(f"VAULT_ADDR must be an http(s) URL, got {endpoint!r}")

    timeout = env_float("VAULT_TIMEOUT_SECONDS", DEFAULT_VAULT_TIMEOUT_SECONDS)
    if timeout <= 0:
        raise ConfigurationError("VAULT_TIMEOUT_SECONDS must be positive")

    return VaultConfig(
        endpoint=endpoint,
        token=values["VAULT_TOKEN"],
        # read is opt-out, write is opt-in
        allow_read=os.getenv("VAULT_ALLOW_READ", "").strip().lower() != "false",
        allow_write=os.getenv("VAULT_ALLOW_WRITE", "").strip().lower() == "true",
        allowed_paths=env_list("VAULT_ALLOWED_PATHS"),
        resilience=resilience
        or ResilienceConfig(
            name="vault",
            base_url=f"{endpoint}/v1/",
            timeout_seconds=timeout,
            retry=RetryPolicy(total=3),
            ratelimit=RateLimit(max_calls=50, per_seconds=1.0),
            default_headers={"X-Vault-Token": values["VAULT_TOKEN"]},
        ),
    )
