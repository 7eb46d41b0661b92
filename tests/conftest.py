from __future__ import annotations

import pytest

VAULT_ENV_VARS = (
    "VAULT_TOKEN",
    "VAULT_ADDR",
    "VAULT_ALLOW_READ",
    "VAULT_ALLOW_WRITE",
    "VAULT_ALLOWED_PATHS",
    "VAULT_TIMEOUT_SECONDS",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_vault_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in VAULT_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
