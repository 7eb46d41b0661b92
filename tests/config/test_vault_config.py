from __future__ import annotations

import logging

import pytest

from vaulttx.config import (
    ConfigurationError,
    MissingConfigurationError,
    env_list,
    get_vault_config,
    parse_log_level,
    require_env_var,
    require_env_vars,
)


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


def test_env_list_splits_and_trims(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_LIST", " secret/app/ ,, kv/data/team ")

    assert env_list("EXAMPLE_LIST") == ("secret/app/", "kv/data/team")
    assert env_list("UNSET_EXAMPLE_LIST") == ()


def test_vault_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VAULT_TOKEN", "s.test")

    config = get_vault_config()

    assert config.endpoint == "http://127.0.0.1:8200"
    assert config.allow_read is True
    assert config.allow_write is False
    assert config.allowed_paths == ()
    assert config.resilience.base_url == "http://127.0.0.1:8200/v1/"
    assert config.resilience.timeout_seconds == 10.0
    assert config.resilience.default_headers == {"X-Vault-Token": "s.test"}


def test_vault_config_reads_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VAULT_TOKEN", "s.test")
    monkeypatch.setenv("VAULT_ADDR", "https://vault.example.com/")
    monkeypatch.setenv("VAULT_ALLOW_READ", "FALSE")
    monkeypatch.setenv("VAULT_ALLOW_WRITE", "true")
    monkeypatch.setenv("VAULT_ALLOWED_PATHS", "secret/app/,secret/shared/")
    monkeypatch.setenv("VAULT_TIMEOUT_SECONDS", "2.5")

    config = get_vault_config()

    assert config.endpoint == "https://vault.example.com"
    assert config.allow_read is False
    assert config.allow_write is True
    assert config.allowed_paths == ("secret/app/", "secret/shared/")
    assert config.resilience.timeout_seconds == 2.5


def test_write_flag_requires_literal_true(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VAULT_TOKEN", "s.test")
    monkeypatch.setenv("VAULT_ALLOW_WRITE", "yes")

    assert get_vault_config().allow_write is False


def test_unrecognised_access_flags_keep_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VAULT_TOKEN", "s.test")
    monkeypatch.setenv("VAULT_ALLOW_READ", "maybe")
    monkeypatch.setenv("VAULT_ALLOW_WRITE", "maybe")

    config = get_vault_config()

    assert config.allow_read is True
    assert config.allow_write is False


def test_vault_config_requires_token() -> None:
    with pytest.raises(MissingConfigurationError, match="VAULT_TOKEN"):
        get_vault_config()


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("VAULT_ADDR", "vault.example.com"),
        ("VAULT_TIMEOUT_SECONDS", "soon"),
        ("VAULT_TIMEOUT_SECONDS", "0"),
    ],
)
def test_vault_config_rejects_invalid_values(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str
) -> None:
    monkeypatch.setenv("VAULT_TOKEN", "s.test")
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError):
        get_vault_config()


def test_parse_log_level() -> None:
    assert parse_log_level(None) == logging.INFO
    assert parse_log_level("debug") == logging.DEBUG
    assert parse_log_level("WARN") == logging.WARNING
    with pytest.raises(ConfigurationError):
        parse_log_level("chatty")
