from __future__ import annotations

import pytest

from tests.helpers.secret_store import InMemorySecretStore
from vaulttx.api.schema import (
    BulkResponse,
    DryRunResponse,
    OperationSimulationResponse,
    TransactionResponse,
    ValidationResponse,
)
from vaulttx.app import (
    bulk_delete,
    bulk_read,
    bulk_write,
    run_transaction,
    simulate_operation_request,
    simulate_transaction_request,
    validate_operations_request,
)
from vaulttx.config import MissingConfigurationError, VaultConfig
from vaulttx.domain.access import AccessPolicy
from vaulttx.domain.errors import OperationValidationError, PermissionDeniedError

TRANSACTION = {
    "operations": [
        {"type": "create", "path": "secret/a", "data": {"v": 1}},
        {"type": "update", "path": "secret/a", "data": {"v": 2}},
    ]
}


def test_run_transaction_commits_against_injected_store() -> None:
    store = InMemorySecretStore()

    response = run_transaction(TRANSACTION, store=store)

    assert isinstance(response, TransactionResponse)
    assert response.success is True
    assert store.secrets == {"secret/a": {"v": 2}}


def test_run_transaction_with_dry_run_flag_simulates() -> None:
    store = InMemorySecretStore()

    response = run_transaction({**TRANSACTION, "dryRun": True}, store=store)

    assert isinstance(response, DryRunResponse)
    assert response.would_succeed is True
    assert store.mutations == []


def test_simulate_transaction_request_ignores_commit_mode() -> None:
    store = InMemorySecretStore()

    response = simulate_transaction_request(TRANSACTION, store=store)

    assert response.validation_summary.would_succeed == 2
    assert store.mutations == []


def test_invalid_document_is_a_validation_error() -> None:
    with pytest.raises(OperationValidationError, match="TransactionRequest"):
        run_transaction({"operations": "nope"}, store=InMemorySecretStore())


def test_blank_path_is_a_validation_error() -> None:
    document = {"operations": [{"type": "read", "path": ""}]}

    with pytest.raises(OperationValidationError):
        run_transaction(document, store=InMemorySecretStore())


def test_injected_access_policy_is_enforced() -> None:
    with pytest.raises(PermissionDeniedError):
        run_transaction(
            TRANSACTION,
            store=InMemorySecretStore(),
            access=AccessPolicy(allow_write=False),
        )


def test_bulk_entry_points_round_trip() -> None:
    store = InMemorySecretStore()

    written = bulk_write(
        {"operations": [{"path": "secret/a", "data": {"v": 1}}, {"path": "", "data": {}}]},
        store=store,
    )
    read = bulk_read({"paths": ["secret/a"]}, store=store)
    deleted = bulk_delete({"paths": ["secret/a"]}, store=store)

    assert isinstance(written, BulkResponse)
    assert [result.success for result in written.results] == [True, False]
    assert read.results[0].data == {"v": 1}
    assert deleted.success is True
    assert store.secrets == {}


def _patch_vault_store(
    monkeypatch: pytest.MonkeyPatch, store: InMemorySecretStore
) -> list[VaultConfig]:
    seen: list[VaultConfig] = []

    def fake_build(config: VaultConfig) -> InMemorySecretStore:
        seen.append(config)
        return store

    monkeypatch.setattr("vaulttx.app.build_vault_store", fake_build)
    monkeypatch.setenv("VAULT_TOKEN", "s.test")
    return seen


def test_default_store_uses_vault_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    store = InMemorySecretStore()
    seen = _patch_vault_store(monkeypatch, store)
    monkeypatch.setenv("VAULT_ALLOW_WRITE", "true")
    monkeypatch.setenv("VAULT_ALLOWED_PATHS", "secret/")

    response = bulk_write(
        {
            "operations": [
                {"path": "secret/a", "data": {"v": 1}},
                {"path": "other/b", "data": {"v": 2}},
            ]
        }
    )

    assert seen[0].token == "s.test"
    assert [result.success for result in response.results] == [True, False]
    assert store.secrets == {"secret/a": {"v": 1}}


def test_default_configuration_keeps_writes_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    store = InMemorySecretStore()
    _patch_vault_store(monkeypatch, store)

    with pytest.raises(PermissionDeniedError):
        run_transaction(TRANSACTION)

    assert store.calls == []


def test_default_store_requires_a_token() -> None:
    with pytest.raises(MissingConfigurationError, match="VAULT_TOKEN"):
        bulk_read({"paths": ["secret/a"]})


def test_simulate_operation_request_predicts_one_operation() -> None:
    store = InMemorySecretStore.with_secrets({"secret/a": {"v": 1}})

    response = simulate_operation_request(
        {"type": "update", "path": "secret/a", "data": {"v": 2}}, store=store
    )

    assert isinstance(response, OperationSimulationResponse)
    assert response.would_succeed is True
    assert response.result.existing_data == {"v": 1}
    assert store.mutations == []


def test_validate_operations_request_honours_check_dependencies() -> None:
    store = InMemorySecretStore()

    checked = validate_operations_request(TRANSACTION, store=store)
    unchecked = validate_operations_request(
        {**TRANSACTION, "checkDependencies": False}, store=store
    )

    assert isinstance(checked, ValidationResponse)
    assert [result.would_succeed for result in checked.results] == [True, False]
    assert checked.dependencies is not None
    assert checked.dependencies[0].path == "secret/a"
    assert unchecked.dependencies is None
    assert store.mutations == []


def test_bulk_read_rejects_dry_run_flag() -> None:
    store = InMemorySecretStore.with_secrets({"secret/a": {"v": 1}})

    with pytest.raises(OperationValidationError, match="BulkReadRequest"):
        bulk_read({"paths": ["secret/a"], "dryRun": True}, store=store)

    assert store.calls == []
