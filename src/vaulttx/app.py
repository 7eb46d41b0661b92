"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel, ValidationError

from vaulttx.adapters.vault import build_vault_store
from vaulttx.api.schema import (
    BulkDeleteRequest,
    BulkReadRequest,
    BulkResponse,
    BulkWriteRequest,
    DryRunResponse,
    OperationInput,
    OperationSimulationResponse,
    TransactionRequest,
    TransactionResponse,
    ValidateRequest,
    ValidationResponse,
)
from vaulttx.config import get_vault_config
from vaulttx.domain.access import AccessPolicy
from vaulttx.domain.bulk import BulkExecutor
from vaulttx.domain.errors import OperationValidationError
from vaulttx.domain.simulation import DryRunSimulator
from vaulttx.domain.transaction import TransactionExecutor

if TYPE_CHECKING:
    from vaulttx.domain.ports.secret_store import SecretStore


log = getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _parse_request(model: type[M], document: object) -> M:
    try:
        return model.model_validate(document)
    except ValidationError as exc:
        raise OperationValidationError(f"Invalid {model.__name__}: {exc}") from exc


def _resolve(
    store: SecretStore | None, access: AccessPolicy | None
) -> tuple[SecretStore, AccessPolicy]:
    """Fill in the Vault store and its configured access policy when not injected."""

    if store is not None:
        return store, access or AccessPolicy()
    config = get_vault_config()
    log.debug("Using Vault at %s", config.endpoint)
    return build_vault_store(config), access or AccessPolicy(
        allow_read=config.allow_read,
        allow_write=config.allow_write,
        allowed_paths=config.allowed_paths,
    )


def run_transaction(
    document: object,
    *,
    store: SecretStore | None = None,
    access: AccessPolicy | None = None,
) -> TransactionResponse | DryRunResponse:
    """Commit a transaction document, or simulate it when ``dryRun`` is set."""

    request = _parse_request(TransactionRequest, document)
    operations = request.to_operations()
    effective_store, effective_access = _resolve(store, access)
    if request.dry_run:
        result = DryRunSimulator(effective_store, access=effective_access).simulate(operations)
        return DryRunResponse.from_result(result)

    log.info("Running transaction with %d operations", len(operations))
    outcome = TransactionExecutor(effective_store, access=effective_access).execute(operations)
    return TransactionResponse.from_result(outcome)


def simulate_transaction_request(
    document: object,
    *,
    store: SecretStore | None = None,
    access: AccessPolicy | None = None,
) -> DryRunResponse:
    request = _parse_request(TransactionRequest, document)
    effective_store, effective_access = _resolve(store, access)
    simulator = DryRunSimulator(effective_store, access=effective_access)
    return DryRunResponse.from_result(simulator.simulate(request.to_operations()))


def simulate_operation_request(
    document: object,
    *,
    store: SecretStore | None = None,
    access: AccessPolicy | None = None,
) -> OperationSimulationResponse:
    """Predict one ``{type, path, data?}`` operation against the current store."""

    operation = _parse_request(OperationInput, document).to_operation()
    effective_store, effective_access = _resolve(store, access)
    simulator = DryRunSimulator(effective_store, access=effective_access)
    return OperationSimulationResponse.from_prediction(simulator.simulate_operation(operation))


def validate_operations_request(
    document: object,
    *,
    store: SecretStore | None = None,
    access: AccessPolicy | None = None,
) -> ValidationResponse:
    """Check each operation on its own; ``checkDependencies`` adds the path analysis."""

    request = _parse_request(ValidateRequest, document)
    effective_store, effective_access = _resolve(store, access)
    simulator = DryRunSimulator(effective_store, access=effective_access)
    result = simulator.validate(
        request.to_operations(), check_dependencies=request.check_dependencies
    )
    return ValidationResponse.from_result(result, check_dependencies=request.check_dependencies)


def bulk_write(
    document: object,
    *,
    store: SecretStore | None = None,
    access: AccessPolicy | None = None,
) -> BulkResponse:
    request = _parse_request(BulkWriteRequest, document)
    effective_store, effective_access = _resolve(store, access)
    executor = BulkExecutor(effective_store, access=effective_access)
    return BulkResponse.from_result(executor.write(request.to_items(), dry_run=request.dry_run))


def bulk_read(
    document: object,
    *,
    store: SecretStore | None = None,
    access: AccessPolicy | None = None,
) -> BulkResponse:
    request = _parse_request(BulkReadRequest, document)
    effective_store, effective_access = _resolve(store, access)
    executor = BulkExecutor(effective_store, access=effective_access)
    return BulkResponse.from_result(executor.read(request.paths))


def bulk_delete(
    document: object,
    *,
    store: SecretStore | None = None,
    access: AccessPolicy | None = None,
) -> BulkResponse:
    request = _parse_request(BulkDeleteRequest, document)
    effective_store, effective_access = _resolve(store, access)
    executor = BulkExecutor(effective_store, access=effective_access)
    return BulkResponse.from_result(executor.delete(request.paths, dry_run=request.dry_run))
