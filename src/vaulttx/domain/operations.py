"""Operation model shared by the transaction, dry-run and bulk engines.

A forward operation is one of four frozen dataclasses (``Create``, ``Update``,
``Delete``, ``Read``) forming the ``Operation`` union. Engines dispatch on it
with ``match`` and close every match with ``assert_never`` so a new kind cannot
be added without the planner, simulator and dispatcher handling it.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar, TypeAlias, assert_never

from .errors import OperationValidationError, SecretNotFoundError

if TYPE_CHECKING:
    from .ports.secret_store import SecretStore

JsonPayload: TypeAlias = Mapping[str, object]


class OperationKind(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    READ = "read"

    @property
    def mutates(self) -> bool:
        return self is not OperationKind.READ


@dataclass(frozen=True, slots=True)
class Create:
    """Write a secret that must not exist yet."""

    path: str
    payload: JsonPayload | None
    kind: ClassVar[OperationKind] = OperationKind.CREATE


@dataclass(frozen=True, slots=True)
class Update:
    """Overwrite an existing secret."""

    path: str
    payload: JsonPayload | None
    kind: ClassVar[OperationKind] = OperationKind.UPDATE


@dataclass(frozen=True, slots=True)
class Delete:
    path: str
    kind: ClassVar[OperationKind] = OperationKind.DELETE


@dataclass(frozen=True, slots=True)
class Read:
    path: str
    kind: ClassVar[OperationKind] = OperationKind.READ


Operation: TypeAlias = Create | Update | Delete | Read


@dataclass(frozen=True, slots=True, kw_only=True)
class RollbackOperation:
    """Compensating action for one committed forward operation.

    ``original_payload`` is the value to restore. It is ``None`` for a delete
    (undoing a create) and for the no-op read.
    """

    kind: OperationKind
    path: str
    payload: JsonPayload | None = None
    original_payload: JsonPayload | None = None


@dataclass(frozen=True, slots=True)
class CommittedEntry:
    index: int
    operation: Operation
    rollback: RollbackOperation


def make_operation(
    kind: OperationKind | str,
    path: str,
    payload: JsonPayload | None = None,
) -> Operation:
    """Build an operation from loosely typed input.

    Payloads of create/update operations are kept as given; their structure is
    checked by the engines with :func:`validate_payload`. Payloads passed with
    delete or read operations are ignored.
    """

    try:
        operation_kind = OperationKind(kind)
    except ValueError:
        raise OperationValidationError(f"Unknown operation type: {kind!r}") from None
    if not isinstance(path, str) or not path.strip():
        raise OperationValidationError("Operation path must be a non-empty string", path=path)

    match operation_kind:
        case OperationKind.CREATE:
            return Create(path, payload)
        case OperationKind.UPDATE:
            return Update(path, payload)
        case OperationKind.DELETE:
            return Delete(path)
        case OperationKind.READ:
            return Read(path)
        case _:
            assert_never(operation_kind)


def validate_payload(payload: object) -> list[str]:
    """Return structural problems of a create/update payload (empty when valid)."""

    if payload is None:
        return ["Data is required for create and update operations"]
    if not isinstance(payload, Mapping):
        return [f"Data must be an object, got {type(payload).__name__}"]
    errors: list[str] = []
    if any(not isinstance(key, str) for key in payload):
        errors.append("Data keys must be strings")
    try:
        json.dumps(payload)
    except (TypeError, ValueError) as exc:
        errors.append(f"Data must be JSON-serializable: {exc}")
    return errors


def require_valid_payload(operation: Create | Update) -> JsonPayload:
    payload = operation.payload
    errors = validate_payload(payload)
    if errors or payload is None:
        raise OperationValidationError("; ".join(errors), path=operation.path)
    return payload


def perform(store: SecretStore, operation: Operation) -> JsonPayload | None:
    """Run one forward operation against the store.

    Returns the secret for reads and ``None`` otherwise. Reads of absent paths
    raise ``SecretNotFoundError``.
    """

    match operation:
        case Create() | Update():
            store.write(operation.path, require_valid_payload(operation))
            return None
        case Delete(path=path):
            store.delete(path)
            return None
        case Read(path=path):
            data = store.read(path)
            if data is None:
                raise SecretNotFoundError(path)
            return data
        case _:
            assert_never(operation)


def apply_rollback(store: SecretStore, rollback: RollbackOperation) -> None:
    """Run one compensating operation against the store."""

    match rollback.kind:
        case OperationKind.DELETE:
            store.delete(rollback.path)
        case OperationKind.CREATE | OperationKind.UPDATE:
            if rollback.original_payload is None:
                raise OperationValidationError(
                    f"Rollback for {rollback.path} has nothing to restore",
                    path=rollback.path,
                )
            store.write(rollback.path, rollback.original_payload)
        case OperationKind.READ:
            return
        case _:
            assert_never(rollback.kind)
