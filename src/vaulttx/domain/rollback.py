"""Compensating-operation planning for virtual transactions.

The whole batch is planned before any forward write. Planning walks the batch
over a :class:`SimulatedState`, so the value a rollback restores is the value
the path holds just before that operation runs, including the effect of
earlier operations in the same batch. Store reads happen at most once per
distinct path and all of them happen during planning.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, assert_never

from .errors import RollbackPlanningError, VaultTxError
from .operations import Create, Delete, OperationKind, Read, RollbackOperation, Update
from .state import SimulatedState

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .operations import Operation
    from .ports.secret_store import SecretStore
    from .state import EffectiveEntry

log = getLogger(__name__)


class RollbackPlanner:
    def __init__(self, store: SecretStore) -> None:
        self._store = store

    def plan(self, operations: Sequence[Operation]) -> list[RollbackOperation]:
        """Return one rollback per operation, in forward order.

        Raises ``RollbackPlanningError`` for the first operation that cannot be
        compensated.
        """

        state = SimulatedState(self._store)
        rollbacks: list[RollbackOperation] = []
        for index, operation in enumerate(operations):
            before = self._lookup(state, index, operation)
            rollbacks.append(self._plan_one(index, operation, before))
            state.record(index, operation)
        log.debug("Planned %d rollback operations", len(rollbacks))
        return rollbacks

    def _lookup(
        self, state: SimulatedState, index: int, operation: Operation
    ) -> EffectiveEntry:
        try:
            return state.lookup(operation.path)
        except VaultTxError as exc:
            raise RollbackPlanningError(
                f"Cannot read current state of {operation.path} to plan rollback: {exc}",
                path=operation.path,
                index=index,
            ) from exc

    def _plan_one(
        self, index: int, operation: Operation, before: EffectiveEntry
    ) -> RollbackOperation:
        match operation:
            case Create(path=path):
                if before.exists:
                    raise RollbackPlanningError(
                        f"Cannot create {path}: a secret already exists there and "
                        "deleting it on rollback would lose data",
                        path=path,
                        index=index,
                    )
                return RollbackOperation(kind=OperationKind.DELETE, path=path)
            case Update(path=path):
                if not before.exists:
                    raise RollbackPlanningError(
                        f"Cannot update {path}: no secret exists there to restore on rollback",
                        path=path,
                        index=index,
                    )
                return RollbackOperation(
                    kind=OperationKind.UPDATE,
                    path=path,
                    payload=before.payload,
                    original_payload=before.payload,
                )
            case Delete(path=path):
                if not before.exists:
                    raise RollbackPlanningError(
                        f"Cannot delete {path}: no secret exists there to restore on rollback",
                        path=path,
                        index=index,
                    )
                return RollbackOperation(
                    kind=OperationKind.CREATE,
                    path=path,
                    payload=before.payload,
                    original_payload=before.payload,
                )
            case Read(path=path):
                return RollbackOperation(kind=OperationKind.READ, path=path)
            case _:
                assert_never(operation)
