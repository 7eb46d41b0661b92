"""Sequential all-or-nothing execution over a store without transactions.

``TransactionExecutor.execute`` runs a saga: every compensating operation is
planned up front, forward operations run one at a time, and the first failure
unwinds the committed prefix newest-first. Pre-flight rejections (access,
malformed payloads, planning) raise; everything after the first forward write
is reported in the returned :class:`TransactionResult`.
"""

from __future__ import annotations

import time
from logging import getLogger
from typing import TYPE_CHECKING

from .access import AccessPolicy
from .operations import (
    CommittedEntry,
    Create,
    Update,
    apply_rollback,
    perform,
    require_valid_payload,
)
from .results import (
    OperationOutcome,
    TransactionCounts,
    TransactionResult,
    elapsed_ms,
    new_transaction_id,
)
from .rollback import RollbackPlanner

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .operations import Operation, RollbackOperation
    from .ports.secret_store import SecretStore

log = getLogger(__name__)


class TransactionExecutor:
    def __init__(
        self,
        store: SecretStore,
        *,
        access: AccessPolicy | None = None,
        planner: RollbackPlanner | None = None,
    ) -> None:
        self._store = store
        self._access = access or AccessPolicy()
        self._planner = planner or RollbackPlanner(store)

    def execute(self, operations: Sequence[Operation]) -> TransactionResult:
        started = time.perf_counter()
        transaction_id = new_transaction_id()
        log.info("Starting transaction %s with %d operations", transaction_id, len(operations))

        self._preflight(operations)
        rollbacks = self._planner.plan(operations)

        outcomes: list[OperationOutcome] = []
        committed: list[CommittedEntry] = []
        failed = False
        for index, (operation, rollback) in enumerate(zip(operations, rollbacks, strict=True)):
            try:
                data = perform(self._store, operation)
            except Exception as exc:  # noqa: BLE001
                log.warning(
                    "Transaction %s: operation #%d (%s %s) failed: %s",
                    transaction_id,
                    index + 1,
                    operation.kind,
                    operation.path,
                    exc,
                )
                outcomes.append(OperationOutcome(path=operation.path, success=False, error=str(exc)))
                failed = True
                break
            outcomes.append(OperationOutcome(path=operation.path, success=True, data=data))
            committed.append(CommittedEntry(index=index, operation=operation, rollback=rollback))

        rollback_outcomes: list[OperationOutcome] = []
        if failed:
            rollback_outcomes = self._unwind(transaction_id, committed, outcomes)

        rolled_back = sum(1 for outcome in rollback_outcomes if outcome.rollback_executed)
        result = TransactionResult(
            id=transaction_id,
            committed=not failed,
            outcomes=outcomes,
            rollback_outcomes=rollback_outcomes,
            counts=TransactionCounts(
                total=len(operations),
                succeeded=len(committed),
                failed=1 if failed else 0,
                rolled_back=rolled_back,
            ),
            duration_ms=elapsed_ms(started),
        )
        if result.committed:
            log.info("Transaction %s committed (%d operations)", transaction_id, len(operations))
        else:
            log.info(
                "Transaction %s rolled back: %d of %d compensations applied",
                transaction_id,
                rolled_back,
                len(committed),
            )
        return result

    def _preflight(self, operations: Sequence[Operation]) -> None:
        self._access.check_all(operations)
        for operation in operations:
            if isinstance(operation, Create | Update):
                require_valid_payload(operation)

    def _unwind(
        self,
        transaction_id: str,
        committed: list[CommittedEntry],
        outcomes: list[OperationOutcome],
    ) -> list[OperationOutcome]:
        """Apply compensations newest-first; a failing step never stops the rest."""

        rollback_outcomes: list[OperationOutcome] = []
        for entry in reversed(committed):
            outcome = self._compensate(transaction_id, entry.rollback)
            outcomes[entry.index].rollback_executed = outcome.rollback_executed
            rollback_outcomes.append(outcome)
        return rollback_outcomes

    def _compensate(self, transaction_id: str, rollback: RollbackOperation) -> OperationOutcome:
        try:
            apply_rollback(self._store, rollback)
        except Exception as exc:  # noqa: BLE001
            log.error(
                "Transaction %s: rollback %s %s failed, path left dirty: %s",
                transaction_id,
                rollback.kind,
                rollback.path,
                exc,
            )
            return OperationOutcome(
                path=rollback.path,
                success=False,
                error=str(exc),
                rollback_executed=False,
            )
        log.debug("Transaction %s: rolled back %s %s", transaction_id, rollback.kind, rollback.path)
        return OperationOutcome(path=rollback.path, success=True, rollback_executed=True)


def execute_transaction(
    store: SecretStore,
    operations: Sequence[Operation],
    *,
    access: AccessPolicy | None = None,
) -> TransactionResult:
    return TransactionExecutor(store, access=access).execute(operations)
