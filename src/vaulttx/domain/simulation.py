"""Side-effect-free prediction of transaction outcomes.

The simulator walks the batch in order over a :class:`SimulatedState`, so an
operation sees the hypothetical effects of every earlier operation that would
have succeeded. It only ever reads from the store. Access denials are reported
as validation errors of the affected operation instead of rejecting the batch.
"""

from __future__ import annotations

import time
from logging import getLogger
from typing import TYPE_CHECKING, assert_never

from .access import AccessPolicy
from .dependencies import analyze_dependencies
from .errors import VaultTxError
from .operations import Create, Delete, Read, Update, validate_payload
from .results import DryRunResult, OperationPrediction, elapsed_ms, new_transaction_id
from .state import SimulatedState

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .operations import Operation
    from .ports.secret_store import SecretStore
    from .state import EffectiveEntry

log = getLogger(__name__)


class DryRunSimulator:
    def __init__(self, store: SecretStore, *, access: AccessPolicy | None = None) -> None:
        self._store = store
        self._access = access or AccessPolicy()

    def simulate(self, operations: Sequence[Operation]) -> DryRunResult:
        started = time.perf_counter()
        state = SimulatedState(self._store)
        predictions = [
            self._predict(state, index, operation) for index, operation in enumerate(operations)
        ]
        result = DryRunResult(
            id=new_transaction_id(),
            predictions=predictions,
            dependencies=analyze_dependencies(operations),
            duration_ms=elapsed_ms(started),
        )
        log.info(
            "Simulation %s: %d/%d operations would succeed",
            result.id,
            len(predictions) - result.would_fail,
            len(predictions),
        )
        return result

    def simulate_operation(self, operation: Operation, *, index: int = 0) -> OperationPrediction:
        """Predict a single operation against the current store state."""

        return self._predict(SimulatedState(self._store), index, operation)

    def validate(
        self,
        operations: Sequence[Operation],
        *,
        check_dependencies: bool = True,
    ) -> DryRunResult:
        """Predict every operation on its own, ignoring the rest of the batch.

        Unlike :meth:`simulate` no prediction sees the effects of another
        operation; conflicts between them are left to the dependency analysis.
        """

        started = time.perf_counter()
        predictions = [
            self.simulate_operation(operation, index=index)
            for index, operation in enumerate(operations)
        ]
        result = DryRunResult(
            id=new_transaction_id(),
            predictions=predictions,
            dependencies=analyze_dependencies(operations) if check_dependencies else [],
            duration_ms=elapsed_ms(started),
        )
        log.info(
            "Validation %s: %d/%d operations would succeed individually",
            result.id,
            len(predictions) - result.would_fail,
            len(predictions),
        )
        return result

    def _predict(
        self, state: SimulatedState, index: int, operation: Operation
    ) -> OperationPrediction:
        prediction = OperationPrediction(
            index=index,
            kind=operation.kind,
            path=operation.path,
            would_succeed=False,
        )
        denial = self._access.denial(operation)
        if denial is not None:
            prediction.validation_errors.append(str(denial))
            return prediction

        errors = prediction.validation_errors
        if isinstance(operation, Create | Update):
            errors.extend(validate_payload(operation.payload))

        try:
            entry = state.lookup(operation.path)
        except VaultTxError as exc:
            errors.append(f"Could not read current state: {exc}")
            return prediction

        prediction.path_exists = entry.exists
        prediction.existing_payload = entry.payload
        errors.extend(_feasibility(operation, entry))
        if not errors:
            prediction.would_succeed = True
            state.record(index, operation)
        else:
            log.debug(
                "Operation #%d (%s %s) would fail: %s",
                index + 1,
                operation.kind,
                operation.path,
                errors,
            )
        return prediction


def _feasibility(operation: Operation, entry: EffectiveEntry) -> list[str]:
    cause = (
        f"due to previous operation #{entry.changed_by + 1} in this transaction"
        if entry.changed_by is not None
        else None
    )
    match operation:
        case Create():
            if not entry.exists:
                return []
            if cause:
                return [f"Cannot create: secret would already exist {cause}"]
            return ["Cannot create: secret already exists at the specified path"]
        case Update():
            if entry.exists:
                return []
            if cause:
                return [f"Cannot update: secret would not exist {cause}"]
            return ["Cannot update: secret does not exist at the specified path"]
        case Delete():
            if entry.exists:
                return []
            if cause:
                return [f"Cannot delete: secret would not exist {cause}"]
            return ["Secret does not exist at the specified path"]
        case Read():
            return []
        case _:
            assert_never(operation)


def simulate_transaction(
    store: SecretStore,
    operations: Sequence[Operation],
    *,
    access: AccessPolicy | None = None,
) -> DryRunResult:
    return DryRunSimulator(store, access=access).simulate(operations)
