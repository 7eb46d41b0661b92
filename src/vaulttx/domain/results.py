"""Result envelopes returned by the engines."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import uuid4

if TYPE_CHECKING:
    from .dependencies import PathDependency
    from .operations import JsonPayload, OperationKind


def new_transaction_id() -> str:
    return f"tx_{int(time.time() * 1000)}_{uuid4().hex[:9]}"


def elapsed_ms(started: float) -> int:
    """Milliseconds since ``started`` (a ``time.perf_counter`` reading)."""

    return int((time.perf_counter() - started) * 1000)


@dataclass(slots=True)
class OperationOutcome:
    path: str
    success: bool
    error: str | None = None
    rollback_executed: bool | None = None
    data: JsonPayload | None = None


@dataclass(frozen=True, slots=True)
class TransactionCounts:
    total: int
    succeeded: int
    failed: int
    rolled_back: int


@dataclass(slots=True)
class TransactionResult:
    """Outcome of one committed or rolled back transaction."""

    id: str
    committed: bool
    outcomes: list[OperationOutcome]
    rollback_outcomes: list[OperationOutcome]
    counts: TransactionCounts
    duration_ms: int


@dataclass(slots=True)
class OperationPrediction:
    """Dry-run verdict for one operation."""

    index: int
    kind: OperationKind
    path: str
    would_succeed: bool
    validation_errors: list[str] = field(default_factory=list[str])
    path_exists: bool = False
    existing_payload: JsonPayload | None = None


@dataclass(slots=True)
class DryRunResult:
    id: str
    predictions: list[OperationPrediction]
    dependencies: list[PathDependency]
    duration_ms: int

    @property
    def would_succeed(self) -> bool:
        return all(prediction.would_succeed for prediction in self.predictions)

    @property
    def would_fail(self) -> int:
        return sum(1 for prediction in self.predictions if not prediction.would_succeed)


@dataclass(frozen=True, slots=True)
class BulkCounts:
    total: int
    succeeded: int
    failed: int


@dataclass(slots=True)
class BulkResult:
    """Outcome of a best-effort batch; partial success is expected."""

    kind: OperationKind
    outcomes: list[OperationOutcome]
    duration_ms: int
    dry_run: bool = False

    @property
    def counts(self) -> BulkCounts:
        succeeded = sum(1 for outcome in self.outcomes if outcome.success)
        return BulkCounts(
            total=len(self.outcomes),
            succeeded=succeeded,
            failed=len(self.outcomes) - succeeded,
        )

    @property
    def success(self) -> bool:
        return all(outcome.success for outcome in self.outcomes)
