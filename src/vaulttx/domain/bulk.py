"""Best-effort batches of independent operations.

Unlike :mod:`vaulttx.domain.transaction` there is no ordering guarantee and no
compensation: each item is applied on its own, a failure is recorded against
that item and the batch moves on. Bulk writes are upserts.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, assert_never

from .access import AccessPolicy
from .errors import OperationValidationError
from .operations import (
    Create,
    Delete,
    OperationKind,
    Read,
    Update,
    make_operation,
    perform,
    require_valid_payload,
)
from .results import BulkResult, OperationOutcome, elapsed_ms

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .operations import JsonPayload, Operation
    from .ports.secret_store import SecretStore

log = getLogger(__name__)

BULK_KINDS = frozenset({OperationKind.CREATE, OperationKind.READ, OperationKind.DELETE})


@dataclass(frozen=True, slots=True)
class BulkItem:
    path: str
    payload: JsonPayload | None = None


class BulkExecutor:
    def __init__(self, store: SecretStore, *, access: AccessPolicy | None = None) -> None:
        self._store = store
        self._access = access or AccessPolicy()

    def apply(
        self,
        kind: OperationKind | str,
        items: Sequence[BulkItem],
        *,
        dry_run: bool = False,
    ) -> BulkResult:
        bulk_kind = OperationKind(kind)
        if bulk_kind not in BULK_KINDS:
            raise OperationValidationError(f"Bulk operations do not support {bulk_kind}")

        started = time.perf_counter()
        outcomes = [self._apply_one(bulk_kind, item, dry_run=dry_run) for item in items]
        result = BulkResult(
            kind=bulk_kind,
            outcomes=outcomes,
            duration_ms=elapsed_ms(started),
            dry_run=dry_run,
        )
        counts = result.counts
        log.info(
            "Bulk %s%s finished: total=%s, succeeded=%s, failed=%s",
            bulk_kind,
            " (dry run)" if dry_run else "",
            counts.total,
            counts.succeeded,
            counts.failed,
        )
        return result

    def write(self, items: Sequence[BulkItem], *, dry_run: bool = False) -> BulkResult:
        return self.apply(OperationKind.CREATE, items, dry_run=dry_run)

    def read(self, paths: Iterable[str]) -> BulkResult:
        return self.apply(OperationKind.READ, [BulkItem(path) for path in paths])

    def delete(self, paths: Iterable[str], *, dry_run: bool = False) -> BulkResult:
        return self.apply(OperationKind.DELETE, [BulkItem(path) for path in paths], dry_run=dry_run)

    def _apply_one(self, kind: OperationKind, item: BulkItem, *, dry_run: bool) -> OperationOutcome:
        try:
            operation = make_operation(kind, item.path, item.payload)
            self._access.check(operation)
            if dry_run:
                self._predict(operation)
                return OperationOutcome(path=item.path, success=True)
            data = perform(self._store, operation)
        except Exception as exc:  # noqa: BLE001
            log.warning("Bulk %s of %s failed: %s", kind, item.path, exc)
            return OperationOutcome(path=item.path, success=False, error=str(exc))
        return OperationOutcome(path=item.path, success=True, data=data)

    def _predict(self, operation: Operation) -> None:
        """Raise if ``operation`` would fail; never mutates the store."""

        match operation:
            case Create() | Update():
                require_valid_payload(operation)
            case Delete() | Read():
                if self._store.read(operation.path) is None:
                    raise OperationValidationError(
                        "Secret does not exist at the specified path", path=operation.path
                    )
            case _:
                assert_never(operation)
