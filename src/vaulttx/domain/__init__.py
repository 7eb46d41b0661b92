"""Virtual-transaction engine over a single-key secret store."""

from __future__ import annotations

from .access import AccessPolicy
from .bulk import BulkExecutor, BulkItem
from .dependencies import PathDependency, analyze_dependencies
from .errors import (
    OperationValidationError,
    PathNotAllowedError,
    PermissionDeniedError,
    RemoteTransportError,
    RollbackPlanningError,
    SecretNotFoundError,
    VaultTxError,
)
from .operations import (
    CommittedEntry,
    Create,
    Delete,
    JsonPayload,
    Operation,
    OperationKind,
    Read,
    RollbackOperation,
    Update,
    make_operation,
)
from .results import (
    BulkCounts,
    BulkResult,
    DryRunResult,
    OperationOutcome,
    OperationPrediction,
    TransactionCounts,
    TransactionResult,
)
from .rollback import RollbackPlanner
from .simulation import DryRunSimulator, simulate_transaction
from .transaction import TransactionExecutor, execute_transaction

__all__ = [
    "AccessPolicy",
    "BulkCounts",
    "BulkExecutor",
    "BulkItem",
    "BulkResult",
    "CommittedEntry",
    "Create",
    "Delete",
    "DryRunResult",
    "DryRunSimulator",
    "JsonPayload",
    "Operation",
    "OperationKind",
    "OperationOutcome",
    "OperationPrediction",
    "OperationValidationError",
    "PathDependency",
    "PathNotAllowedError",
    "PermissionDeniedError",
    "Read",
    "RemoteTransportError",
    "RollbackOperation",
    "RollbackPlanner",
    "RollbackPlanningError",
    "SecretNotFoundError",
    "TransactionCounts",
    "TransactionExecutor",
    "TransactionResult",
    "Update",
    "VaultTxError",
    "analyze_dependencies",
    "execute_transaction",
    "make_operation",
    "simulate_transaction",
]
