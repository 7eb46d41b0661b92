"""JSON request and response documents."""

from __future__ import annotations

from .schema import (
    BulkDeleteRequest,
    BulkReadRequest,
    BulkResponse,
    BulkWriteInput,
    BulkWriteRequest,
    DryRunResponse,
    ErrorResponse,
    OperationInput,
    OperationSimulationResponse,
    TransactionRequest,
    TransactionResponse,
    ValidateRequest,
    ValidationResponse,
)

__all__ = [
    "BulkDeleteRequest",
    "BulkReadRequest",
    "BulkResponse",
    "BulkWriteInput",
    "BulkWriteRequest",
    "DryRunResponse",
    "ErrorResponse",
    "OperationInput",
    "OperationSimulationResponse",
    "TransactionRequest",
    "TransactionResponse",
    "ValidateRequest",
    "ValidationResponse",
]
