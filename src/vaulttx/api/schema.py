"""Pydantic models for the JSON request and response documents."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from vaulttx.domain.bulk import BulkItem
from vaulttx.domain.operations import OperationKind, make_operation

if TYPE_CHECKING:
    from vaulttx.domain.dependencies import PathDependency
    from vaulttx.domain.errors import VaultTxError
    from vaulttx.domain.operations import JsonPayload, Operation
    from vaulttx.domain.results import (
        BulkResult,
        DryRunResult,
        OperationOutcome,
        OperationPrediction,
        TransactionResult,
    )


def _as_dict(payload: JsonPayload | None) -> dict[str, Any] | None:
    return dict(payload) if payload is not None else None


class RequestModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True, alias_generator=to_camel)


class ResponseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# Requests


class OperationInput(RequestModel):
    type: OperationKind
    path: str
    data: dict[str, Any] | None = None

    def to_operation(self) -> Operation:
        return make_operation(self.type, self.path, self.data)


class TransactionRequest(RequestModel):
    operations: list[OperationInput]
    dry_run: bool = False

    def to_operations(self) -> list[Operation]:
        return [operation.to_operation() for operation in self.operations]


class BulkWriteInput(RequestModel):
    path: str
    data: dict[str, Any]


class BulkWriteRequest(RequestModel):
    operations: list[BulkWriteInput]
    dry_run: bool = False

    def to_items(self) -> list[BulkItem]:
        return [BulkItem(path=item.path, payload=item.data) for item in self.operations]


class ValidateRequest(RequestModel):
    operations: list[OperationInput]
    check_dependencies: bool = True

    def to_operations(self) -> list[Operation]:
        return [operation.to_operation() for operation in self.operations]


class BulkReadRequest(RequestModel):
    """Reads never mutate, so there is no dry-run flag to accept."""

    paths: list[str]


class BulkDeleteRequest(BulkReadRequest):
    dry_run: bool = False


# Responses


class OutcomeOut(ResponseModel):
    path: str
    success: bool
    error: str | None = None
    rollback_executed: bool | None = None
    data: dict[str, Any] | None = None

    @classmethod
    def from_outcome(cls, outcome: OperationOutcome) -> OutcomeOut:
        return cls(
            path=outcome.path,
            success=outcome.success,
            error=outcome.error,
            rollback_executed=outcome.rollback_executed,
            data=_as_dict(outcome.data),
        )


class TransactionSummaryOut(ResponseModel):
    total: int
    succeeded: int
    failed: int
    rolled_back: int
    duration: int


class TransactionResponse(ResponseModel):
    success: bool
    transaction_id: str
    results: list[OutcomeOut]
    rollback_results: list[OutcomeOut] | None = None
    summary: TransactionSummaryOut

    @classmethod
    def from_result(cls, result: TransactionResult) -> TransactionResponse:
        counts = result.counts
        return cls(
            success=result.committed,
            transaction_id=result.id,
            results=[OutcomeOut.from_outcome(outcome) for outcome in result.outcomes],
            rollback_results=[
                OutcomeOut.from_outcome(outcome) for outcome in result.rollback_outcomes
            ]
            or None,
            summary=TransactionSummaryOut(
                total=counts.total,
                succeeded=counts.succeeded,
                failed=counts.failed,
                rolled_back=counts.rolled_back,
                duration=result.duration_ms,
            ),
        )


class PredictionOut(ResponseModel):
    path: str
    type: OperationKind
    would_succeed: bool
    validation_errors: list[str] | None = None
    path_exists: bool
    existing_data: dict[str, Any] | None = None

    @classmethod
    def from_prediction(cls, prediction: OperationPrediction) -> PredictionOut:
        return cls(
            path=prediction.path,
            type=prediction.kind,
            would_succeed=prediction.would_succeed,
            validation_errors=list(prediction.validation_errors) or None,
            path_exists=prediction.path_exists,
            existing_data=_as_dict(prediction.existing_payload),
        )


class ValidationErrorOut(ResponseModel):
    path: str
    errors: list[str]


class ValidationSummaryOut(ResponseModel):
    total_operations: int
    would_succeed: int
    would_fail: int
    validation_errors: list[ValidationErrorOut]


class DependencyOut(ResponseModel):
    path: str
    operations: list[int]
    types: list[OperationKind]
    conflicts: list[str]

    @classmethod
    def from_dependency(cls, dependency: PathDependency) -> DependencyOut:
        return cls(
            path=dependency.path,
            operations=[index + 1 for index in dependency.indices],
            types=list(dependency.kinds),
            conflicts=list(dependency.conflicts),
        )


class DurationOut(ResponseModel):
    duration: int


class DryRunResponse(ResponseModel):
    dry_run: Literal[True] = True
    would_succeed: bool
    transaction_id: str
    results: list[PredictionOut]
    validation_summary: ValidationSummaryOut
    dependencies: list[DependencyOut]
    summary: DurationOut

    @classmethod
    def from_result(cls, result: DryRunResult) -> DryRunResponse:
        predictions = result.predictions
        return cls(
            would_succeed=result.would_succeed,
            transaction_id=result.id,
            results=[PredictionOut.from_prediction(prediction) for prediction in predictions],
            validation_summary=ValidationSummaryOut(
                total_operations=len(predictions),
                would_succeed=len(predictions) - result.would_fail,
                would_fail=result.would_fail,
                validation_errors=[
                    ValidationErrorOut(path=prediction.path, errors=list(prediction.validation_errors))
                    for prediction in predictions
                    if prediction.validation_errors
                ],
            ),
            dependencies=[DependencyOut.from_dependency(dep) for dep in result.dependencies],
            summary=DurationOut(duration=result.duration_ms),
        )


class OperationSimulationResponse(ResponseModel):
    dry_run: Literal[True] = True
    would_succeed: bool
    result: PredictionOut

    @classmethod
    def from_prediction(cls, prediction: OperationPrediction) -> OperationSimulationResponse:
        return cls(
            would_succeed=prediction.would_succeed,
            result=PredictionOut.from_prediction(prediction),
        )


class IndividualSummaryOut(ResponseModel):
    total_operations: int
    would_succeed_individually: int
    would_fail_individually: int
    duration: int


class ValidationResponse(ResponseModel):
    dry_run: Literal[True] = True
    would_succeed: bool
    results: list[PredictionOut]
    summary: IndividualSummaryOut
    dependencies: list[DependencyOut] | None = None

    @classmethod
    def from_result(
        cls, result: DryRunResult, *, check_dependencies: bool = True
    ) -> ValidationResponse:
        predictions = result.predictions
        return cls(
            would_succeed=result.would_succeed,
            results=[PredictionOut.from_prediction(prediction) for prediction in predictions],
            summary=IndividualSummaryOut(
                total_operations=len(predictions),
                would_succeed_individually=len(predictions) - result.would_fail,
                would_fail_individually=result.would_fail,
                duration=result.duration_ms,
            ),
            dependencies=[DependencyOut.from_dependency(dep) for dep in result.dependencies]
            if check_dependencies
            else None,
        )


class BulkSummaryOut(ResponseModel):
    total: int
    succeeded: int
    failed: int
    duration: int


class BulkResponse(ResponseModel):
    success: bool
    dry_run: bool | None = None
    results: list[OutcomeOut]
    summary: BulkSummaryOut

    @classmethod
    def from_result(cls, result: BulkResult) -> BulkResponse:
        counts = result.counts
        return cls(
            success=result.success,
            dry_run=True if result.dry_run else None,
            results=[OutcomeOut.from_outcome(outcome) for outcome in result.outcomes],
            summary=BulkSummaryOut(
                total=counts.total,
                succeeded=counts.succeeded,
                failed=counts.failed,
                duration=result.duration_ms,
            ),
        )


class ErrorOut(ResponseModel):
    code: str
    message: str
    path: str | None = None


class ErrorResponse(ResponseModel):
    success: Literal[False] = False
    error: ErrorOut

    @classmethod
    def from_error(cls, error: VaultTxError) -> ErrorResponse:
        return cls(error=ErrorOut(code=error.code, message=str(error), path=error.path))
