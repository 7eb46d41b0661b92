"""Error taxonomy shared by the transaction, dry-run and bulk engines."""

from __future__ import annotations


class VaultTxError(RuntimeError):
    """Base class for failures raised by the engines and the store adapters."""

    code = "VAULTTX_ERROR"

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class PermissionDeniedError(VaultTxError):
    """Raised when reads or writes are disabled for the attempted operation."""

    code = "PERMISSION_DENIED"


class PathNotAllowedError(VaultTxError):
    """Raised when a path falls outside the configured allow-list."""

    code = "PATH_NOT_ALLOWED"

    def __init__(self, path: str) -> None:
        super().__init__(f"Access to path '{path}' is not allowed", path=path)


class SecretNotFoundError(VaultTxError):
    """Raised when the store reports a path as absent."""

    code = "SECRET_NOT_FOUND"

    def __init__(self, path: str) -> None:
        super().__init__(f"Secret not found at path: {path}", path=path)


class RollbackPlanningError(VaultTxError):
    """Raised when no compensating operation can be derived for an operation."""

    code = "ROLLBACK_PLANNING_FAILED"

    def __init__(self, message: str, *, path: str, index: int) -> None:
        super().__init__(message, path=path)
        self.index = index


class RemoteTransportError(VaultTxError):
    """Raised when the remote store call itself fails."""

    code = "REMOTE_TRANSPORT_ERROR"

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, path=path)
        self.status_code = status_code


class OperationValidationError(VaultTxError, ValueError):
    """Raised when an operation or its payload is structurally invalid."""

    code = "VALIDATION_FAILED"
