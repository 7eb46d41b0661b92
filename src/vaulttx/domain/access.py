"""Client-side access gate consulted before every operation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import PathNotAllowedError, PermissionDeniedError, VaultTxError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .operations import Operation


@dataclass(frozen=True, slots=True)
class AccessPolicy:
    """Read/write permission flags plus a prefix allow-list of paths.

    An empty ``allowed_paths`` allows every path.
    """

    allow_read: bool = True
    allow_write: bool = True
    allowed_paths: tuple[str, ...] = ()

    def allows(self, path: str) -> bool:
        if not self.allowed_paths:
            return True
        return any(path.startswith(prefix) for prefix in self.allowed_paths)

    def denial(self, operation: Operation) -> VaultTxError | None:
        """Return the error that would reject ``operation``, if any."""

        if operation.kind.mutates:
            if not self.allow_write:
                return PermissionDeniedError(
                    "Write operations are not permitted", path=operation.path
                )
        elif not self.allow_read:
            return PermissionDeniedError("Read operations are not permitted", path=operation.path)
        if not self.allows(operation.path):
            return PathNotAllowedError(operation.path)
        return None

    def check(self, operation: Operation) -> None:
        error = self.denial(operation)
        if error is not None:
            raise error

    def check_all(self, operations: Iterable[Operation]) -> None:
        for operation in operations:
            self.check(operation)
