"""Port for the remote key-value secret store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping


@runtime_checkable
class SecretStore(Protocol):
    """Single-key contract offered by the remote store.

    The store has no multi-key transactions. ``read`` returns ``None`` when the
    path does not exist; ``write`` is an upsert. Failures of the call itself are
    raised as ``RemoteTransportError``.
    """

    def read(self, path: str) -> Mapping[str, object] | None: ...

    def write(self, path: str, payload: Mapping[str, object]) -> None: ...

    def delete(self, path: str) -> None: ...


__all__ = ["SecretStore"]
