"""Per-call overlay of what a batch would have done to the store so far."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, assert_never

from .operations import Create, Delete, Read, Update

if TYPE_CHECKING:
    from .operations import JsonPayload, Operation
    from .ports.secret_store import SecretStore


@dataclass(frozen=True, slots=True)
class EffectiveEntry:
    """State of one path as seen by the next operation of the batch.

    ``changed_by`` is the index of the batch operation that produced this state,
    or ``None`` when the state was read from the store.
    """

    exists: bool
    payload: JsonPayload | None = None
    changed_by: int | None = None


class SimulatedState:
    """Overlay seeded lazily from real reads, one read per distinct path.

    Instances belong to a single planning or simulation pass and are never
    shared across calls. Only ``SecretStore.read`` is ever invoked.
    """

    def __init__(self, store: SecretStore) -> None:
        self._store = store
        self._entries: dict[str, EffectiveEntry] = {}

    def lookup(self, path: str) -> EffectiveEntry:
        entry = self._entries.get(path)
        if entry is None:
            payload = self._store.read(path)
            entry = EffectiveEntry(exists=payload is not None, payload=payload)
            self._entries[path] = entry
        return entry

    def record(self, index: int, operation: Operation) -> None:
        """Apply the hypothetical effect of a successful ``operation``."""

        match operation:
            case Create(path=path, payload=payload) | Update(path=path, payload=payload):
                self._entries[path] = EffectiveEntry(exists=True, payload=payload, changed_by=index)
            case Delete(path=path):
                self._entries[path] = EffectiveEntry(exists=False, changed_by=index)
            case Read():
                return
            case _:
                assert_never(operation)
