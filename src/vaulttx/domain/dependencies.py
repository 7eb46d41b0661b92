"""Static analysis of operations that touch the same path within one batch."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .operations import OperationKind

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .operations import Operation


@dataclass(slots=True)
class PathDependency:
    """Operations sharing ``path``, in batch order (0-based indices)."""

    path: str
    indices: list[int] = field(default_factory=list[int])
    kinds: list[OperationKind] = field(default_factory=list[OperationKind])
    conflicts: list[str] = field(default_factory=list[str])


def analyze_dependencies(operations: Sequence[Operation]) -> list[PathDependency]:
    """Group operations by path and flag orderings that cannot all succeed.

    Only paths with more than one operation are returned.
    """

    groups: dict[str, PathDependency] = {}
    for index, operation in enumerate(operations):
        group = groups.setdefault(operation.path, PathDependency(path=operation.path))
        group.indices.append(index)
        group.kinds.append(operation.kind)

    dependencies = [group for group in groups.values() if len(group.indices) > 1]
    for group in dependencies:
        group.conflicts.extend(_conflicts(group))
    return dependencies


def _conflicts(group: PathDependency) -> list[str]:
    conflicts: list[str] = []
    kinds = group.kinds
    if kinds.count(OperationKind.CREATE) > 1:
        conflicts.append("Multiple CREATE operations on the same path will conflict")
    if kinds.count(OperationKind.DELETE) > 1:
        conflicts.append("Multiple DELETE operations on the same path will conflict")
    if OperationKind.DELETE in kinds:
        first_delete = kinds.index(OperationKind.DELETE)
        after = kinds[first_delete + 1 :]
        # a create re-establishes the path; only look up to it
        if OperationKind.CREATE in after:
            after = after[: after.index(OperationKind.CREATE)]
        if OperationKind.UPDATE in after or OperationKind.READ in after:
            conflicts.append(
                "UPDATE or READ operations after a DELETE target a path that will no longer exist"
            )
    return conflicts
