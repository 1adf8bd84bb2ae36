"""Check registry — every validation check is a standalone function registered via decorator.

Usage:
    @check(id="C02", dependencies=["C01"], description="Walked distance")
    def total_distance(ctx: ValidationContext) -> InvalidReason | None:
        ctx.total_distance_m = path_length(ctx.points)
        ...

A check returns None when it passes, or the InvalidReason that rejects the
claim. Execution order comes from the dependency graph, so adding a check is
one new module with the decorator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from landclaim.engine.context import ValidationContext
    from landclaim.engine.types import InvalidReason

logger = logging.getLogger(__name__)

CheckFn = Callable[["ValidationContext"], "InvalidReason | None"]


@dataclass
class CheckSpec:
    id: str
    fn: CheckFn
    dependencies: list[str] = field(default_factory=list)
    description: str = ""


class CheckRegistry:
    """Registry of validation checks, populated at import time."""

    def __init__(self) -> None:
        self._checks: dict[str, CheckSpec] = {}

    def register(self, spec: CheckSpec) -> None:
        if spec.id in self._checks:
            raise ValueError(f"Duplicate check ID: {spec.id}")
        self._checks[spec.id] = spec
        logger.debug("Registered check %s", spec.id)

    def get(self, check_id: str) -> CheckSpec:
        return self._checks[check_id]

    def all(self) -> list[CheckSpec]:
        return sorted(self._checks.values(), key=lambda s: s.id)

    def resolve_order(self) -> list[CheckSpec]:
        """Topological sort respecting dependencies, ties broken by ID."""
        pool = self._checks
        for spec in pool.values():
            unknown = [dep for dep in spec.dependencies if dep not in pool]
            if unknown:
                raise ValueError(f"Check {spec.id} depends on unknown checks: {unknown}")

        # Kahn's algorithm
        in_degree: dict[str, int] = {cid: len(spec.dependencies) for cid, spec in pool.items()}
        queue = sorted(cid for cid, d in in_degree.items() if d == 0)
        ordered: list[CheckSpec] = []

        while queue:
            cid = queue.pop(0)
            ordered.append(pool[cid])
            for other_id, other_spec in pool.items():
                if cid in other_spec.dependencies:
                    in_degree[other_id] -= 1
                    if in_degree[other_id] == 0:
                        queue.append(other_id)
                        queue.sort()

        if len(ordered) != len(pool):
            missing = set(pool) - {s.id for s in ordered}
            raise ValueError(f"Circular dependency detected among: {missing}")

        return ordered

    @property
    def count(self) -> int:
        return len(self._checks)


# Module-level registry; written only by @check at import time
_registry = CheckRegistry()


def get_registry() -> CheckRegistry:
    return _registry


def check(*, id: str, dependencies: list[str] | None = None, description: str = ""):
    """Decorator to register a validation check."""

    def decorator(fn: CheckFn) -> CheckFn:
        _registry.register(
            CheckSpec(id=id, fn=fn, dependencies=dependencies or [], description=description)
        )
        return fn

    return decorator
