"""TerritoryValidator — runs the registered checks in dependency order, stopping at the first failure."""

from __future__ import annotations

import logging
import time

from numpy.typing import ArrayLike

import landclaim.engine.checks  # noqa: F401  (registers C01..C04)
from landclaim.engine.config import ClaimConfig, DEFAULT_CONFIG
from landclaim.engine.context import PathSnapshot, ValidationContext
from landclaim.engine.registry import CheckRegistry, get_registry
from landclaim.engine.types import Invalid, Valid, ValidationOutcome

logger = logging.getLogger(__name__)


class TerritoryValidator:
    """Turns a closed path into a Valid/Invalid outcome. Performs no I/O."""

    def __init__(
        self,
        registry: CheckRegistry | None = None,
        config: ClaimConfig | None = None,
    ) -> None:
        self.registry = registry or get_registry()
        self.config = config or DEFAULT_CONFIG

    def validate(self, path: PathSnapshot | ArrayLike) -> ValidationOutcome:
        snapshot = path if isinstance(path, PathSnapshot) else PathSnapshot.of(path)
        return self.run(ValidationContext(snapshot=snapshot, config=self.config))

    def run(self, ctx: ValidationContext) -> ValidationOutcome:
        """Run every check against ``ctx``; measurements are left on the context."""
        start = time.perf_counter()
        logger.info("Validating claim: %d points (v%d)", ctx.point_count, ctx.snapshot.version)

        for spec in self.registry.resolve_order():
            reason = spec.fn(ctx)
            if reason is not None:
                logger.warning("Claim rejected by %s: %s", spec.id, reason.value)
                return Invalid(reason=reason, detail=ctx.details.get(spec.id, ""))
            ctx.completed_checks.append(spec.id)

        elapsed = (time.perf_counter() - start) * 1000
        logger.info(
            "Claim valid: %.0fm² over %.0fm in %.1fms", ctx.area_m2, ctx.total_distance_m, elapsed
        )
        return Valid(
            area_m2=ctx.area_m2,
            point_count=ctx.point_count,
            total_distance_m=ctx.total_distance_m,
        )


def create_validator(config: ClaimConfig | None = None) -> TerritoryValidator:
    """Factory: create a validator over the default check registry."""
    return TerritoryValidator(config=config)
