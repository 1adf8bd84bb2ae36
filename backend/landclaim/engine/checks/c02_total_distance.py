"""C02 — Walked Distance.

Sum of great-circle hops between consecutive points. The closing hop back to
the start is not walked, so it is not counted.
"""

from __future__ import annotations

import logging

from landclaim.engine.context import ValidationContext
from landclaim.engine.registry import check
from landclaim.engine.types import InvalidReason
from landclaim.utils.geo import path_length

logger = logging.getLogger(__name__)


@check(id="C02", dependencies=["C01"], description="Walked distance reaches the minimum")
def total_distance(ctx: ValidationContext) -> InvalidReason | None:
    cfg = ctx.config
    ctx.total_distance_m = path_length(ctx.points, cfg.earth_radius)
    if ctx.total_distance_m < cfg.minimum_total_distance:
        ctx.details["C02"] = (
            f"{ctx.total_distance_m:.0f}m walked (needs >= {cfg.minimum_total_distance:.0f}m)"
        )
        logger.warning(
            "Distance: %.0fm (needs >= %.0fm)", ctx.total_distance_m, cfg.minimum_total_distance
        )
        return InvalidReason.INSUFFICIENT_DISTANCE
    logger.info("Distance: %.0fm", ctx.total_distance_m)
    return None
