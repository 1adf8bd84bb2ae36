"""C04 — Enclosed Area.

Spherically-corrected shoelace area of the loop, wrapped back to the start.
"""

from __future__ import annotations

import logging

from landclaim.engine.context import ValidationContext
from landclaim.engine.registry import check
from landclaim.engine.types import InvalidReason
from landclaim.utils.polygon import ring_area

logger = logging.getLogger(__name__)


@check(id="C04", dependencies=["C03"], description="Enclosed area reaches the minimum")
def enclosed_area(ctx: ValidationContext) -> InvalidReason | None:
    cfg = ctx.config
    ctx.area_m2 = ring_area(ctx.points, cfg.earth_radius)
    if ctx.area_m2 < cfg.minimum_enclosed_area:
        ctx.details["C04"] = f"{ctx.area_m2:.0f}m² (needs >= {cfg.minimum_enclosed_area:.0f}m²)"
        logger.warning("Area: %.0fm² (needs >= %.0fm²)", ctx.area_m2, cfg.minimum_enclosed_area)
        return InvalidReason.INSUFFICIENT_AREA
    logger.info("Area: %.0fm²", ctx.area_m2)
    return None
