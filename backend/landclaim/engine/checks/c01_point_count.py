"""C01 — Point Count.

A loop needs enough sampled vertices to describe a parcel at all.
"""

from __future__ import annotations

import logging

from landclaim.engine.context import ValidationContext
from landclaim.engine.registry import check
from landclaim.engine.types import InvalidReason

logger = logging.getLogger(__name__)


@check(id="C01", description="Path has the minimum number of sampled points")
def point_count(ctx: ValidationContext) -> InvalidReason | None:
    required = ctx.config.minimum_path_points
    if ctx.point_count < required:
        ctx.details["C01"] = f"{ctx.point_count} points (needs >= {required})"
        logger.warning("Point count: %d (needs >= %d)", ctx.point_count, required)
        return InvalidReason.INSUFFICIENT_POINTS
    logger.info("Point count: %d", ctx.point_count)
    return None
