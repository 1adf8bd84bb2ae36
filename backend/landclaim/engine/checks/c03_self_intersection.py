"""C03 — Self-Intersection.

Pairwise proper-crossing test over all non-adjacent segments of the snapshot,
ignoring the first/last segments that meet at the closure point.
"""

from __future__ import annotations

import logging

from landclaim.engine.context import ValidationContext
from landclaim.engine.registry import check
from landclaim.engine.types import InvalidReason
from landclaim.utils.polygon import find_self_intersection

logger = logging.getLogger(__name__)


@check(id="C03", dependencies=["C02"], description="Path does not cross itself")
def self_intersection(ctx: ValidationContext) -> InvalidReason | None:
    ctx.intersection = find_self_intersection(ctx.points, skip=ctx.config.self_intersection_skip)
    if ctx.intersection is not None:
        i, j = ctx.intersection
        ctx.details["C03"] = f"segment {i}-{i + 1} crosses segment {j}-{j + 1}"
        logger.warning("Self-intersection: segment %d-%d crosses %d-%d", i, i + 1, j, j + 1)
        return InvalidReason.SELF_INTERSECTING
    logger.info("Self-intersection: none")
    return None
