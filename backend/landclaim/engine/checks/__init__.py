"""Validation checks. Importing this package registers all of them."""

from landclaim.engine.checks import (  # noqa: F401
    c01_point_count,
    c02_total_distance,
    c03_self_intersection,
    c04_enclosed_area,
)
