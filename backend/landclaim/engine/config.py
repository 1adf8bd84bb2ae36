"""Claim engine configuration — thresholds for sampling, closure, validation and collision."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ClaimConfig:
    """Every tunable of the claim pipeline. Defaults are the game's rules."""

    # Validation
    minimum_path_points: int = 10
    minimum_total_distance: float = 50.0  # meters
    minimum_enclosed_area: float = 100.0  # m²

    # Closure
    closure_distance_threshold: float = 30.0  # meters, inclusive

    # Earth model (spherical)
    earth_radius: float = 6371000.0

    # Sampling / anti-cheat
    soft_speed_cap_kmh: float = 15.0
    hard_speed_cap_kmh: float = 30.0
    minimum_point_spacing: float = 10.0  # meters

    # Collision
    collision_check_interval_seconds: float = 10.0
    caution_distance: float = 100.0
    warning_distance: float = 50.0
    danger_distance: float = 25.0

    # Segments ignored at each end of the walk when testing self-intersection
    self_intersection_skip: int = 2

    def __post_init__(self) -> None:
        if self.minimum_path_points < 4:
            raise ValueError("minimum_path_points must be at least 4")
        if self.soft_speed_cap_kmh > self.hard_speed_cap_kmh:
            raise ValueError("soft_speed_cap_kmh cannot exceed hard_speed_cap_kmh")
        if not self.caution_distance > self.warning_distance > self.danger_distance >= 0:
            raise ValueError("Proximity tiers must satisfy caution > warning > danger >= 0")
        if self.collision_check_interval_seconds <= 0:
            raise ValueError("collision_check_interval_seconds must be positive")


DEFAULT_CONFIG = ClaimConfig()


def speed_kmh(distance_m: float, elapsed_s: float) -> float:
    """m/s → km/h."""
    return distance_m / elapsed_s * 3.6
