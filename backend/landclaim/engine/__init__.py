"""landclaim territory claiming and collision engine."""

from landclaim.engine.collision import CollisionEngine
from landclaim.engine.config import ClaimConfig
from landclaim.engine.context import PathSnapshot, ValidationContext
from landclaim.engine.registry import check, get_registry
from landclaim.engine.session import SessionStore, TrackingSession
from landclaim.engine.types import (
    CollisionResult,
    CollisionSeverity,
    GeoFix,
    GeoPoint,
    Invalid,
    InvalidReason,
    SessionState,
    Territory,
    Valid,
    ViolationKind,
)
from landclaim.engine.validator import TerritoryValidator

__all__ = [
    "check",
    "get_registry",
    "ClaimConfig",
    "CollisionEngine",
    "CollisionResult",
    "CollisionSeverity",
    "GeoFix",
    "GeoPoint",
    "Invalid",
    "InvalidReason",
    "PathSnapshot",
    "SessionState",
    "SessionStore",
    "Territory",
    "TerritoryValidator",
    "TrackingSession",
    "Valid",
    "ValidationContext",
    "ViolationKind",
]
