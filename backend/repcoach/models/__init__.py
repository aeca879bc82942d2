"""Domain enums and constant tables."""

from repcoach.models.movement import (
    MovementPhase, MovementPattern, PhaseFamily, CompletionRule,
    PatternRule, PATTERN_RULES, get_pattern_rule
)
from repcoach.models.region import BodyRegion, REGION_ANGLES, REGION_MIN_KEYPOINTS
from repcoach.models.violation import ViolationKind, ViolationCode

__all__ = [
    "MovementPhase",
    "MovementPattern",
    "PhaseFamily",
    "CompletionRule",
    "PatternRule",
    "PATTERN_RULES",
    "get_pattern_rule",
    "BodyRegion",
    "REGION_ANGLES",
    "REGION_MIN_KEYPOINTS",
    "ViolationKind",
    "ViolationCode",
]
