"""Movement taxonomy: patterns, phases and the per-pattern rule table."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class MovementPhase(Enum):
    """Instantaneous direction/stillness of the primary joint."""
    NONE = "none"
    CONCENTRIC = "concentric"     # Joint angle increasing
    ECCENTRIC = "eccentric"       # Joint angle decreasing
    STATIC_HOLD = "static_hold"   # Still, near the top of the range


class MovementPattern(str, Enum):
    """Coarse biomechanical category of an exercise."""
    PRESS = "press"
    SQUAT = "squat"
    PULL = "pull"
    HINGE = "hinge"
    CURL = "curl"
    LUNGE = "lunge"
    PLYOMETRIC = "plyometric"
    ISOLATION_EXTENSION = "isolation_extension"
    RAISE = "raise"
    CRUNCH = "crunch"
    LEG_RAISE = "leg_raise"
    LATERAL_LUNGE = "lateral_lunge"
    KICKBACK = "kickback"
    ROTATION = "rotation"
    ANTI_ROTATION = "anti_rotation"
    STEP_UP = "step_up"
    ISOMETRIC_HOLD = "isometric_hold"
    ECCENTRIC_ONLY = "eccentric_only"
    ISOLATION = "isolation"

    @classmethod
    def all(cls) -> List[str]:
        return [p.value for p in cls]


class PhaseFamily(Enum):
    """How velocity/ROM averages map to a phase."""
    BIDIRECTIONAL = "bidirectional"   # Threshold on signed velocity, scaled per direction
    MAGNITUDE = "magnitude"           # Threshold on |velocity|, sign picks direction
    ISOMETRIC = "isometric"           # ROM occupancy only
    ECCENTRIC_ONLY = "eccentric_only"
    NONE = "none"


class CompletionRule(Enum):
    """What has to happen for a frame to register a rep."""
    LOCKOUT = "lockout"                   # Reached lockout angle, then reversed
    EDGE = "edge"                         # Concentric -> eccentric
    STRETCH = "stretch"                   # Returned to stretch angle, then pushed
    HOLD = "hold"                         # Entered a static hold
    ECCENTRIC_ENTRY = "eccentric_entry"   # Began a controlled lowering
    NONE = "none"


@dataclass(frozen=True)
class PatternRule:
    """Phase and completion parameters shared by every exercise of a pattern."""
    family: PhaseFamily
    completion: CompletionRule
    concentric_scale: float = 1.0
    eccentric_scale: float = 1.0
    hold_threshold: Optional[float] = None
    rom_factor: float = 1.0  # Fraction of the profile's min ROM the completion gate needs


_BI = PhaseFamily.BIDIRECTIONAL
_MAG = PhaseFamily.MAGNITUDE

PATTERN_RULES: Dict[MovementPattern, PatternRule] = {
    MovementPattern.PRESS: PatternRule(_BI, CompletionRule.LOCKOUT, hold_threshold=0.9),
    MovementPattern.SQUAT: PatternRule(_BI, CompletionRule.LOCKOUT, hold_threshold=0.9),
    MovementPattern.PULL: PatternRule(_BI, CompletionRule.LOCKOUT, hold_threshold=0.9),
    MovementPattern.HINGE: PatternRule(_BI, CompletionRule.LOCKOUT, 1.2, 0.8, rom_factor=0.9),
    MovementPattern.CURL: PatternRule(_BI, CompletionRule.LOCKOUT, 1.2, 0.8, rom_factor=0.9),
    MovementPattern.LUNGE: PatternRule(_BI, CompletionRule.LOCKOUT, 1.2, 0.8, rom_factor=0.9),
    MovementPattern.PLYOMETRIC: PatternRule(_BI, CompletionRule.EDGE, 1.5, 0.5),
    MovementPattern.ISOLATION_EXTENSION: PatternRule(
        _BI, CompletionRule.LOCKOUT, 0.8, 0.8, rom_factor=0.95
    ),
    MovementPattern.RAISE: PatternRule(_BI, CompletionRule.EDGE, rom_factor=0.7),
    MovementPattern.CRUNCH: PatternRule(_BI, CompletionRule.EDGE),
    MovementPattern.LEG_RAISE: PatternRule(_BI, CompletionRule.STRETCH),
    MovementPattern.LATERAL_LUNGE: PatternRule(_BI, CompletionRule.STRETCH, 0.7, 0.7),
    MovementPattern.KICKBACK: PatternRule(_MAG, CompletionRule.EDGE, rom_factor=0.8),
    MovementPattern.ROTATION: PatternRule(_MAG, CompletionRule.EDGE, rom_factor=0.6),
    MovementPattern.ANTI_ROTATION: PatternRule(_MAG, CompletionRule.EDGE, rom_factor=0.5),
    MovementPattern.STEP_UP: PatternRule(_MAG, CompletionRule.LOCKOUT, rom_factor=0.8),
    MovementPattern.ISOMETRIC_HOLD: PatternRule(
        PhaseFamily.ISOMETRIC, CompletionRule.HOLD, hold_threshold=0.9
    ),
    MovementPattern.ECCENTRIC_ONLY: PatternRule(
        PhaseFamily.ECCENTRIC_ONLY, CompletionRule.ECCENTRIC_ENTRY, eccentric_scale=0.5, rom_factor=0.7
    ),
    MovementPattern.ISOLATION: PatternRule(PhaseFamily.NONE, CompletionRule.NONE),
}

NEUTRAL_RULE = PATTERN_RULES[MovementPattern.ISOLATION]


def get_pattern_rule(pattern: Optional[MovementPattern]) -> PatternRule:
    """Rule for a pattern; unknown or missing patterns get the no-op rule."""
    if pattern is None:
        return NEUTRAL_RULE
    return PATTERN_RULES.get(pattern, NEUTRAL_RULE)
