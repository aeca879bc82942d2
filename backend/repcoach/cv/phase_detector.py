"""
Movement phase classification.

Phase is decided from the smoothed angular velocity of the primary joint
and its smoothed range-of-motion fraction. The rule family comes from the
exercise's movement pattern:

- BIDIRECTIONAL: v > T*up => CONCENTRIC, v < -T*down => ECCENTRIC,
  otherwise STATIC_HOLD if the pattern has a hold threshold and ROM clears it
- MAGNITUDE: |v| > T, sign picks CONCENTRIC/ECCENTRIC; no hold
- ISOMETRIC: STATIC_HOLD while ROM clears the occupancy threshold
- ECCENTRIC_ONLY: only a controlled lowering (v < -T*0.5) is reported
- NONE: never leaves NONE (unrecognized exercises)
"""

from typing import Optional

from repcoach.models.movement import MovementPhase, PatternRule, PhaseFamily, NEUTRAL_RULE
from repcoach.schemas.profile import ExerciseProfile


def detect_phase(
    avg_velocity: float,
    avg_rom: float,
    rule: PatternRule,
    threshold: float,
    hold_threshold: Optional[float] = None
) -> MovementPhase:
    """
    Classify the current phase.

    Args:
        avg_velocity: Smoothed angular velocity (degrees/second)
        avg_rom: Smoothed ROM fraction in [0, 1]
        rule: Pattern rule of the exercise
        threshold: Velocity threshold T of the exercise
        hold_threshold: ROM occupancy override; defaults to the rule's value

    Returns:
        MovementPhase for this frame
    """
    if hold_threshold is None:
        hold_threshold = rule.hold_threshold

    if rule.family == PhaseFamily.BIDIRECTIONAL:
        if avg_velocity > threshold * rule.concentric_scale:
            return MovementPhase.CONCENTRIC
        if avg_velocity < -threshold * rule.eccentric_scale:
            return MovementPhase.ECCENTRIC
        if hold_threshold is not None and avg_rom > hold_threshold:
            return MovementPhase.STATIC_HOLD
        return MovementPhase.NONE

    if rule.family == PhaseFamily.MAGNITUDE:
        if abs(avg_velocity) > threshold:
            return MovementPhase.CONCENTRIC if avg_velocity > 0 else MovementPhase.ECCENTRIC
        return MovementPhase.NONE

    if rule.family == PhaseFamily.ISOMETRIC:
        if hold_threshold is not None and avg_rom > hold_threshold:
            return MovementPhase.STATIC_HOLD
        return MovementPhase.NONE

    if rule.family == PhaseFamily.ECCENTRIC_ONLY:
        if avg_velocity < -threshold * rule.eccentric_scale:
            return MovementPhase.ECCENTRIC
        return MovementPhase.NONE

    return MovementPhase.NONE


class PhaseDetector:
    """detect_phase bound to one exercise profile (None = neutral)."""

    def __init__(self, profile: Optional[ExerciseProfile]):
        self.profile = profile
        if profile is None:
            self.rule = NEUTRAL_RULE
            self.threshold = 0.0
            self.hold_threshold = None
        else:
            self.rule = profile.rule
            self.threshold = profile.velocity_threshold
            self.hold_threshold = profile.effective_hold_threshold

    def detect(self, avg_velocity: float, avg_rom: float) -> MovementPhase:
        return detect_phase(
            avg_velocity, avg_rom, self.rule, self.threshold, self.hold_threshold
        )
