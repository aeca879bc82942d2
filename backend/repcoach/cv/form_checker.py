"""
Form checking against an exercise profile.

Checks run in layers and their results concatenate:
1. Range checks: every target range in the profile
2. Stabilization: stabilizing joint deviation from 180, scaled by the
   profile's stabilization coefficient
3. Lockout completeness: lockout-gated patterns with a strict lockout
   requirement, evaluated while the lift is held at the top
4. Exercise rules: data-driven per-exercise rules

Missing angles are skipped ("cannot evaluate"), never reported as violations.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from repcoach.config import Settings, get_settings
from repcoach.models.movement import CompletionRule, MovementPhase
from repcoach.models.violation import ViolationCode, ViolationKind
from repcoach.schemas.profile import ExerciseProfile, FormRule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormViolation:
    """A single structured form violation."""
    kind: ViolationKind
    joint: str
    observed: float
    boundary: float
    code: str

    @property
    def description(self) -> str:
        return ViolationCode.get_description(self.code)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "joint": self.joint,
            "observed": self.observed,
            "boundary": self.boundary,
            "code": self.code,
        }


class FormCheck:
    """Base class for form check layers."""

    name: str = "base_check"

    def check(
        self,
        profile: ExerciseProfile,
        angles: Dict[str, float],
        phase: Optional[MovementPhase],
        settings: Settings
    ) -> List[FormViolation]:
        """
        Perform the check.

        Args:
            profile: Exercise profile being checked against
            angles: Current angle set
            phase: Current movement phase (None if unknown)
            settings: Application settings

        Returns:
            Violations found (empty when form is fine)
        """
        raise NotImplementedError


class RangeCheck(FormCheck):
    """Every target range in the profile."""

    name = "range"

    def check(self, profile, angles, phase, settings):
        violations = []
        for joint, (lo, hi) in profile.target_ranges.items():
            observed = angles.get(joint)
            if observed is None:
                continue
            if observed < lo:
                violations.append(FormViolation(
                    ViolationKind.TOO_LOW, joint, observed, lo, ViolationCode.ANGLE_TOO_LOW
                ))
            elif observed > hi:
                violations.append(FormViolation(
                    ViolationKind.TOO_HIGH, joint, observed, hi, ViolationCode.ANGLE_TOO_HIGH
                ))
        return violations


class StabilizationCheck(FormCheck):
    """Stabilizing joint must stay near 180; looser for low stabilization coefficients."""

    name = "stabilization"

    def check(self, profile, angles, phase, settings):
        joint = profile.stabilization_joint
        if joint is None or joint not in angles:
            return []

        observed = angles[joint]
        allowed = (1.0 - profile.stabilization) * settings.stability_tolerance_degrees
        if abs(observed - 180.0) > allowed:
            return [FormViolation(
                ViolationKind.UNSTABLE, joint, observed, allowed,
                ViolationCode.POOR_STABILIZATION
            )]
        return []


class LockoutCompletenessCheck(FormCheck):
    """Holding at the top without reaching lockout."""

    name = "lockout_completeness"
    MIN_REQUIREMENT = 0.8

    def check(self, profile, angles, phase, settings):
        if profile.rule.completion != CompletionRule.LOCKOUT:
            return []
        if profile.lockout_angle is None or profile.lockout_requirement <= self.MIN_REQUIREMENT:
            return []
        if phase != MovementPhase.STATIC_HOLD:
            return []

        observed = angles.get(profile.primary_joint)
        if observed is not None and observed < profile.lockout_angle:
            return [FormViolation(
                ViolationKind.INCOMPLETE_LOCKOUT, profile.primary_joint, observed,
                profile.lockout_angle, ViolationCode.INCOMPLETE_LOCKOUT
            )]
        return []


class ExerciseRuleCheck(FormCheck):
    """Per-exercise rules from the profile table."""

    name = "exercise_rules"

    def check(self, profile, angles, phase, settings):
        violations = []
        for rule in profile.rules:
            violation = self._evaluate(rule, angles)
            if violation is not None:
                violations.append(violation)
        return violations

    @staticmethod
    def _evaluate(rule: FormRule, angles: Dict[str, float]) -> Optional[FormViolation]:
        x = angles.get(rule.joint)
        if x is None:
            return None

        if rule.kind == "min":
            failed, observed = x < rule.value, x
        elif rule.kind == "max":
            failed, observed = x > rule.value, x
        elif rule.kind == "abs_max":
            failed, observed = abs(x) > rule.value, x
        elif rule.kind == "abs_min":
            failed, observed = abs(x) < rule.value, x
        elif rule.kind == "target":
            failed, observed = abs(x - rule.value) > rule.tolerance, x
        elif rule.kind == "diff_max":
            y = angles.get(rule.other_joint)
            if y is None:
                return None
            observed = abs(x - y)
            failed = observed > rule.value
        else:
            return None

        if not failed:
            return None
        return FormViolation(ViolationKind.RULE, rule.joint, observed, rule.value, rule.code)


class FormChecker:
    """
    Run every form check layer for one exercise.

    A None profile (unknown exercise) never reports violations.
    """

    def __init__(
        self,
        profile: Optional[ExerciseProfile],
        settings: Optional[Settings] = None
    ):
        self.profile = profile
        self.settings = settings or get_settings()
        self.checks: List[FormCheck] = [
            RangeCheck(),
            StabilizationCheck(),
            LockoutCompletenessCheck(),
            ExerciseRuleCheck(),
        ]

    def check(
        self,
        angles: Dict[str, float],
        phase: Optional[MovementPhase] = None
    ) -> List[FormViolation]:
        if self.profile is None or not angles:
            return []

        violations: List[FormViolation] = []
        for check in self.checks:
            found = check.check(self.profile, angles, phase, self.settings)
            if found:
                logger.debug(f"{self.profile.id}: {check.name} -> {[v.code for v in found]}")
            violations.extend(found)
        return violations
