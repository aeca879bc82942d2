"""Form violation kinds and codes."""

from enum import Enum
from typing import List


class ViolationKind(Enum):
    """Structural category of a form violation."""
    TOO_LOW = "too_low"
    TOO_HIGH = "too_high"
    UNSTABLE = "unstable"
    INCOMPLETE_LOCKOUT = "incomplete_lockout"
    RULE = "rule"  # Exercise-specific rule


class ViolationCode:
    """
    Explicit violation codes.
    Each code maps to a specific check; rendering text is a presentation concern.
    """
    # Generic range checks
    ANGLE_TOO_LOW = "angle_too_low"
    ANGLE_TOO_HIGH = "angle_too_high"

    # Qualitative checks
    POOR_STABILIZATION = "poor_stabilization"
    INCOMPLETE_LOCKOUT = "incomplete_lockout"

    # Exercise-specific
    WRIST_NOT_STRAIGHT = "wrist_not_straight"
    INCOMPLETE_OVERHEAD_REACH = "incomplete_overhead_reach"
    HIP_KNEE_DESYNC = "hip_knee_desync"
    KNEE_VALGUS = "knee_valgus"
    ELBOW_DRIFT = "elbow_drift"
    EXCESSIVE_TORSO_LEAN = "excessive_torso_lean"
    HIPS_SAGGING = "hips_sagging"
    INSUFFICIENT_DEPTH = "insufficient_depth"
    HIPS_BREAKING = "hips_breaking"
    STANCE_TOO_NARROW = "stance_too_narrow"
    EXCESSIVE_ROTATION = "excessive_rotation"

    @classmethod
    def all(cls) -> List[str]:
        return [
            cls.ANGLE_TOO_LOW,
            cls.ANGLE_TOO_HIGH,
            cls.POOR_STABILIZATION,
            cls.INCOMPLETE_LOCKOUT,
            cls.WRIST_NOT_STRAIGHT,
            cls.INCOMPLETE_OVERHEAD_REACH,
            cls.HIP_KNEE_DESYNC,
            cls.KNEE_VALGUS,
            cls.ELBOW_DRIFT,
            cls.EXCESSIVE_TORSO_LEAN,
            cls.HIPS_SAGGING,
            cls.INSUFFICIENT_DEPTH,
            cls.HIPS_BREAKING,
            cls.STANCE_TOO_NARROW,
            cls.EXCESSIVE_ROTATION,
        ]

    @classmethod
    def get_description(cls, code: str) -> str:
        """Get human-readable description of a violation code."""
        descriptions = {
            cls.ANGLE_TOO_LOW: "Joint angle below the target range",
            cls.ANGLE_TOO_HIGH: "Joint angle above the target range",
            cls.POOR_STABILIZATION: "Stabilizing joint drifted away from neutral",
            cls.INCOMPLETE_LOCKOUT: "Full lockout was not reached at the top",
            cls.WRIST_NOT_STRAIGHT: "Keep wrists straight and stacked under the elbows",
            cls.INCOMPLETE_OVERHEAD_REACH: "Arms did not reach fully overhead",
            cls.HIP_KNEE_DESYNC: "Hips and knees are not extending together",
            cls.KNEE_VALGUS: "Knee is caving inward",
            cls.ELBOW_DRIFT: "Upper arm is drifting; keep the elbow pinned",
            cls.EXCESSIVE_TORSO_LEAN: "Torso is leaning too far",
            cls.HIPS_SAGGING: "Hips are sagging out of a straight body line",
            cls.INSUFFICIENT_DEPTH: "Did not reach the required depth",
            cls.HIPS_BREAKING: "Hips bent instead of staying extended",
            cls.STANCE_TOO_NARROW: "Stance is narrower than hip width",
            cls.EXCESSIVE_ROTATION: "Trunk is rotating; resist the twist",
        }
        return descriptions.get(code, code)
