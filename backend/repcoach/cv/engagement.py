"""
Engagement scoring.

score = strictness * (w_p * primary + w_s * stabilization + sum(w_i * bonus_i))
clamped to [min_engagement, max_engagement] (0.1 to 1.0 by default).

Sub-scores, each in [0, 1]:
- primary: ROM fraction of the primary joint
- stabilization: 1 - |x - 180| / tolerance, scaled by the stabilization coefficient
- bonuses: constant, target (closeness to a target angle) or eccentric
  (while lowering under control)
"""

from typing import Dict, Optional

import numpy as np

from repcoach.config import Settings, get_settings
from repcoach.cv.geometry import normalized
from repcoach.models.movement import MovementPhase
from repcoach.schemas.profile import EngagementBonus, ExerciseProfile


class EngagementScorer:
    """Composite 0-1 engagement score for one exercise."""

    def __init__(
        self,
        profile: Optional[ExerciseProfile],
        settings: Optional[Settings] = None
    ):
        self.profile = profile
        self.settings = settings or get_settings()

    def score(
        self,
        angles: Dict[str, float],
        phase: Optional[MovementPhase] = None
    ) -> float:
        if self.profile is None:
            return self.settings.neutral_engagement

        weights = self.profile.engagement
        total = (
            weights.primary * self.primary_score(angles)
            + weights.stabilization * self.stabilization_score(angles)
            + sum(b.weight * self._bonus_score(b, angles, phase) for b in weights.bonuses)
        )
        total *= self.profile.strictness

        return float(np.clip(total, self.settings.min_engagement, self.settings.max_engagement))

    def primary_score(self, angles: Dict[str, float]) -> float:
        observed = angles.get(self.profile.primary_joint)
        if observed is None:
            return 0.0
        return normalized(observed, self.profile.range_min, self.profile.range_max)

    def stabilization_score(self, angles: Dict[str, float]) -> float:
        joint = self.profile.stabilization_joint
        if joint is None or joint not in angles:
            return 0.0
        tolerance = self.settings.stability_tolerance_degrees
        steadiness = max(0.0, 1.0 - abs(angles[joint] - 180.0) / tolerance)
        return steadiness * self.profile.stabilization

    @staticmethod
    def _bonus_score(
        bonus: EngagementBonus,
        angles: Dict[str, float],
        phase: Optional[MovementPhase]
    ) -> float:
        if bonus.kind == "constant":
            return 1.0
        if bonus.kind == "eccentric":
            return 1.0 if phase == MovementPhase.ECCENTRIC else 0.0
        if bonus.kind == "target":
            observed = angles.get(bonus.joint)
            if observed is None:
                return 0.0
            return max(0.0, 1.0 - abs(observed - bonus.target) / bonus.tolerance)
        return 0.0
