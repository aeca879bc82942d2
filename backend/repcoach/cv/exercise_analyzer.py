"""
Per-session analysis pipeline.

One ExerciseAnalyzer is one analysis session: a single exercise and a
single stream of frames. Per frame:
1. Parse the flat keypoint buffer (InputShapeError on a bad shape)
2. Extract the profile region's joint angles
3. Update the rep counter (phase + completion)
4. Check form against the profile
5. Score engagement

Unknown exercise ids are not an error: the session runs with no profile,
never counts reps, reports no violations and a neutral engagement score.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from repcoach.config import Settings, get_settings
from repcoach.cv.angle_extractor import AngleExtractor
from repcoach.cv.engagement import EngagementScorer
from repcoach.cv.form_checker import FormChecker, FormViolation
from repcoach.cv.keypoints import KeypointBuffer, parse_keypoints
from repcoach.cv.rep_counter import RepCounter
from repcoach.models.movement import MovementPhase
from repcoach.models.region import BodyRegion
from repcoach.profiles.registry import ProfileRegistry, get_registry

logger = logging.getLogger(__name__)

LOG_EVERY_N_FRAMES = 30


@dataclass
class FrameAnalysis:
    """Result of analysing one frame."""
    exercise_id: str
    frame_number: int
    timestamp: float
    rep_count: int
    phase: MovementPhase
    rep_completed: bool = False
    engagement: float = 0.5
    violations: List[FormViolation] = field(default_factory=list)
    angles: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exercise_id": self.exercise_id,
            "frame_number": self.frame_number,
            "timestamp": self.timestamp,
            "rep_count": self.rep_count,
            "phase": self.phase.value,
            "rep_completed": self.rep_completed,
            "engagement": self.engagement,
            "violations": [v.to_dict() for v in self.violations],
            "angles": dict(self.angles),
        }


def supported_exercises(registry: Optional[ProfileRegistry] = None) -> List[str]:
    """Exercise ids offered to users (the validated catalog)."""
    return (registry or get_registry()).catalog()


class ExerciseAnalyzer:
    """
    Analysis session for one exercise.

    Usage:
        analyzer = ExerciseAnalyzer("squat")
        for keypoints, timestamp in frames:
            result = analyzer.process_frame(keypoints, timestamp)
            if result.rep_completed:
                print(f"Rep {result.rep_count}")
    """

    def __init__(
        self,
        exercise_id: str,
        registry: Optional[ProfileRegistry] = None,
        settings: Optional[Settings] = None
    ):
        self.registry = registry or get_registry()
        self.settings = settings or get_settings()
        self._bind(exercise_id)

    def _bind(self, exercise_id: str) -> None:
        self.exercise_id = exercise_id
        self.profile = self.registry.get(exercise_id)
        if self.profile is None:
            logger.warning(
                f"Unknown exercise '{exercise_id}': rep counting disabled, neutral scoring"
            )

        region = self.profile.region if self.profile else BodyRegion.FULL_BODY
        self.extractor = AngleExtractor(
            region,
            side=self.settings.extraction_side,
            min_confidence=self.settings.min_keypoint_confidence,
            drop_low_confidence=self.settings.drop_low_confidence_angles,
        )
        self.rep_counter = RepCounter(self.profile, self.settings)
        self.form_checker = FormChecker(self.profile, self.settings)
        self.engagement_scorer = EngagementScorer(self.profile, self.settings)
        self.frame_number = 0

    @property
    def is_supported(self) -> bool:
        return self.profile is not None

    @property
    def rep_count(self) -> int:
        return self.rep_counter.count

    @property
    def phase(self) -> MovementPhase:
        return self.rep_counter.current_phase

    def reset(self) -> None:
        """Restart the session for the same exercise."""
        self.rep_counter.reset()
        self.frame_number = 0

    def switch_exercise(self, exercise_id: str) -> None:
        """Rebind to another exercise; all session state is discarded."""
        logger.info(f"Switching exercise {self.exercise_id} -> {exercise_id}")
        self._bind(exercise_id)

    def process_frame(self, keypoints: KeypointBuffer, timestamp: float) -> FrameAnalysis:
        """
        Analyse one frame.

        Args:
            keypoints: Flat (x, y, confidence) buffer in COCO-17 order
            timestamp: Frame time in host units (scaled by settings.timestamp_scale)

        Raises:
            InputShapeError: buffer length is not a multiple of 3
        """
        parsed = parse_keypoints(keypoints)
        seconds = timestamp * self.settings.timestamp_scale
        self.frame_number += 1

        angles = self.extractor.extract(parsed)
        event = self.rep_counter.update(angles, seconds)
        phase = self.rep_counter.current_phase
        violations = self.form_checker.check(angles, phase)
        engagement = self.engagement_scorer.score(angles, phase)

        if self.frame_number % LOG_EVERY_N_FRAMES == 0:
            logger.debug(
                f"{self.exercise_id} frame {self.frame_number}: reps={self.rep_count}, "
                f"phase={phase.value}, engagement={engagement:.2f}, "
                f"violations={len(violations)}"
            )

        return FrameAnalysis(
            exercise_id=self.exercise_id,
            frame_number=self.frame_number,
            timestamp=seconds,
            rep_count=self.rep_counter.count,
            phase=phase,
            rep_completed=event is not None,
            engagement=engagement,
            violations=violations,
            angles=angles,
        )
