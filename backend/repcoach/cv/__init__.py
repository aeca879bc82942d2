"""
Frame-to-rep analysis pipeline.

PIPELINE COMPONENTS:
1. keypoints: COCO-17 layout and flat-buffer parsing
2. geometry: Three-point joint angles, signed/projected variants, distance
3. AngleExtractor: Named joint angles per body region
4. detect_phase / PhaseDetector: Concentric/eccentric/hold classification
5. RepCounter: Temporal smoothing and pattern completion rules
6. FormChecker: Range, stabilization, lockout and exercise-rule checks
7. EngagementScorer: Weighted 0-1 engagement score
8. ExerciseAnalyzer: One analysis session tying the above together

Usage:
    from repcoach.cv import ExerciseAnalyzer

    analyzer = ExerciseAnalyzer("military-press")
    for keypoints, timestamp in frames:
        result = analyzer.process_frame(keypoints, timestamp)
        if result.rep_completed:
            print(f"Rep {result.rep_count}, engagement {result.engagement:.2f}")
"""

from repcoach.cv.keypoints import Keypoint, CocoKeypoint, parse_keypoints
from repcoach.cv.geometry import (
    angle, signed_angle, projected_angle, distance, midpoint, normalized
)
from repcoach.cv.angle_extractor import AngleExtractor, AngleSet
from repcoach.cv.phase_detector import PhaseDetector, detect_phase
from repcoach.cv.rep_counter import RepCounter
from repcoach.cv.form_checker import FormChecker, FormViolation
from repcoach.cv.engagement import EngagementScorer
from repcoach.cv.exercise_analyzer import (
    ExerciseAnalyzer, FrameAnalysis, supported_exercises
)

__all__ = [
    "Keypoint",
    "CocoKeypoint",
    "parse_keypoints",
    "angle",
    "signed_angle",
    "projected_angle",
    "distance",
    "midpoint",
    "normalized",
    "AngleExtractor",
    "AngleSet",
    "PhaseDetector",
    "detect_phase",
    "RepCounter",
    "FormChecker",
    "FormViolation",
    "EngagementScorer",
    "ExerciseAnalyzer",
    "FrameAnalysis",
    "supported_exercises",
]
