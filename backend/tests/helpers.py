"""Shared builders for profiles, settings and keypoint frames."""

import math
from typing import List, Sequence, Tuple

from repcoach.config import Settings
from repcoach.schemas.profile import ExerciseProfile

# Standing, facing the camera, arms hanging (COCO-17 order)
STANDING_POSE: List[Tuple[float, float]] = [
    (0.50, 0.10),  # nose
    (0.51, 0.08), (0.49, 0.08),  # eyes
    (0.54, 0.12), (0.46, 0.12),  # ears
    (0.54, 0.25), (0.46, 0.25),  # shoulders
    (0.54, 0.40), (0.46, 0.40),  # elbows
    (0.54, 0.55), (0.46, 0.55),  # wrists
    (0.54, 0.55), (0.46, 0.55),  # hips
    (0.54, 0.75), (0.46, 0.75),  # knees
    (0.54, 0.95), (0.46, 0.95),  # ankles
]


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def make_profile(**overrides) -> ExerciseProfile:
    """Lockout-gated press on the elbow, range [60, 180], lockout 170."""
    data = {
        "id": "test-press",
        "name": "Test Press",
        "muscle_group": "shoulders",
        "region": "upper_body",
        "pattern": "press",
        "primary_joint": "elbow_flexion",
        "range_min": 60.0,
        "range_max": 180.0,
        "velocity_threshold": 45.0,
        "min_rom_percentage": 0.9,
        "lockout_angle": 170.0,
    }
    data.update(overrides)
    return ExerciseProfile(**data)


def run_counter(counter, angles: Sequence[float], joint: str = "elbow_flexion", dt: float = 0.1):
    """Feed a primary-joint angle sequence; returns the per-frame update results."""
    return [
        counter.update({joint: a}, i * dt)
        for i, a in enumerate(angles)
    ]


def flatten(points: Sequence[Tuple[float, float]], confidences: Sequence[float]) -> List[float]:
    buffer: List[float] = []
    for (x, y), c in zip(points, confidences):
        buffer.extend([x, y, c])
    return buffer


def arm_at(
    elbow_angle: float,
    side: str = "left",
    num_points: int = 11,
    confidence: float = 0.9,
    other_side_confidence: float = 0.0
) -> List[float]:
    """
    Flat buffer with one arm bent to elbow_angle degrees.

    Shoulder directly above the elbow, ear directly above the shoulder.
    """
    points = list(STANDING_POSE[:num_points])
    shoulder_idx, elbow_idx, wrist_idx, ear_idx = (5, 7, 9, 3) if side == "left" else (6, 8, 10, 4)

    sx = points[shoulder_idx][0]
    points[ear_idx] = (sx, 0.15)
    points[shoulder_idx] = (sx, 0.30)
    points[elbow_idx] = (sx, 0.50)
    theta = math.radians(elbow_angle)
    points[wrist_idx] = (sx + 0.2 * math.sin(theta), 0.50 - 0.2 * math.cos(theta))

    own = {shoulder_idx, elbow_idx, wrist_idx, ear_idx}
    other = {6, 8, 10, 4} if side == "left" else {5, 7, 9, 3}
    confidences = [
        confidence if i in own else other_side_confidence if i in other else confidence
        for i in range(num_points)
    ]
    return flatten(points, confidences)
