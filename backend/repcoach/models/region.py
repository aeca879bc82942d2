"""Body regions and the angle names each region produces."""

from enum import Enum
from typing import Dict, List, Tuple


class BodyRegion(str, Enum):
    """Which part of the skeleton an exercise is read from."""
    UPPER_BODY = "upper_body"
    LOWER_BODY = "lower_body"
    FULL_BODY = "full_body"

    @classmethod
    def all(cls) -> List[str]:
        return [r.value for r in cls]


# Keypoints needed before a region can be evaluated (COCO-17 prefix)
REGION_MIN_KEYPOINTS: Dict[BodyRegion, int] = {
    BodyRegion.UPPER_BODY: 11,   # Through the wrists
    BodyRegion.LOWER_BODY: 17,
    BodyRegion.FULL_BODY: 17,
}

UPPER_BODY_ANGLES: Tuple[str, ...] = (
    "elbow_flexion",
    "shoulder_stability",
    "elbow_travel",
    "forearm_tilt",
)

LOWER_BODY_ANGLES: Tuple[str, ...] = (
    "knee_flexion",
    "hip_extension",
    "body_line",
    "knee_alignment",
    "stance_width",
    "torso_lean",
)

REGION_ANGLES: Dict[BodyRegion, Tuple[str, ...]] = {
    BodyRegion.UPPER_BODY: UPPER_BODY_ANGLES,
    BodyRegion.LOWER_BODY: LOWER_BODY_ANGLES,
    BodyRegion.FULL_BODY: UPPER_BODY_ANGLES + LOWER_BODY_ANGLES + (
        "shoulder_flexion",
        "trunk_rotation",
    ),
}
