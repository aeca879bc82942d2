"""
COCO-17 keypoint layout and flat-buffer parsing.

Pose estimation happens upstream; frames arrive as a flat sequence of
(x, y, confidence) triples in COCO-17 order.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Sequence, Union

import numpy as np

from repcoach.exceptions import InputShapeError


class CocoKeypoint(IntEnum):
    """COCO-17 keypoint indices."""
    NOSE = 0
    LEFT_EYE = 1
    RIGHT_EYE = 2
    LEFT_EAR = 3
    RIGHT_EAR = 4
    LEFT_SHOULDER = 5
    RIGHT_SHOULDER = 6
    LEFT_ELBOW = 7
    RIGHT_ELBOW = 8
    LEFT_WRIST = 9
    RIGHT_WRIST = 10
    LEFT_HIP = 11
    RIGHT_HIP = 12
    LEFT_KNEE = 13
    RIGHT_KNEE = 14
    LEFT_ANKLE = 15
    RIGHT_ANKLE = 16


VALUES_PER_KEYPOINT = 3


@dataclass(frozen=True)
class Keypoint:
    """Single keypoint with position and confidence."""
    x: float
    y: float
    confidence: float

    def is_visible(self, min_confidence: float = 0.1) -> bool:
        return self.confidence >= min_confidence


KeypointBuffer = Union[Sequence[float], np.ndarray]


def parse_keypoints(buffer: KeypointBuffer) -> List[Keypoint]:
    """
    Split a flat (x, y, confidence) buffer into keypoints.

    Raises:
        InputShapeError: length is not a multiple of 3 or values are not numeric
    """
    try:
        values = np.asarray(buffer, dtype=float).ravel()
    except (TypeError, ValueError) as e:
        raise InputShapeError(f"Invalid keypoints array: {e}") from e

    if len(values) % VALUES_PER_KEYPOINT != 0:
        raise InputShapeError(
            f"Invalid keypoints array length. Expected multiple of 3, got {len(values)}"
        )

    triples = values.reshape(-1, VALUES_PER_KEYPOINT)
    return [Keypoint(float(x), float(y), float(c)) for x, y, c in triples]
