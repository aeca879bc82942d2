"""
Joint-angle extraction from a COCO-17 keypoint frame.

Each body region yields a fixed set of named angles: a primary joint
angle, a stabilization angle (nominally 180 at rest) and a few auxiliary
measurements. Frames with too few keypoints for the region yield an empty
set; callers treat a missing key as "cannot evaluate now", not as zero.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from repcoach.cv.geometry import (
    DEFAULT_MIN_CONFIDENCE, angle, signed_angle, projected_angle,
    distance, midpoint
)
from repcoach.cv.keypoints import CocoKeypoint, Keypoint, KeypointBuffer, parse_keypoints
from repcoach.models.region import BodyRegion, REGION_ANGLES, REGION_MIN_KEYPOINTS

logger = logging.getLogger(__name__)

AngleSet = Dict[str, float]

_SIDE_JOINTS = {
    "left": {
        "ear": CocoKeypoint.LEFT_EAR,
        "shoulder": CocoKeypoint.LEFT_SHOULDER,
        "elbow": CocoKeypoint.LEFT_ELBOW,
        "wrist": CocoKeypoint.LEFT_WRIST,
        "hip": CocoKeypoint.LEFT_HIP,
        "knee": CocoKeypoint.LEFT_KNEE,
        "ankle": CocoKeypoint.LEFT_ANKLE,
    },
    "right": {
        "ear": CocoKeypoint.RIGHT_EAR,
        "shoulder": CocoKeypoint.RIGHT_SHOULDER,
        "elbow": CocoKeypoint.RIGHT_ELBOW,
        "wrist": CocoKeypoint.RIGHT_WRIST,
        "hip": CocoKeypoint.RIGHT_HIP,
        "knee": CocoKeypoint.RIGHT_KNEE,
        "ankle": CocoKeypoint.RIGHT_ANKLE,
    },
}


def _vertical_ref(anchor: Keypoint, up: bool = True) -> Keypoint:
    """Synthetic point one unit above (or below) anchor; image y grows downward."""
    dy = -1.0 if up else 1.0
    return Keypoint(anchor.x, anchor.y + dy, anchor.confidence)


def _from_vertical_line(degrees: float) -> float:
    """Fold an angle from vertical into [0, 90] (direction along the line ignored)."""
    degrees = abs(degrees)
    return min(degrees, 180.0 - degrees)


class AngleExtractor:
    """
    Extract named joint angles for one body region.

    Side selection:
    - "left"/"right": always read that side
    - "auto": per frame, read the side whose joints are more confident
    """

    def __init__(
        self,
        region: BodyRegion,
        side: str = "auto",
        min_confidence: float = DEFAULT_MIN_CONFIDENCE,
        drop_low_confidence: bool = False
    ):
        if side not in ("left", "right", "auto"):
            raise ValueError(f"side must be left, right or auto, got {side!r}")
        self.region = BodyRegion(region)
        self.side = side
        self.min_confidence = min_confidence
        self.drop_low_confidence = drop_low_confidence
        self.required_keypoints = REGION_MIN_KEYPOINTS[self.region]

    @staticmethod
    def angle_names(region: BodyRegion) -> Tuple[str, ...]:
        """Names of every angle a region can produce."""
        return REGION_ANGLES[BodyRegion(region)]

    def extract_buffer(self, buffer: KeypointBuffer) -> AngleSet:
        """Parse a flat (x, y, confidence) buffer, then extract."""
        return self.extract(parse_keypoints(buffer))

    def extract(self, keypoints: Sequence[Keypoint]) -> AngleSet:
        """Compute the region's angle set from parsed keypoints."""
        if len(keypoints) < self.required_keypoints:
            logger.debug(
                f"{len(keypoints)} keypoints, {self.region.value} needs {self.required_keypoints}"
            )
            return {}

        side = self._resolve_side(keypoints)
        joints = {name: keypoints[idx] for name, idx in _SIDE_JOINTS[side].items()
                  if idx < len(keypoints)}

        measurements = self._measurements(keypoints, joints)
        angles: AngleSet = {}
        for name in REGION_ANGLES[self.region]:
            points, compute = measurements[name]
            value = self._guarded(points, compute)
            if value is not None:
                angles[name] = value
        return angles

    def _resolve_side(self, keypoints: Sequence[Keypoint]) -> str:
        if self.side != "auto":
            return self.side

        def side_confidence(side: str) -> float:
            return sum(
                keypoints[idx].confidence
                for idx in _SIDE_JOINTS[side].values()
                if idx < len(keypoints)
            )

        left, right = side_confidence("left"), side_confidence("right")
        return "right" if right > left else "left"

    def _guarded(
        self,
        points: List[Keypoint],
        compute: Callable[[], float]
    ) -> Optional[float]:
        """Apply the low-confidence policy: 0.0 by default, or omit the key."""
        if any(p.confidence < self.min_confidence for p in points):
            return None if self.drop_low_confidence else 0.0
        return float(compute())

    def _measurements(
        self,
        keypoints: Sequence[Keypoint],
        j: Dict[str, Keypoint]
    ) -> Dict[str, Tuple[List[Keypoint], Callable[[], float]]]:
        """Input points and calculator for every angle this frame can support."""
        mc = self.min_confidence
        table: Dict[str, Tuple[List[Keypoint], Callable[[], float]]] = {
            "elbow_flexion": (
                [j["shoulder"], j["elbow"], j["wrist"]],
                lambda: angle(j["shoulder"], j["elbow"], j["wrist"], mc),
            ),
            "shoulder_stability": (
                [j["ear"], j["shoulder"], j["elbow"]],
                lambda: angle(j["ear"], j["shoulder"], j["elbow"], mc),
            ),
            # 0 = upper arm hanging straight down
            "elbow_travel": (
                [j["shoulder"], j["elbow"]],
                lambda: abs(projected_angle(
                    _vertical_ref(j["shoulder"], up=False), j["shoulder"], j["elbow"], mc
                )),
            ),
            "forearm_tilt": (
                [j["elbow"], j["wrist"]],
                lambda: _from_vertical_line(projected_angle(
                    _vertical_ref(j["elbow"]), j["elbow"], j["wrist"], mc
                )),
            ),
        }

        if self.region == BodyRegion.UPPER_BODY:
            return table

        l_hip = keypoints[CocoKeypoint.LEFT_HIP]
        r_hip = keypoints[CocoKeypoint.RIGHT_HIP]
        l_ankle = keypoints[CocoKeypoint.LEFT_ANKLE]
        r_ankle = keypoints[CocoKeypoint.RIGHT_ANKLE]

        def stance_width() -> float:
            hip_width = distance(l_hip, r_hip)
            if hip_width < 1e-6:
                return 0.0
            return distance(l_ankle, r_ankle) / hip_width

        table.update({
            "knee_flexion": (
                [j["hip"], j["knee"], j["ankle"]],
                lambda: angle(j["hip"], j["knee"], j["ankle"], mc),
            ),
            "hip_extension": (
                [j["shoulder"], j["hip"], j["knee"]],
                lambda: angle(j["shoulder"], j["hip"], j["knee"], mc),
            ),
            "body_line": (
                [j["shoulder"], j["hip"], j["ankle"]],
                lambda: angle(j["shoulder"], j["hip"], j["ankle"], mc),
            ),
            "knee_alignment": (
                [j["hip"], j["knee"], j["ankle"]],
                lambda: signed_angle(j["hip"], j["knee"], j["ankle"], mc),
            ),
            # Ankle spread relative to hip width
            "stance_width": (
                [l_hip, r_hip, l_ankle, r_ankle],
                stance_width,
            ),
            # 0 = upright, 90 = torso horizontal
            "torso_lean": (
                [j["hip"], j["shoulder"]],
                lambda: abs(projected_angle(
                    _vertical_ref(j["hip"]), j["hip"], j["shoulder"], mc
                )),
            ),
        })

        if self.region == BodyRegion.LOWER_BODY:
            return table

        hip_mid = midpoint(l_hip, r_hip)
        wrist_mid = midpoint(
            keypoints[CocoKeypoint.LEFT_WRIST], keypoints[CocoKeypoint.RIGHT_WRIST]
        )
        table.update({
            "shoulder_flexion": (
                [j["hip"], j["shoulder"], j["elbow"]],
                lambda: angle(j["hip"], j["shoulder"], j["elbow"], mc),
            ),
            # Signed sweep of the hands about the hips; positive = toward image right
            "trunk_rotation": (
                [hip_mid, wrist_mid],
                lambda: projected_angle(_vertical_ref(hip_mid), hip_mid, wrist_mid, mc),
            ),
        })
        return table
