"""
2D joint geometry.

All angle helpers follow the same missing-data policy: if a point is
malformed (not a Keypoint and fewer than 3 components) or any point's
confidence is below the threshold, the result is 0.0 rather than an error.
"""

import math
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from repcoach.cv.keypoints import Keypoint

DEFAULT_MIN_CONFIDENCE = 0.1

PointLike = Union[Keypoint, Sequence[float]]


def _as_point(point: PointLike) -> Optional[Tuple[float, float, float]]:
    if isinstance(point, Keypoint):
        values = (point.x, point.y, point.confidence)
    else:
        try:
            if len(point) < 3:
                return None
            values = (float(point[0]), float(point[1]), float(point[2]))
        except (TypeError, ValueError):
            return None
    if not all(math.isfinite(v) for v in values):
        return None
    return values


def _vectors(
    a: PointLike,
    b: PointLike,
    c: PointLike,
    min_confidence: float
) -> Optional[Tuple[np.ndarray, np.ndarray, np.ndarray]]:
    points = [_as_point(p) for p in (a, b, c)]
    if any(p is None for p in points):
        return None
    if any(p[2] < min_confidence for p in points):
        return None
    return tuple(np.array(p[:2]) for p in points)


def _cross(u: np.ndarray, v: np.ndarray) -> float:
    return float(u[0] * v[1] - u[1] * v[0])


def _signed_degrees(u: np.ndarray, v: np.ndarray) -> float:
    """Signed rotation from u to v in (-180, 180]."""
    result = math.degrees(math.atan2(_cross(u, v), float(np.dot(u, v))))
    return 180.0 if result == -180.0 else result


def angle(
    a: PointLike,
    b: PointLike,
    c: PointLike,
    min_confidence: float = DEFAULT_MIN_CONFIDENCE
) -> float:
    """
    Calculate the angle at vertex b formed by rays b->a and b->c.

    Returns degrees in [0, 180]; 180 = the three points are collinear
    with b in the middle (e.g. a fully extended elbow).
    """
    vectors = _vectors(a, b, c, min_confidence)
    if vectors is None:
        return 0.0
    pa, pb, pc = vectors

    result = abs(_signed_degrees(pa - pb, pc - pb))
    if result > 180.0:
        result = 360.0 - result
    return result


def signed_angle(
    a: PointLike,
    b: PointLike,
    c: PointLike,
    min_confidence: float = DEFAULT_MIN_CONFIDENCE
) -> float:
    """
    Frontal-plane deviation at b: the signed turn from segment a->b to b->c.

    0 when a, b and c are collinear. The sign tells which way the chain
    bends at b (e.g. knee valgus vs varus seen from the front).
    """
    vectors = _vectors(a, b, c, min_confidence)
    if vectors is None:
        return 0.0
    pa, pb, pc = vectors
    return _signed_degrees(pb - pa, pc - pb)


def projected_angle(
    a: PointLike,
    b: PointLike,
    c: PointLike,
    min_confidence: float = DEFAULT_MIN_CONFIDENCE
) -> float:
    """Signed angle from ray b->a to ray b->c in (-180, 180], no reflection."""
    vectors = _vectors(a, b, c, min_confidence)
    if vectors is None:
        return 0.0
    pa, pb, pc = vectors
    return _signed_degrees(pa - pb, pc - pb)


def distance(a: PointLike, b: PointLike) -> float:
    """Euclidean distance between two points (confidence ignored)."""
    pa, pb = _as_point(a), _as_point(b)
    if pa is None or pb is None:
        return 0.0
    return math.hypot(pa[0] - pb[0], pa[1] - pb[1])


def midpoint(a: Keypoint, b: Keypoint) -> Keypoint:
    """Midpoint of two keypoints, carrying the weaker confidence."""
    return Keypoint(
        (a.x + b.x) / 2.0,
        (a.y + b.y) / 2.0,
        min(a.confidence, b.confidence),
    )


def normalized(value: float, lo: float, hi: float) -> float:
    """Position of value within [lo, hi], clamped to [0, 1]."""
    span = hi - lo
    if span == 0:
        return 0.0
    return float(np.clip((value - lo) / span, 0.0, 1.0))
