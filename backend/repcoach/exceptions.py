"""Errors surfaced to callers of the analysis engine."""


class RepcoachError(Exception):
    """Base class for repcoach errors."""


class InputShapeError(RepcoachError, ValueError):
    """Keypoint buffer cannot be read as (x, y, confidence) triples.

    Fatal for the frame it was raised on; session state is left untouched.
    """


class ProfileConfigError(RepcoachError, ValueError):
    """Exercise profile or catalog data failed validation at load time."""
