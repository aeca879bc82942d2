"""Pydantic schemas for profile data and analysis output."""

from repcoach.schemas.profile import (
    EngagementBonus,
    EngagementWeights,
    FormRule,
    ExerciseProfile,
)
from repcoach.schemas.analysis import (
    FormViolationResponse,
    FrameAnalysisResponse,
)

__all__ = [
    "EngagementBonus",
    "EngagementWeights",
    "FormRule",
    "ExerciseProfile",
    "FormViolationResponse",
    "FrameAnalysisResponse",
]
