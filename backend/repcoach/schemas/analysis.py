"""Per-frame analysis output schemas."""

from typing import TYPE_CHECKING, Dict, List, Optional
from pydantic import BaseModel

from repcoach.models.violation import ViolationCode

if TYPE_CHECKING:
    from repcoach.cv.exercise_analyzer import FrameAnalysis


class FormViolationResponse(BaseModel):
    """Schema for a single form violation."""
    kind: str
    code: str
    joint: str
    observed: float
    boundary: float
    description: Optional[str] = None

    class Config:
        from_attributes = True


class FrameAnalysisResponse(BaseModel):
    """Schema for the result of one analysed frame."""
    exercise_id: str
    frame_number: int
    timestamp: float
    rep_count: int
    rep_completed: bool
    phase: str
    engagement: float
    violations: List[FormViolationResponse]
    angles: Dict[str, float]

    @classmethod
    def from_analysis(cls, analysis: "FrameAnalysis") -> "FrameAnalysisResponse":
        return cls(
            exercise_id=analysis.exercise_id,
            frame_number=analysis.frame_number,
            timestamp=analysis.timestamp,
            rep_count=analysis.rep_count,
            rep_completed=analysis.rep_completed,
            phase=analysis.phase.value,
            engagement=analysis.engagement,
            violations=[
                FormViolationResponse(
                    kind=v.kind.value,
                    code=v.code,
                    joint=v.joint,
                    observed=v.observed,
                    boundary=v.boundary,
                    description=v.description,
                )
                for v in analysis.violations
            ],
            angles=dict(analysis.angles),
        )

    def get_violation_descriptions(self) -> List[str]:
        """Get human-readable violation descriptions."""
        return [ViolationCode.get_description(v.code) for v in self.violations]
