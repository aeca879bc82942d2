"""Exercise profile schemas (loaded from the profile table at startup)."""

from typing import Dict, List, Optional, Set, Tuple
from pydantic import BaseModel, Field, field_validator, model_validator

from repcoach.models.movement import MovementPattern, PatternRule, get_pattern_rule
from repcoach.models.region import BodyRegion
from repcoach.models.violation import ViolationCode


class EngagementBonus(BaseModel):
    """Pattern-specific bonus term of the engagement score."""
    kind: str = Field(..., description="constant, target or eccentric")
    weight: float = Field(..., ge=0.0, le=1.0)
    joint: Optional[str] = None
    target: Optional[float] = None
    tolerance: Optional[float] = Field(None, gt=0.0)

    class Config:
        frozen = True

    @field_validator("kind")
    @classmethod
    def validate_kind(cls, v: str) -> str:
        valid_kinds = ["constant", "target", "eccentric"]
        if v not in valid_kinds:
            raise ValueError(f"bonus kind must be one of: {valid_kinds}")
        return v

    @model_validator(mode="after")
    def validate_target_fields(self) -> "EngagementBonus":
        if self.kind == "target" and (
            self.joint is None or self.target is None or self.tolerance is None
        ):
            raise ValueError("target bonus needs joint, target and tolerance")
        return self


class EngagementWeights(BaseModel):
    """Weights of the engagement sub-scores; they sum to at most 1."""
    primary: float = Field(0.6, ge=0.0, le=1.0)
    stabilization: float = Field(0.3, ge=0.0, le=1.0)
    bonuses: List[EngagementBonus] = Field(default_factory=list, max_length=2)

    class Config:
        frozen = True

    @property
    def total(self) -> float:
        return self.primary + self.stabilization + sum(b.weight for b in self.bonuses)

    @model_validator(mode="after")
    def validate_total(self) -> "EngagementWeights":
        if self.total > 1.0 + 1e-9:
            raise ValueError(f"engagement weights sum to {self.total:.3f}, must be <= 1")
        return self


class FormRule(BaseModel):
    """
    Exercise-specific form rule.

    Kinds (violation when):
    - min: angle < value
    - max: angle > value
    - abs_max: |angle| > value
    - abs_min: |angle| < value
    - target: |angle - value| > tolerance
    - diff_max: |angle - other_joint angle| > value
    """
    kind: str
    joint: str
    value: float
    code: str
    other_joint: Optional[str] = None
    tolerance: Optional[float] = Field(None, gt=0.0)

    class Config:
        frozen = True

    @field_validator("kind")
    @classmethod
    def validate_kind(cls, v: str) -> str:
        valid_kinds = ["min", "max", "abs_max", "abs_min", "target", "diff_max"]
        if v not in valid_kinds:
            raise ValueError(f"rule kind must be one of: {valid_kinds}")
        return v

    @field_validator("code")
    @classmethod
    def validate_code(cls, v: str) -> str:
        if v not in ViolationCode.all():
            raise ValueError(f"unknown violation code: {v}")
        return v

    @model_validator(mode="after")
    def validate_operands(self) -> "FormRule":
        if self.kind == "diff_max" and self.other_joint is None:
            raise ValueError("diff_max rule needs other_joint")
        if self.kind == "target" and self.tolerance is None:
            raise ValueError("target rule needs tolerance")
        return self


class ExerciseProfile(BaseModel):
    """Static per-exercise configuration consumed by the analysis engine."""
    id: str
    name: str
    muscle_group: str
    region: BodyRegion
    pattern: MovementPattern

    # Rep counting
    primary_joint: str
    range_min: float
    range_max: float
    velocity_threshold: float = Field(..., gt=0.0, description="Degrees per second")
    min_rom_percentage: float = Field(..., ge=0.0, le=1.0)
    lockout_angle: Optional[float] = None
    stretch_angle: Optional[float] = None
    hold_threshold: Optional[float] = Field(None, ge=0.0, le=1.0)

    # Form
    target_ranges: Dict[str, Tuple[float, float]] = Field(default_factory=dict)
    stabilization_joint: Optional[str] = None
    stabilization: float = Field(0.5, ge=0.0, le=1.0)
    lockout_requirement: float = Field(0.0, ge=0.0, le=1.0)
    rules: List[FormRule] = Field(default_factory=list)

    # Engagement
    strictness: float = Field(1.0, gt=0.0)
    engagement: EngagementWeights = Field(default_factory=EngagementWeights)

    class Config:
        frozen = True

    @field_validator("target_ranges")
    @classmethod
    def validate_target_ranges(
        cls, v: Dict[str, Tuple[float, float]]
    ) -> Dict[str, Tuple[float, float]]:
        for joint, (lo, hi) in v.items():
            if lo > hi:
                raise ValueError(f"target range for {joint} has min {lo} > max {hi}")
        return v

    @model_validator(mode="after")
    def validate_rom_range(self) -> "ExerciseProfile":
        if self.range_max <= self.range_min:
            raise ValueError(
                f"range_max ({self.range_max}) must exceed range_min ({self.range_min})"
            )
        return self

    @property
    def rule(self) -> PatternRule:
        return get_pattern_rule(self.pattern)

    @property
    def effective_hold_threshold(self) -> Optional[float]:
        """Profile override, else the pattern default."""
        if self.hold_threshold is not None:
            return self.hold_threshold
        return self.rule.hold_threshold

    def referenced_joints(self) -> Set[str]:
        """Every angle name this profile reads."""
        joints = {self.primary_joint}
        if self.stabilization_joint:
            joints.add(self.stabilization_joint)
        joints.update(self.target_ranges)
        for rule in self.rules:
            joints.add(rule.joint)
            if rule.other_joint:
                joints.add(rule.other_joint)
        for bonus in self.engagement.bonuses:
            if bonus.joint:
                joints.add(bonus.joint)
        return joints
