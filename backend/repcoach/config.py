"""Application configuration."""

from functools import lru_cache
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Rep Coach"
    debug: bool = False

    # Profile data ("" = packaged defaults)
    profiles_path: str = ""
    catalog_path: str = ""

    # Keypoints
    min_keypoint_confidence: float = 0.1  # Below this a joint angle reads as 0.0
    drop_low_confidence_angles: bool = False  # Omit the key instead of reporting 0.0
    extraction_side: str = "auto"  # "left", "right" or "auto" (pick the more confident side)
    timestamp_scale: float = 1.0  # 0.001 for hosts that send milliseconds

    # Temporal smoothing
    velocity_window_size: int = 5
    rom_window_size: int = 3
    restart_velocity_window_on_reversal: bool = True

    # Rep completion
    count_every_hold_frame: bool = False  # Legacy: count each frame of a hold, not each hold

    # Form / engagement
    stability_tolerance_degrees: float = 30.0  # Deviation from 180 that zeroes stabilization
    neutral_engagement: float = 0.5  # Reported for exercises with no profile
    min_engagement: float = 0.1
    max_engagement: float = 1.0

    @field_validator("velocity_window_size", "rom_window_size")
    @classmethod
    def validate_window_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("window sizes must be at least 1")
        return v

    @field_validator("extraction_side")
    @classmethod
    def validate_extraction_side(cls, v: str) -> str:
        valid_sides = ["left", "right", "auto"]
        if v not in valid_sides:
            raise ValueError(f"extraction_side must be one of: {valid_sides}")
        return v

    class Config:
        env_prefix = "REPCOACH_"
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
