"""
Exercise profile registry.

Profiles are data, not code: they load once from JSON, are validated with
the profile schema, and are cross-checked against the angle names each
body region can produce. The exercise catalog (the ids offered to users)
is loaded alongside and must only name profiled exercises.

Lookups for unknown exercise ids return None; callers fall back to
neutral behaviour instead of failing.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from repcoach.config import get_settings
from repcoach.exceptions import ProfileConfigError
from repcoach.models.movement import CompletionRule
from repcoach.models.region import REGION_ANGLES
from repcoach.schemas.profile import ExerciseProfile

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent
DEFAULT_PROFILES_PATH = DATA_DIR / "exercises.json"
DEFAULT_CATALOG_PATH = DATA_DIR / "catalog.json"


def _read_json(path: Union[str, Path]) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ProfileConfigError(f"Cannot read {path}: {e}") from e


class ProfileRegistry:
    """Read-only map of exercise id -> ExerciseProfile, plus the catalog."""

    def __init__(
        self,
        profiles: Iterable[ExerciseProfile],
        catalog: Optional[Iterable[str]] = None
    ):
        self._profiles: Dict[str, ExerciseProfile] = {}
        for profile in profiles:
            if profile.id in self._profiles:
                raise ProfileConfigError(f"Duplicate exercise profile: {profile.id}")
            self._validate_profile(profile)
            self._profiles[profile.id] = profile

        self._catalog = self._validate_catalog(
            list(catalog) if catalog is not None else list(self._profiles)
        )
        logger.info(
            f"Loaded {len(self._profiles)} exercise profiles, "
            f"{len(self._catalog)} in catalog"
        )

    @classmethod
    def from_dicts(
        cls,
        profile_data: Iterable[Dict[str, Any]],
        catalog: Optional[Iterable[str]] = None
    ) -> "ProfileRegistry":
        profiles = []
        for entry in profile_data:
            try:
                profiles.append(ExerciseProfile(**entry))
            except ValidationError as e:
                exercise_id = entry.get("id", "<missing id>")
                raise ProfileConfigError(f"Invalid profile {exercise_id}: {e}") from e
        return cls(profiles, catalog)

    @classmethod
    def load(
        cls,
        profiles_path: Optional[Union[str, Path]] = None,
        catalog_path: Optional[Union[str, Path]] = None
    ) -> "ProfileRegistry":
        """Load profiles and catalog from JSON (packaged data by default)."""
        profiles_doc = _read_json(profiles_path or DEFAULT_PROFILES_PATH)
        catalog_doc = _read_json(catalog_path or DEFAULT_CATALOG_PATH)

        if not isinstance(profiles_doc, dict) or not isinstance(profiles_doc.get("exercises"), list):
            raise ProfileConfigError("Profile file must contain an 'exercises' list")
        if not isinstance(catalog_doc, dict) or not isinstance(catalog_doc.get("exercises"), list):
            raise ProfileConfigError("Catalog file must contain an 'exercises' list")

        return cls.from_dicts(profiles_doc["exercises"], catalog_doc["exercises"])

    @staticmethod
    def _validate_profile(profile: ExerciseProfile) -> None:
        available = set(REGION_ANGLES[profile.region])
        unknown = profile.referenced_joints() - available
        if unknown:
            raise ProfileConfigError(
                f"{profile.id}: {sorted(unknown)} not produced by region {profile.region.value}"
            )

        completion = profile.rule.completion
        if completion == CompletionRule.LOCKOUT and profile.lockout_angle is None:
            raise ProfileConfigError(f"{profile.id}: {profile.pattern.value} needs lockout_angle")
        if completion == CompletionRule.STRETCH and profile.stretch_angle is None:
            raise ProfileConfigError(f"{profile.id}: {profile.pattern.value} needs stretch_angle")

    def _validate_catalog(self, catalog: List[str]) -> List[str]:
        validated: List[str] = []
        for exercise_id in catalog:
            if exercise_id in validated:
                logger.warning(f"Duplicate catalog entry ignored: {exercise_id}")
                continue
            if exercise_id not in self._profiles:
                raise ProfileConfigError(f"Catalog exercise has no profile: {exercise_id}")
            validated.append(exercise_id)

        unlisted = [eid for eid in self._profiles if eid not in validated]
        if unlisted:
            logger.warning(f"Profiles missing from catalog: {unlisted}")
        return validated

    def get(self, exercise_id: str) -> Optional[ExerciseProfile]:
        """Profile for an id, or None when the exercise is unknown."""
        return self._profiles.get(exercise_id)

    def __contains__(self, exercise_id: str) -> bool:
        return exercise_id in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)

    def catalog(self) -> List[str]:
        return list(self._catalog)

    def muscle_groups(self) -> List[str]:
        return sorted({p.muscle_group for p in self._profiles.values()})

    def by_muscle_group(self, muscle_group: str) -> List[ExerciseProfile]:
        return [
            self._profiles[eid] for eid in self._catalog
            if self._profiles[eid].muscle_group == muscle_group
        ]


@lru_cache
def get_registry() -> ProfileRegistry:
    """Get cached registry loaded from the configured paths."""
    settings = get_settings()
    return ProfileRegistry.load(
        settings.profiles_path or None,
        settings.catalog_path or None,
    )
