"""
Repetition counting from per-frame joint angles.

The counter owns the temporal smoothing windows for one session:
- ROM window (default 3 frames): primary-joint angle normalized to [0, 1]
- Velocity window (default 5 frames): primary-joint angular velocity

Each frame the smoothed values drive the phase detector, and the pattern's
completion rule decides whether the frame registers a rep:

- LOCKOUT: previous angle reached lockout, motion reverses into ECCENTRIC
- EDGE: last directional phase CONCENTRIC, new phase ECCENTRIC (NONE frames
  at the turnaround do not break the pairing)
- STRETCH: previous angle returned to the stretch angle, new push begins
- HOLD: entry into STATIC_HOLD (once per hold episode)
- ECCENTRIC_ENTRY: a controlled lowering begins

Every rule is additionally gated on range of motion reaching a pattern
fraction of the profile's min_rom_percentage.
"""

import logging
from collections import deque
from typing import Deque, Dict, Optional, Tuple

import numpy as np

from repcoach.config import Settings, get_settings
from repcoach.cv.geometry import normalized
from repcoach.cv.phase_detector import PhaseDetector
from repcoach.models.movement import CompletionRule, MovementPhase
from repcoach.schemas.profile import ExerciseProfile

logger = logging.getLogger(__name__)


class RepCounter:
    """
    Per-session rep counter.

    Not thread-safe: one instance per exercise stream, fed one frame at a
    time in non-decreasing timestamp order.
    """

    def __init__(
        self,
        profile: Optional[ExerciseProfile],
        settings: Optional[Settings] = None
    ):
        self.profile = profile
        self.settings = settings or get_settings()
        self.phase_detector = PhaseDetector(profile)

        self._count = 0
        self._phase = MovementPhase.NONE
        self._last_direction = MovementPhase.NONE  # Most recent CONCENTRIC/ECCENTRIC
        self._last_angles: Dict[str, float] = {}
        self._last_timestamp: Optional[float] = None
        self._rom_fraction = 0.0

        self.velocity_window: Deque[float] = deque(maxlen=self.settings.velocity_window_size)
        self.rom_window: Deque[float] = deque(maxlen=self.settings.rom_window_size)

    @property
    def count(self) -> int:
        return self._count

    @property
    def current_phase(self) -> MovementPhase:
        return self._phase

    @property
    def last_angles(self) -> Dict[str, float]:
        return dict(self._last_angles)

    @property
    def rom_fraction(self) -> float:
        """Most recent ROM fraction, always in [0, 1]."""
        return self._rom_fraction

    @property
    def average_rom(self) -> float:
        return float(np.mean(self.rom_window)) if self.rom_window else 0.0

    @property
    def average_velocity(self) -> float:
        return float(np.mean(self.velocity_window)) if self.velocity_window else 0.0

    def reset(self) -> None:
        """Zero the count and forget all history."""
        self._count = 0
        self._phase = MovementPhase.NONE
        self._last_direction = MovementPhase.NONE
        self._last_angles = {}
        self._last_timestamp = None
        self._rom_fraction = 0.0
        self.velocity_window.clear()
        self.rom_window.clear()

    def update(
        self,
        angles: Dict[str, float],
        timestamp: float
    ) -> Optional[Tuple[int, MovementPhase]]:
        """
        Process one frame of angles.

        Args:
            angles: Angle set extracted for this frame
            timestamp: Frame time in seconds

        Returns:
            (count, phase) on the frame a rep registers, otherwise None
        """
        if self.profile is None:
            return None

        joint = self.profile.primary_joint
        current = angles.get(joint)
        previous = self._last_angles.get(joint)

        # 1. ROM fraction
        if current is not None:
            self._rom_fraction = normalized(
                current, self.profile.range_min, self.profile.range_max
            )
            self.rom_window.append(self._rom_fraction)

        # 2. Angular velocity
        velocity = 0.0
        if current is not None and previous is not None and self._last_timestamp is not None:
            dt = timestamp - self._last_timestamp
            if dt > 0:
                velocity = (current - previous) / dt
        self._push_velocity(velocity)

        # 3. Phase
        new_phase = self.phase_detector.detect(self.average_velocity, self.average_rom)

        # 4. Completion
        completed = self._check_completion(new_phase, previous)
        if completed:
            self._count += 1
            logger.info(
                f"Rep {self._count} ({self.profile.id}): "
                f"{self._phase.value} -> {new_phase.value} at t={timestamp:.2f}s"
            )
        elif new_phase != self._phase:
            logger.debug(
                f"{self.profile.id}: phase {self._phase.value} -> {new_phase.value} "
                f"(v={self.average_velocity:.1f}, rom={self.average_rom:.2f})"
            )

        # 5. Snapshot
        self._phase = new_phase
        if new_phase in (MovementPhase.CONCENTRIC, MovementPhase.ECCENTRIC):
            self._last_direction = new_phase
        self._last_angles = dict(angles)
        self._last_timestamp = timestamp

        if completed:
            return self._count, new_phase
        return None

    def _push_velocity(self, velocity: float) -> None:
        # A decisive reversal restarts the window so the average follows it now
        # rather than several frames later.
        if (
            self.settings.restart_velocity_window_on_reversal
            and self.velocity_window
            and abs(velocity) > self.profile.velocity_threshold
            and self.average_velocity * velocity < 0
        ):
            self.velocity_window.clear()
        self.velocity_window.append(velocity)

    def _rom_gate(self, completion: CompletionRule) -> bool:
        """Range of motion covered within the ROM window clears the pattern's bar."""
        if not self.rom_window:
            return False
        required = self.profile.rule.rom_factor * self.profile.min_rom_percentage
        if completion == CompletionRule.STRETCH:
            # Measured from the top: depth reached toward the stretch position
            return 1.0 - min(self.rom_window) >= required
        return max(self.rom_window) >= required

    def _check_completion(
        self,
        new_phase: MovementPhase,
        previous_angle: Optional[float]
    ) -> bool:
        completion = self.profile.rule.completion
        prev_phase = self._phase

        if completion == CompletionRule.LOCKOUT:
            lockout = self.profile.lockout_angle
            triggered = (
                new_phase == MovementPhase.ECCENTRIC
                and prev_phase != MovementPhase.ECCENTRIC
                and lockout is not None
                and previous_angle is not None
                and previous_angle >= lockout
            )
        elif completion == CompletionRule.EDGE:
            # The smoothed velocity passes through NONE at a gradual turnaround
            triggered = (
                self._last_direction == MovementPhase.CONCENTRIC
                and new_phase == MovementPhase.ECCENTRIC
            )
        elif completion == CompletionRule.STRETCH:
            stretch = self.profile.stretch_angle
            triggered = (
                new_phase == MovementPhase.CONCENTRIC
                and prev_phase != MovementPhase.CONCENTRIC
                and stretch is not None
                and previous_angle is not None
                and previous_angle <= stretch
            )
        elif completion == CompletionRule.HOLD:
            triggered = new_phase == MovementPhase.STATIC_HOLD and (
                self.settings.count_every_hold_frame
                or prev_phase != MovementPhase.STATIC_HOLD
            )
        elif completion == CompletionRule.ECCENTRIC_ENTRY:
            triggered = (
                new_phase == MovementPhase.ECCENTRIC
                and prev_phase != MovementPhase.ECCENTRIC
            )
        else:
            return False

        return triggered and self._rom_gate(completion)
