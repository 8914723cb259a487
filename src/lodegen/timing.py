# src/lodegen/timing.py
# Frame-based timing for holes so the grid stays independent of the game loop's clock.
# Durations are in frames at the reference rate; the loop passes elapsed frames and
# the current speed multiplier.

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

SPEED_MULTIPLIERS: Tuple[float, ...] = (0.5, 0.75, 1.0, 1.25, 1.5, 2.0)
DEFAULT_SPEED_INDEX = 2


@dataclass(frozen=True)
class TimingModel:
    fps: int = 60
    hole_duration_frames: int = 600  # ~10s before a dug brick refills
    hole_warning_frames: int = 120   # flash window before refill
    dig_frames: int = 12

    def hole_frames(self, hole_scale: float) -> int:
        """Countdown for a new hole under a difficulty multiplier."""
        return max(1, int(self.hole_duration_frames * hole_scale))

    def frames_from_seconds(self, seconds: float) -> float:
        return seconds * self.fps

    def in_warning(self, timer: float) -> bool:
        return 0 < timer <= self.hole_warning_frames


DEFAULT_TIMING = TimingModel()


def speed_scale_for(speed_index: int = DEFAULT_SPEED_INDEX) -> float:
    # Out-of-range menu indices clamp to the nearest setting.
    i = min(max(speed_index, 0), len(SPEED_MULTIPLIERS) - 1)
    return SPEED_MULTIPLIERS[i]
