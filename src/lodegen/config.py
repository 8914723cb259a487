# src/lodegen/config.py
# Difficulty table and generator constants. Profiles are immutable and looked up by key.

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Tuple

log = logging.getLogger(__name__)

GRID_WIDTH = 28
GRID_HEIGHT = 16
HIDDEN_ZONE_ROWS = 3  # top rows reserved for the exit ladder

MAX_ENEMIES = 5
MIN_DELIVERY_OVERLAP = 2

PIPELINE_VERSION = 3


@dataclass(frozen=True)
class DifficultyProfile:
    name: str
    lives: int
    enemies: Tuple[int, int]   # inclusive min, max
    items: Tuple[int, int]     # inclusive min, max
    ladder_density: float      # 0..1
    trap_chance: float         # 0..1
    complexity: float          # 0..1, band count + spine zig-zag
    hole_time: float           # multiplier on hole duration
    max_assisted_items: int = 0
    enemy_speed: float = 1.0   # consumed by the game loop, not the generator


@dataclass(frozen=True)
class GenerationConfig:
    width: int = GRID_WIDTH
    height: int = GRID_HEIGHT
    max_attempts: int = 100
    # Best non-solvable candidate must reach this score (and respect the
    # assisted ceiling) to be used instead of the fallback.
    accept_threshold: float = 1.0


DIFFICULTIES: Dict[str, DifficultyProfile] = {
    "easy": DifficultyProfile(
        name="EASY", lives=5, enemies=(1, 2), items=(5, 8),
        ladder_density=0.7, trap_chance=0.05, complexity=0.25,
        hole_time=1.3, max_assisted_items=0, enemy_speed=0.7,
    ),
    "normal": DifficultyProfile(
        name="NORMAL", lives=7, enemies=(2, 3), items=(8, 12),
        ladder_density=0.5, trap_chance=0.1, complexity=0.5,
        hole_time=1.0, max_assisted_items=0, enemy_speed=1.0,
    ),
    "hard": DifficultyProfile(
        name="HARD", lives=9, enemies=(3, 4), items=(12, 16),
        ladder_density=0.35, trap_chance=0.15, complexity=0.75,
        hole_time=0.8, max_assisted_items=1, enemy_speed=1.2,
    ),
    "ninja": DifficultyProfile(
        name="NINJA", lives=11, enemies=(4, 5), items=(16, 20),
        ladder_density=0.25, trap_chance=0.2, complexity=1.0,
        hole_time=0.6, max_assisted_items=2, enemy_speed=1.4,
    ),
}

DEFAULT_DIFFICULTY = "normal"


def difficulty_key(key: str) -> str:
    k = (key or "").lower()
    return k if k in DIFFICULTIES else DEFAULT_DIFFICULTY


def difficulty_for(key: str, table: Mapping[str, DifficultyProfile] = DIFFICULTIES) -> DifficultyProfile:
    """Case-insensitive lookup; unknown keys get the default profile."""
    k = (key or "").lower()
    if k in table:
        return table[k]
    return table.get(DEFAULT_DIFFICULTY, DIFFICULTIES[DEFAULT_DIFFICULTY])


_PROFILE_FIELDS = {f.name for f in fields(DifficultyProfile)}


def _profile_from_dict(base: DifficultyProfile, data: Mapping[str, Any]) -> DifficultyProfile:
    filtered = {k: v for k, v in data.items() if k in _PROFILE_FIELDS}
    for pair in ("enemies", "items"):
        if pair in filtered:
            lo, hi = filtered[pair]
            filtered[pair] = (int(lo), int(hi))
    return replace(base, **filtered)


def load_difficulties(path: str) -> Dict[str, DifficultyProfile]:
    """
    Read {"difficulties": {"easy": {...}, ...}} overrides on top of the built-in
    table. Missing or unreadable files give the built-in table.
    """
    table = dict(DIFFICULTIES)
    if not os.path.exists(path):
        log.warning("Difficulty file not found: %s, using defaults", path)
        return table
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        for key, overrides in data.get("difficulties", {}).items():
            k = key.lower()
            base = table.get(k, DIFFICULTIES[DEFAULT_DIFFICULTY])
            if k not in table and "name" not in overrides:
                overrides = dict(overrides, name=key.upper())
            table[k] = _profile_from_dict(base, overrides)
    except (OSError, ValueError, TypeError, AttributeError) as e:
        log.warning("Error loading difficulties from %s: %s, using defaults", path, e)
        return dict(DIFFICULTIES)
    return table
