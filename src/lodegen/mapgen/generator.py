# src/lodegen/mapgen/generator.py
# Canonical level generator: staged pipeline + solvability-scored retry loop.
#
# One RNG stream per (seed, level) drives every attempt, so the same inputs always
# produce the same level. Attempts never share a grid.

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Union

from ..config import (
    DIFFICULTIES, GRID_HEIGHT, GRID_WIDTH, PIPELINE_VERSION,
    DifficultyProfile, GenerationConfig, difficulty_for,
)
from ..grid import Grid, LevelSnapshot
from ..rng import Seed, SeededRandom, level_seed
from ..solver.checker import SolvabilityResult, check_solvability
from .exits import place_exit
from .fallback import fallback_level
from .placement import place_enemies, place_items, place_start
from .structure import (
    add_extra_ladders, create_connected_platforms, create_ground, create_poles,
    create_spine, ensure_ladder_access, harden_bricks,
)

log = logging.getLogger(__name__)

LOGGED_ATTEMPTS = 5


def generate_candidate(
    rng: SeededRandom,
    profile: DifficultyProfile,
    level: int = 1,
    width: int = GRID_WIDTH,
    height: int = GRID_HEIGHT,
) -> Grid:
    """Run every stage once on a fresh grid."""
    g = Grid.empty(width, height, hole_scale=profile.hole_time, difficulty=profile.name.lower())

    create_ground(g)
    spine_top = create_spine(g, rng, profile)
    create_connected_platforms(g, rng, profile)
    add_extra_ladders(g, rng, profile)
    create_poles(g, rng, profile)
    harden_bricks(g, rng, profile)
    ensure_ladder_access(g)

    place_start(g, rng)
    place_items(g, rng, profile)
    place_enemies(g, rng, profile, level)

    place_exit(g, rng, fallback_column=spine_top)
    return g


@dataclass
class GenerationReport:
    attempts: int = 0
    best_score: float = -1.0
    best_attempt: int = -1
    used_fallback: bool = False
    result: Optional[SolvabilityResult] = None
    version: int = PIPELINE_VERSION


class LevelGenerator:
    def __init__(
        self,
        seed: Seed,
        difficulty: Union[str, DifficultyProfile] = "normal",
        level: int = 1,
        config: Optional[GenerationConfig] = None,
        table: Mapping[str, DifficultyProfile] = DIFFICULTIES,
    ) -> None:
        if isinstance(difficulty, DifficultyProfile):
            self.profile = difficulty
        else:
            self.profile = difficulty_for(difficulty, table)
        self.level = max(1, level)
        self.config = config or GenerationConfig()
        self.rng = SeededRandom(level_seed(seed, self.level))
        self.report = GenerationReport()

    def _acceptable(self, result: SolvabilityResult) -> bool:
        # The assisted ceiling holds even for a lowered threshold.
        return (
            result.score >= self.config.accept_threshold
            and result.assisted <= self.profile.max_assisted_items
        )

    def generate(self) -> LevelSnapshot:
        cfg = self.config
        ceiling = self.profile.max_assisted_items
        report = self.report = GenerationReport()
        best: Optional[Grid] = None
        best_result: Optional[SolvabilityResult] = None

        for attempt in range(cfg.max_attempts):
            g = generate_candidate(self.rng, self.profile, self.level, cfg.width, cfg.height)
            result = check_solvability(g, max_assisted=ceiling)
            report.attempts = attempt + 1

            if result.solvable:
                log.info("Generated solvable level on attempt %d (%s)", attempt + 1, result.debug)
                report.best_score, report.best_attempt, report.result = result.score, attempt, result
                return g.snapshot()

            # Strict > keeps the earliest attempt on ties.
            if result.score > report.best_score:
                best, best_result = g, result
                report.best_score, report.best_attempt = result.score, attempt

            if attempt < LOGGED_ATTEMPTS:
                log.debug("Attempt %d: score=%.3f, %s", attempt + 1, result.score, result.debug)

        if best is not None and best_result is not None and self._acceptable(best_result):
            log.info("Using best candidate from attempt %d with score %.3f",
                     report.best_attempt + 1, report.best_score)
            report.result = best_result
            return best.snapshot()

        log.warning("No acceptable level after %d attempts (best score %.3f), using fallback",
                    report.attempts, report.best_score)
        report.used_fallback = True
        snap = fallback_level(self.profile)
        report.result = check_solvability(snap, max_assisted=ceiling)
        return snap


def generate_level(
    seed: Seed,
    difficulty: Union[str, DifficultyProfile] = "normal",
    level: int = 1,
    config: Optional[GenerationConfig] = None,
) -> LevelSnapshot:
    return LevelGenerator(seed, difficulty, level, config).generate()
