# src/lodegen/solver/checker.py
# Solvability check for a candidate level. Pure: reads the grid, never mutates it.
#
# Pass A: hidden exit cells are ordinary terrain (items are collected before the reveal).
# Pass B: hidden exit cells are climbable support (is row 0 reachable after the reveal?).

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Set, Tuple

from ..config import MIN_DELIVERY_OVERLAP, difficulty_for
from ..grid import TileQueries
from .movement import TerrainView, player_reachable, restricted_reachable

XY = Tuple[int, int]


@dataclass(frozen=True)
class SolvabilityResult:
    solvable: bool
    score: float
    debug: str
    direct: int = 0
    assisted: int = 0
    unreachable: int = 0
    exit_reachable: bool = False


def _exit_reachable(grid: TileQueries, start: XY) -> bool:
    view = TerrainView(grid, revealed=grid.exit_ladders)
    reach = player_reachable(view, start)
    return any((col, 0) in reach for col in {x for x, _ in grid.exit_ladders})


def _enemy_reach(view: TerrainView, spawns: Iterable[XY]) -> Set[XY]:
    out: Set[XY] = set()
    for spawn in spawns:
        out |= restricted_reachable(view, spawn)
    return out


def _deliverable(view: TerrainView, item: XY, player_set: Set[XY]) -> bool:
    # An enemy carrying the item must be able to bring it somewhere the player walks;
    # a single shared cell is treated as too fragile.
    from_item = restricted_reachable(view, item)
    return len(from_item & player_set) >= MIN_DELIVERY_OVERLAP


def check_solvability(grid: TileQueries, max_assisted: Optional[int] = None) -> SolvabilityResult:
    """Classify every item and test the exit. Score is item coverage x exit (0 or 1)."""
    items = list(getattr(grid, "items", ()))
    if not items:
        return SolvabilityResult(False, 0.0, "no items")
    if not grid.exit_ladders:
        return SolvabilityResult(False, 0.0, "no exit ladders", unreachable=len(items))

    if max_assisted is None:
        max_assisted = difficulty_for(getattr(grid, "difficulty", "")).max_assisted_items

    start = grid.start
    view = TerrainView(grid)
    player_set = player_reachable(view, start)

    direct = 0
    assisted = 0
    enemy_set: Optional[Set[XY]] = None
    for item in items:
        if item in player_set:
            direct += 1
            continue
        if enemy_set is None:
            enemy_set = _enemy_reach(view, getattr(grid, "enemy_spawns", ()))
        if item in enemy_set and _deliverable(view, item, player_set):
            assisted += 1
    unreachable = len(items) - direct - assisted

    exit_ok = _exit_reachable(grid, start)
    coverage = (direct + assisted) / len(items)
    score = coverage * (1.0 if exit_ok else 0.0)
    solvable = unreachable == 0 and assisted <= max_assisted and exit_ok

    debug = (
        f"items={direct + assisted}/{len(items)} (direct={direct}, assisted={assisted}), "
        f"exit={exit_ok}, reachable={len(player_set)}"
    )
    return SolvabilityResult(
        solvable=solvable,
        score=score,
        debug=debug,
        direct=direct,
        assisted=assisted,
        unreachable=unreachable,
        exit_reachable=exit_ok,
    )


def is_solvable(grid: TileQueries, max_assisted: Optional[int] = None) -> bool:
    return check_solvability(grid, max_assisted).solvable
