# src/lodegen/solver/movement.py
# Cell-level movement graph used by the solvability checker.
#
# Nodes are resting cells. Edges:
#   - walk left/right onto a non-solid cell while supported; the target is where the
#     fall from that cell comes to rest (ladder, pole, support below, or the floor)
#   - climb up only while standing in a climbable cell
#   - climb down from a climbable cell or onto one
#   - player only: dig the diagonal-below brick and drop into it (no refill timer)
#
# Trap bricks block entry but are not support, so falls pass through them.

from __future__ import annotations

from collections import deque
from typing import Deque, FrozenSet, Iterable, List, Set, Tuple

from ..grid import TileQueries

XY = Tuple[int, int]


class TerrainView:
    """Grid plus a set of revealed cells that act as climbable support."""

    def __init__(self, grid: TileQueries, revealed: Iterable[XY] = ()) -> None:
        self.grid = grid
        self.width = grid.width
        self.height = grid.height
        self.revealed: FrozenSet[XY] = frozenset(revealed)

    def solid(self, x: int, y: int) -> bool:
        if (x, y) in self.revealed:
            return False
        return self.grid.is_solid(x, y)

    def climbable(self, x: int, y: int) -> bool:
        return (x, y) in self.revealed or self.grid.is_climbable(x, y)

    def pole(self, x: int, y: int) -> bool:
        return self.grid.is_pole(x, y)

    def supports(self, x: int, y: int) -> bool:
        return (x, y) in self.revealed or self.grid.supports(x, y)

    def diggable(self, x: int, y: int) -> bool:
        return self.grid.is_diggable(x, y) and not self.climbable(x, y - 1)

    def has_support(self, x: int, y: int) -> bool:
        return self.climbable(x, y) or self.pole(x, y) or self.supports(x, y + 1)


def fall_destination(view: TerrainView, x: int, y: int) -> XY:
    while y < view.height - 1:
        if view.climbable(x, y) or view.pole(x, y) or view.supports(x, y + 1):
            break
        y += 1
    return (x, y)


def neighbors(view: TerrainView, x: int, y: int, dig: bool) -> List[XY]:
    out: List[XY] = []
    on_ladder = view.climbable(x, y)
    can_move = view.has_support(x, y)

    if can_move:
        for dx in (-1, 1):
            if not view.solid(x + dx, y):
                out.append(fall_destination(view, x + dx, y))

    if on_ladder and not view.solid(x, y - 1):
        out.append((x, y - 1))

    if (on_ladder or view.climbable(x, y + 1)) and not view.solid(x, y + 1):
        out.append(fall_destination(view, x, y + 1))

    if dig and can_move:
        for dx in (-1, 1):
            if not view.solid(x + dx, y) and view.diggable(x + dx, y + 1):
                out.append(fall_destination(view, x + dx, y + 1))

    return out


def reachable(view: TerrainView, start: XY, dig: bool) -> Set[XY]:
    """BFS over resting cells from start (after letting it settle)."""
    sx, sy = start
    if not view.grid.in_bounds(sx, sy):
        return set()
    first = fall_destination(view, sx, sy)
    seen: Set[XY] = {first}
    queue: Deque[XY] = deque([first])
    while queue:
        cx, cy = queue.popleft()
        for nxt in neighbors(view, cx, cy, dig):
            if nxt not in seen:
                seen.add(nxt)
                queue.append(nxt)
    return seen


def player_reachable(view: TerrainView, start: XY) -> Set[XY]:
    return reachable(view, start, dig=True)


def restricted_reachable(view: TerrainView, start: XY) -> Set[XY]:
    return reachable(view, start, dig=False)
