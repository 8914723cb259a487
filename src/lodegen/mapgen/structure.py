# src/lodegen/mapgen/structure.py
# Terrain stages of the pipeline: ground, spine, platform bands, extra ladders,
# poles, hardening and ladder-landing repair. Each stage mutates the working grid.

from typing import List, Set, Tuple

from ..config import HIDDEN_ZONE_ROWS, DifficultyProfile
from ..grid import Grid
from ..rng import SeededRandom
from ..tiles import (
    BRICK, EMPTY, GOLD, HARD, LADDER, POLE, TRAP,
    is_climbable, is_solid,
)

XY = Tuple[int, int]

MIN_POLE_GAP, MAX_POLE_GAP = 2, 10
EDGE_LEFT, EDGE_RIGHT = "left", "right"


def create_ground(g: Grid) -> None:
    g.fill_row(g.height - 1, BRICK, range(g.width))


def extend_ladder_down(g: Grid, x: int, from_row: int) -> None:
    """
    Lay ladder from from_row down to the next surface. A brick at from_row itself
    becomes the ladder's top landing; the first brick below stops the ladder.
    The ground row is never touched.
    """
    for y in range(from_row, g.height - 1):
        t = g.get(x, y)
        if t == HARD:
            break
        if is_solid(t) and y != from_row:
            break
        g.set(x, y, LADDER)


def ladder_columns(g: Grid, row: int) -> List[int]:
    return [x for x in range(g.width) if is_climbable(g.get(x, row))]


# ---------- Spine ----------

def create_spine(g: Grid, rng: SeededRandom, profile: DifficultyProfile) -> int:
    """
    One ladder corridor from just under the hidden zone to just above the ground.
    Zig-zags shift sideways over a hard ledge. Returns the column at the top.
    """
    top, bottom = HIDDEN_ZONE_ROWS, g.height - 2
    x = rng.range(int(g.width * 0.3), int(g.width * 0.7))
    zig_p = 0.35 * profile.complexity
    seg_max = max(3, int(8 - 4 * profile.complexity))

    y = bottom
    while y >= top:
        seg_top = max(top, y - rng.range(3, seg_max + 1) + 1)
        for yy in range(seg_top, y + 1):
            g.set(x, yy, LADDER)
        if seg_top <= top:
            break
        if rng.chance(zig_p):
            step = rng.range(2, 5)
            nx = x + step if rng.chance(0.5) else x - step
            nx = min(max(nx, 2), g.width - 3)
            if nx != x:
                lo, hi = min(x, nx), max(x, nx)
                for cx in range(lo, hi + 1):
                    if cx != x and not is_climbable(g.get(cx, seg_top + 1)):
                        g.set(cx, seg_top + 1, HARD)
                x = nx
                y = seg_top  # next segment starts on the crossing row
                continue
        y = seg_top - 1
    return x


# ---------- Platform bands ----------

def band_rows(g: Grid, profile: DifficultyProfile) -> List[int]:
    rows = [r for r in range(g.height - 4, HIDDEN_ZONE_ROWS - 1, -3)]
    count = int(2 + 2.5 * profile.complexity)
    return rows[:count]


def build_band(g: Grid, rng: SeededRandom, row: int, connect_from: List[int]) -> List[int]:
    ladders: List[int] = []
    n_segments = rng.range(2, 5)
    seg_w = g.width // n_segments
    prev_end = -2

    for seg in range(n_segments):
        start = seg * seg_w + rng.range(0, 3)
        end = min(start + rng.range(4, max(5, seg_w)), g.width - 1)
        start = max(start, prev_end + 2)  # keep a gap column
        if start >= end:
            continue
        for x in range(start, end + 1):
            if not is_climbable(g.get(x, row)):
                g.set(x, row, BRICK)
        prev_end = end

        lx = start + rng.range(1, max(2, end - start))
        if lx <= end:
            extend_ladder_down(g, lx, row)
            ladders.append(lx)

    # Chain to the band below so this band is never an island.
    if connect_from and ladders:
        target = rng.pick(connect_from)
        chained = False
        for d in range(5):
            for x in (target + d, target - d):
                if 0 <= x < g.width and g.get(x, row) == BRICK:
                    extend_ladder_down(g, x, row)
                    if x not in ladders:
                        ladders.append(x)
                    chained = True
                    break
            if chained:
                break
    return ladders


def create_connected_platforms(g: Grid, rng: SeededRandom, profile: DifficultyProfile) -> None:
    previous: List[int] = []
    for row in band_rows(g, profile):
        connect_from = previous or ladder_columns(g, row)
        previous = build_band(g, rng, row, connect_from)


def add_extra_ladders(g: Grid, rng: SeededRandom, profile: DifficultyProfile) -> None:
    for _ in range(int(profile.ladder_density * 8)):
        x = rng.range(2, g.width - 2)
        for y in range(HIDDEN_ZONE_ROWS + 1, g.height - 2):
            if g.get(x, y) == BRICK and g.get(x, y - 1) == EMPTY:
                extend_ladder_down(g, x, y)
                break


# ---------- Poles ----------

def find_platform_edges(g: Grid) -> List[Tuple[int, int, str]]:
    """(x, standing_row, side) for every walkable surface that ends at an open cell."""
    edges: List[Tuple[int, int, str]] = []
    for y in range(HIDDEN_ZONE_ROWS + 1, g.height - 2):
        for x in range(1, g.width - 1):
            t = g.get(x, y)
            if t not in (BRICK, HARD, LADDER) or g.get(x, y - 1) not in (EMPTY, GOLD):
                continue
            if g.get(x - 1, y) in (EMPTY, POLE):
                edges.append((x, y - 1, EDGE_LEFT))
            if g.get(x + 1, y) in (EMPTY, POLE):
                edges.append((x, y - 1, EDGE_RIGHT))
    return edges


def _pole_fits(g: Grid, x1: int, x2: int, row: int) -> bool:
    gap = x2 - x1 - 1
    if gap < MIN_POLE_GAP or gap > MAX_POLE_GAP:
        return False
    span = range(x1 + 1, x2)
    # Clear path and no existing pole on it
    if any(g.get(x, row) not in (EMPTY, GOLD) for x in span):
        return False
    # Never bridge over a floor that already connects the edges
    return not all(g.supports(x, row + 1) for x in span)


def create_poles(g: Grid, rng: SeededRandom, profile: DifficultyProfile) -> None:
    edges = find_platform_edges(g)
    rights = [(x, r) for x, r, side in edges if side == EDGE_RIGHT]
    lefts = sorted((x, r) for x, r, side in edges if side == EDGE_LEFT)
    used: Set[XY] = set()
    accept_p = 0.3 + 0.4 * profile.complexity

    for x1, row in rights:
        if (x1, row) in used:
            continue
        # Only the facing edge across the gap is a candidate.
        far = next(((x2, r2) for x2, r2 in lefts if r2 == row and x2 > x1), None)
        if far is None or far in used or not _pole_fits(g, x1, far[0], row):
            continue
        if rng.chance(accept_p):
            for x in range(x1 + 1, far[0]):
                if g.get(x, row) != GOLD:
                    g.set(x, row, POLE)
            used.add((x1, row))
            used.add(far)


# ---------- Hardening + repair ----------

def harden_bricks(g: Grid, rng: SeededRandom, profile: DifficultyProfile) -> None:
    hard_p = 0.03 + 0.04 * profile.complexity
    for y in range(1, g.height - 1):
        for x in range(g.width):
            if g.get(x, y) != BRICK:
                continue
            if rng.chance(hard_p):
                g.set(x, y, HARD)
                continue
            if rng.chance(profile.trap_chance):
                # A trap under a ladder landing or capping a ladder drops the climber.
                if is_climbable(g.get(x, y - 1)) or is_climbable(g.get(x, y + 1)):
                    continue
                g.set(x, y, TRAP)


def ensure_ladder_access(g: Grid) -> None:
    """Clear the cap over any ladder top that has no walkable side landing."""
    for x in range(g.width):
        for y in range(1, g.height - 1):
            if not is_climbable(g.get(x, y)) or is_climbable(g.get(x, y - 1)):
                continue
            if not g.is_solid(x, y - 1):
                continue
            left_ok = not g.is_solid(x - 1, y) and g.supports(x - 1, y + 1)
            right_ok = not g.is_solid(x + 1, y) and g.supports(x + 1, y + 1)
            if not left_ok and not right_ok:
                g.set(x, y - 1, EMPTY)
