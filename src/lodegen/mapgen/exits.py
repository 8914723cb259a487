# src/lodegen/mapgen/exits.py
# Exit placement. The top HIDDEN_ZONE_ROWS rows hold the exit ladder, which only
# appears once every item is collected. We record its cells as metadata and leave
# the visible grid untouched; the game loop writes EXIT_LADDER at reveal time.

from typing import List, Tuple

from ..config import HIDDEN_ZONE_ROWS
from ..grid import Grid
from ..rng import SeededRandom
from ..tiles import EMPTY, GOLD, LADDER, is_pole, is_solid

XY = Tuple[int, int]


def clear_hidden_zone(g: Grid) -> None:
    for y in range(min(HIDDEN_ZONE_ROWS, g.height)):
        for x in range(g.width):
            if g.get(x, y) == LADDER:
                g.set(x, y, EMPTY)


def zone_clear(g: Grid, x: int) -> bool:
    return all(
        not is_solid(g.get(x, y)) and not is_pole(g.get(x, y))
        for y in range(HIDDEN_ZONE_ROWS)
    )


def exit_candidates(g: Grid) -> List[int]:
    """Columns whose ladder reaches the row under the zone with a clear path above."""
    return [
        x for x in range(g.width)
        if g.get(x, HIDDEN_ZONE_ROWS) == LADDER and zone_clear(g, x)
    ]


def force_exit_column(g: Grid, x: int) -> None:
    if g.get(x, HIDDEN_ZONE_ROWS) != LADDER:
        for y in range(HIDDEN_ZONE_ROWS, g.height - 1):
            t = g.get(x, y)
            if is_solid(t) and y != HIDDEN_ZONE_ROWS:
                break
            if t == GOLD and (x, y) in g.items:
                g.items.remove((x, y))
            g.set(x, y, LADDER)
    for y in range(HIDDEN_ZONE_ROWS):
        t = g.get(x, y)
        if is_solid(t) or is_pole(t):
            g.set(x, y, EMPTY)


def place_exit(g: Grid, rng: SeededRandom, fallback_column: int) -> int:
    """Pick (or force) the exit column and record its hidden cells. Returns the column."""
    clear_hidden_zone(g)
    candidates = exit_candidates(g)
    if candidates:
        x = rng.pick(candidates)
    else:
        x = fallback_column
        force_exit_column(g, x)
    g.exit_ladders = [(x, y) for y in range(HIDDEN_ZONE_ROWS)]
    return x
