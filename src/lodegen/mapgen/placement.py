# src/lodegen/mapgen/placement.py
# Entity placement: player start, items (gold) and enemy spawns.
# Positions are 0-based (x, y); y grows downward. Nothing is placed in the hidden
# exit zone, so spot scans start at HIDDEN_ZONE_ROWS.

from typing import List, Tuple

from ..config import HIDDEN_ZONE_ROWS, MAX_ENEMIES, DifficultyProfile
from ..grid import Grid
from ..rng import SeededRandom
from ..tiles import BRICK, EMPTY, GOLD, HARD, LADDER

XY = Tuple[int, int]

START_TRIES = 20
ITEM_SPACING = 4
ENEMY_START_DISTANCE = 8
ENEMY_SPACING = 3

# Trap bricks are fallen through, so nothing rests on them.
_FLOOR = (BRICK, HARD, LADDER)


def manhattan(a: XY, b: XY) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def place_start(g: Grid, rng: SeededRandom) -> XY:
    ground_y = g.height - 2
    for _ in range(START_TRIES):
        x = rng.range(2, g.width - 2)
        if g.get(x, ground_y) in (EMPTY, LADDER):
            g.start = (x, ground_y)
            return g.start
    for x in range(1, g.width - 1):
        if not g.is_solid(x, ground_y):
            g.start = (x, ground_y)
            return g.start
    g.start = (2, ground_y)
    return g.start


def is_item_spot(g: Grid, x: int, y: int) -> bool:
    return g.get(x, y) == EMPTY and g.get(x, y + 1) in _FLOOR


def item_count(rng: SeededRandom, profile: DifficultyProfile) -> int:
    lo, hi = profile.items
    return rng.range(lo, hi + 1)


def place_items(g: Grid, rng: SeededRandom, profile: DifficultyProfile) -> List[XY]:
    want = item_count(rng, profile)
    spots = [
        (x, y)
        for y in range(HIDDEN_ZONE_ROWS, g.height - 1)
        for x in range(g.width)
        if (x, y) != g.start and is_item_spot(g, x, y)
    ]
    rng.shuffle(spots)

    placed: List[XY] = []
    for spot in spots:
        if len(placed) >= want:
            break
        if any(manhattan(p, spot) < ITEM_SPACING for p in placed):
            continue
        placed.append(spot)
    # Spacing is best effort: top up from whatever is left.
    taken = set(placed)
    for spot in spots:
        if len(placed) >= want:
            break
        if spot not in taken:
            placed.append(spot)
            taken.add(spot)

    for x, y in placed:
        g.set(x, y, GOLD)
    g.items.extend(placed)
    return placed


def enemy_count(rng: SeededRandom, profile: DifficultyProfile, level: int) -> int:
    lo, hi = profile.enemies
    bonus = min(max(level - 1, 0) // 3, 2)
    return min(rng.range(lo, hi + 1) + bonus, MAX_ENEMIES)


def is_enemy_spot(g: Grid, x: int, y: int) -> bool:
    return g.get(x, y) in (EMPTY, LADDER) and g.get(x, y + 1) in _FLOOR


def place_enemies(g: Grid, rng: SeededRandom, profile: DifficultyProfile, level: int) -> List[XY]:
    want = enemy_count(rng, profile, level)
    spots = [
        (x, y)
        for y in range(HIDDEN_ZONE_ROWS, g.height - 1)
        for x in range(g.width)
        if is_enemy_spot(g, x, y) and manhattan((x, y), g.start) > ENEMY_START_DISTANCE
    ]
    rng.shuffle(spots)

    for spot in spots:
        if len(g.enemy_spawns) >= want:
            break
        if any(manhattan(e, spot) < ENEMY_SPACING for e in g.enemy_spawns):
            continue
        g.enemy_spawns.append(spot)
    return list(g.enemy_spawns)
