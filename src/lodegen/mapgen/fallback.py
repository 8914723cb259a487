# src/lodegen/mapgen/fallback.py
# Hand-authored level used when the attempt budget runs out. Solvable by construction:
# every item sits on a platform reachable by plain walking and climbing, and the exit
# column's ladder reaches the row under the hidden zone.
#
#   row  0 ....................X.......
#   row  5 ............$.....$.H.$.....   (platform B at row 6, x 10..24)
#   row  9 .....$....$...H$E...........   (platform A at row 10, x 3..17)
#   row 10 ...#####H#########------....
#   row 14 ...P....H.............E.....
#   row 15 ############################

from typing import Optional

from ..config import GRID_HEIGHT, GRID_WIDTH, HIDDEN_ZONE_ROWS, DifficultyProfile, difficulty_for
from ..grid import Grid, LevelSnapshot
from ..tiles import BRICK, GOLD, LADDER, POLE

EXIT_COLUMN = 20
FALLBACK_ITEMS = ((5, 9), (10, 9), (15, 9), (12, 5), (18, 5), (22, 5))
FALLBACK_ENEMIES = ((22, 14), (16, 9))


def build_fallback_grid(profile: Optional[DifficultyProfile] = None) -> Grid:
    profile = profile or difficulty_for("")
    g = Grid.empty(GRID_WIDTH, GRID_HEIGHT, hole_scale=profile.hole_time,
                   difficulty=profile.name.lower())
    h = g.height

    g.fill_row(h - 1, BRICK, range(g.width))
    g.fill_row(10, BRICK, range(3, 18))
    g.fill_row(6, BRICK, range(10, 25))

    for y in range(10, h - 1):
        g.set(8, y, LADDER)
    for y in range(6, 10):
        g.set(14, y, LADDER)
    for y in range(HIDDEN_ZONE_ROWS, 6):
        g.set(EXIT_COLUMN, y, LADDER)
    g.exit_ladders = [(EXIT_COLUMN, y) for y in range(HIDDEN_ZONE_ROWS)]

    g.fill_row(10, POLE, range(18, 24))

    g.start = (3, h - 2)
    for x, y in FALLBACK_ITEMS:
        g.set(x, y, GOLD)
        g.items.append((x, y))
    g.enemy_spawns.extend(FALLBACK_ENEMIES)
    return g


def fallback_level(profile: Optional[DifficultyProfile] = None) -> LevelSnapshot:
    return build_fallback_grid(profile).snapshot()
