# src/lodegen/tiles.py
# Canonical tile ids and their movement classification.

from typing import Dict

EMPTY = 0
BRICK = 1
HARD = 2
LADDER = 3
POLE = 4
TRAP = 5
EXIT_LADDER = 6
GOLD = 7
HOLE = 10  # runtime only

ALL_TILES = (EMPTY, BRICK, HARD, LADDER, POLE, TRAP, EXIT_LADDER, GOLD, HOLE)

OUT_OF_BOUNDS = HARD

_SOLID = frozenset((BRICK, HARD, TRAP))
# Trap bricks block entry but are fallen through, so they are not support.
_SUPPORT = frozenset((BRICK, HARD, LADDER, EXIT_LADDER))
_CLIMBABLE = frozenset((LADDER, EXIT_LADDER))
_DIGGABLE = frozenset((BRICK, TRAP))

TILE_CHARS: Dict[int, str] = {
    EMPTY: ".",
    BRICK: "#",
    HARD: "@",
    LADDER: "H",
    POLE: "-",
    TRAP: "T",
    EXIT_LADDER: "X",
    GOLD: "$",
    HOLE: "o",
}
_CHAR_TILES: Dict[str, int] = {c: t for t, c in TILE_CHARS.items()}


def is_solid(tile: int) -> bool:
    return tile in _SOLID


def is_support(tile: int) -> bool:
    return tile in _SUPPORT


def is_climbable(tile: int) -> bool:
    return tile in _CLIMBABLE


def is_pole(tile: int) -> bool:
    return tile == POLE


def is_diggable_tile(tile: int) -> bool:
    return tile in _DIGGABLE


def tile_char(tile: int) -> str:
    return TILE_CHARS.get(tile, "?")


def tile_from_char(ch: str) -> int:
    try:
        return _CHAR_TILES[ch]
    except KeyError:
        raise ValueError(f"unknown tile character {ch!r}") from None
