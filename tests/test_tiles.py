import pytest
from lodegen.tiles import (
    ALL_TILES, BRICK, EMPTY, EXIT_LADDER, GOLD, HARD, HOLE, LADDER, POLE, TRAP,
    is_climbable, is_diggable_tile, is_pole, is_solid, is_support, tile_char, tile_from_char,
)

def test_solid_tiles():
    assert {t for t in ALL_TILES if is_solid(t)} == {BRICK, HARD, TRAP}

def test_trap_is_not_support():
    assert is_solid(TRAP)
    assert not is_support(TRAP)

def test_ladders_support_and_climb():
    for t in (LADDER, EXIT_LADDER):
        assert is_climbable(t)
        assert is_support(t)
        assert not is_solid(t)

def test_open_tiles():
    for t in (EMPTY, POLE, GOLD, HOLE):
        assert not is_solid(t)
        assert not is_support(t)
    assert is_pole(POLE)
    assert not is_pole(LADDER)

def test_diggable():
    assert is_diggable_tile(BRICK)
    assert is_diggable_tile(TRAP)
    assert not is_diggable_tile(HARD)
    assert not is_diggable_tile(LADDER)

def test_char_round_trip():
    for t in ALL_TILES:
        assert tile_from_char(tile_char(t)) == t

def test_unknown_char():
    assert tile_char(99) == "?"
    with pytest.raises(ValueError):
        tile_from_char("?")
