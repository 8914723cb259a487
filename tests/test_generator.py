import pytest
from lodegen.config import DIFFICULTIES, HIDDEN_ZONE_ROWS, MAX_ENEMIES, GenerationConfig, difficulty_for
from lodegen.grid import Grid
from lodegen.mapgen.fallback import fallback_level
from lodegen.mapgen import generator
from lodegen.mapgen.generator import LevelGenerator, generate_candidate, generate_level
from lodegen.rng import SeededRandom
from lodegen.solver.checker import SolvabilityResult, check_solvability
from lodegen.tiles import BRICK, EXIT_LADDER, GOLD

SEEDS = ("ABC123", "QX7P2M", 20240601)

def test_deterministic():
    a = generate_level("ABC123", "normal", 1)
    b = generate_level("ABC123", "normal", 1)
    assert a == b
    assert a.items == b.items and a.enemy_spawns == b.enemy_spawns

def test_abc123_normal_level_one():
    gen = LevelGenerator("ABC123", "normal", 1)
    snap = gen.generate()
    lo, hi = DIFFICULTIES["normal"].items
    assert gen.report.attempts <= GenerationConfig().max_attempts
    assert not gen.report.used_fallback
    assert lo <= len(snap.items) <= hi

@pytest.mark.parametrize("difficulty", sorted(DIFFICULTIES))
@pytest.mark.parametrize("seed", SEEDS)
def test_solvable_or_fallback(seed, difficulty):
    profile = DIFFICULTIES[difficulty]
    snap = generate_level(seed, difficulty, 2)
    res = check_solvability(snap, max_assisted=profile.max_assisted_items)
    assert res.solvable or snap == fallback_level(profile)

@pytest.mark.parametrize("seed", SEEDS)
def test_easy_never_assisted(seed):
    gen = LevelGenerator(seed, "easy", 1)
    gen.generate()
    assert gen.report.result.assisted == 0

@pytest.mark.parametrize("seed", SEEDS)
def test_ninja_assisted_ceiling(seed):
    gen = LevelGenerator(seed, "ninja", 4)
    snap = gen.generate()
    assert gen.report.result.assisted <= 2
    assert check_solvability(snap, max_assisted=2).solvable

def test_exit_is_metadata_only():
    snap = generate_level("ABC123", "hard", 3)
    assert EXIT_LADDER not in snap.tiles
    assert [y for _, y in snap.exit_ladders] == list(range(HIDDEN_ZONE_ROWS))
    assert len({x for x, _ in snap.exit_ladders}) == 1

def test_snapshot_contents():
    snap = generate_level("QX7P2M", "normal", 5)
    assert all(snap.get(x, y) == GOLD for x, y in snap.items)
    assert snap.in_bounds(*snap.start)
    assert snap.start not in snap.items
    assert snap.difficulty == "normal"

def test_unknown_difficulty_is_normal():
    assert generate_level("ABC123", "bogus") == generate_level("ABC123", "normal")

def test_levels_use_separate_streams():
    a = LevelGenerator("ABC123", "normal", 1)
    b = LevelGenerator("ABC123", "normal", 2)
    assert a.rng.state != b.rng.state

def test_zero_budget_uses_fallback():
    gen = LevelGenerator("ABC123", "hard", 1, config=GenerationConfig(max_attempts=0))
    snap = gen.generate()
    assert gen.report.used_fallback
    assert snap == fallback_level(DIFFICULTIES["hard"])
    assert gen.report.result.solvable

@pytest.mark.parametrize("difficulty", sorted(DIFFICULTIES))
def test_candidates_hold_shape(difficulty):
    profile = difficulty_for(difficulty)
    for i in range(15):
        g = generate_candidate(SeededRandom(i), profile, level=10)
        assert all(g.get(x, g.height - 1) == BRICK for x in range(g.width))
        assert len(g.exit_ladders) == HIDDEN_ZONE_ROWS
        assert 0 < len(g.items) <= profile.items[1]
        assert len(g.enemy_spawns) <= MAX_ENEMIES
        assert g.start not in g.enemy_spawns
        assert all(g.get(x, y) != EXIT_LADDER for x, y in g.exit_ladders)

@pytest.mark.parametrize("difficulty", sorted(DIFFICULTIES))
def test_hidden_zone_stays_empty(difficulty):
    for i in range(12):
        snap = generate_level(f"ZONE{i}", difficulty, 1 + i % 4)
        exits = set(snap.exit_ladders)
        for x, y in list(snap.items) + list(snap.enemy_spawns):
            assert y >= HIDDEN_ZONE_ROWS
            assert (x, y) not in exits

def scripted(monkeypatch, results):
    """Attempt i yields a grid whose start is (i, 0) and scores as results[i]."""
    attempt = iter(range(len(results)))
    real_check = generator.check_solvability

    def fake_candidate(rng, profile, level=1, width=0, height=0):
        g = Grid.from_text(["..$..X", "######"], difficulty=profile.name.lower())
        g.start = (next(attempt), 0)
        return g

    def fake_check(g, max_assisted=None):
        if g.start[1] != 0:
            return real_check(g, max_assisted=max_assisted)
        return results[g.start[0]]

    monkeypatch.setattr(generator, "generate_candidate", fake_candidate)
    monkeypatch.setattr(generator, "check_solvability", fake_check)

def partial(score, assisted=0):
    return SolvabilityResult(False, score, "scripted", assisted=assisted, exit_reachable=True)

def test_best_candidate_earliest_on_tie(monkeypatch):
    scripted(monkeypatch, [partial(0.3), partial(0.7), partial(0.7), partial(0.5)])
    gen = LevelGenerator("ABC123", "normal", 1, config=GenerationConfig(max_attempts=4, accept_threshold=0.0))
    snap = gen.generate()
    assert snap.start == (1, 0)
    assert gen.report.attempts == 4
    assert gen.report.best_attempt == 1
    assert gen.report.best_score == 0.7
    assert not gen.report.used_fallback

def test_first_solvable_wins(monkeypatch):
    solved = SolvabilityResult(True, 1.0, "scripted", direct=1, exit_reachable=True)
    scripted(monkeypatch, [partial(0.9), solved, solved])
    gen = LevelGenerator("ABC123", "normal", 1, config=GenerationConfig(max_attempts=3, accept_threshold=0.0))
    assert gen.generate().start == (1, 0)
    assert gen.report.attempts == 2

def test_best_over_assisted_ceiling_falls_back(monkeypatch):
    scripted(monkeypatch, [partial(0.4), partial(0.9, assisted=1), partial(0.9)])
    gen = LevelGenerator("ABC123", "normal", 1, config=GenerationConfig(max_attempts=3, accept_threshold=0.0))
    snap = gen.generate()
    assert gen.report.best_attempt == 1
    assert gen.report.used_fallback
    assert snap == fallback_level(DIFFICULTIES["normal"])

def test_best_below_threshold_falls_back(monkeypatch):
    scripted(monkeypatch, [partial(0.6), partial(0.8)])
    gen = LevelGenerator("ABC123", "hard", 1, config=GenerationConfig(max_attempts=2, accept_threshold=0.95))
    snap = gen.generate()
    assert gen.report.best_score == 0.8
    assert gen.report.used_fallback
    assert snap == fallback_level(DIFFICULTIES["hard"])
