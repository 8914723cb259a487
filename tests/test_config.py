import json
from lodegen.config import DIFFICULTIES, difficulty_for, difficulty_key, load_difficulties

def test_profile_table():
    assert [DIFFICULTIES[k].max_assisted_items for k in ("easy", "normal", "hard", "ninja")] == [0, 0, 1, 2]
    assert [DIFFICULTIES[k].complexity for k in ("easy", "normal", "hard", "ninja")] == [0.25, 0.5, 0.75, 1.0]
    assert DIFFICULTIES["normal"].items == (8, 12)

def test_lookup_is_case_insensitive():
    assert difficulty_for("NINJA") is DIFFICULTIES["ninja"]
    assert difficulty_key("Hard") == "hard"

def test_unknown_difficulty_is_normal():
    assert difficulty_for("bogus") is DIFFICULTIES["normal"]
    assert difficulty_for("") is DIFFICULTIES["normal"]
    assert difficulty_key("bogus") == "normal"

def test_load_missing_file(tmp_path, caplog):
    table = load_difficulties(str(tmp_path / "nope.json"))
    assert table == DIFFICULTIES
    assert "not found" in caplog.text

def test_load_overrides(tmp_path):
    path = tmp_path / "difficulties.json"
    path.write_text(json.dumps({"difficulties": {
        "easy": {"lives": 3, "items": [2, 4], "unknown_field": 1},
        "Insane": {"complexity": 1.0, "max_assisted_items": 3},
    }}))
    table = load_difficulties(str(path))
    assert table["easy"].lives == 3
    assert table["easy"].items == (2, 4)
    assert table["easy"].name == "EASY"
    assert table["insane"].name == "INSANE"
    assert table["insane"].lives == DIFFICULTIES["normal"].lives
    assert table["insane"].max_assisted_items == 3
    assert DIFFICULTIES["easy"].lives == 5
    assert difficulty_for("insane", table) is table["insane"]

def test_load_bad_file(tmp_path, caplog):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    assert load_difficulties(str(path)) == DIFFICULTIES
    assert "Error loading" in caplog.text
