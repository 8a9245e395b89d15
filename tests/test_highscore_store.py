import json
import logging

from highscore_store import HIGH_SCORE_KEY, JsonHighScoreStore, MemoryHighScoreStore


def test_load_defaults_to_zero_when_missing(tmp_path):
    assert JsonHighScoreStore(tmp_path / "missing.json").load() == 0


def test_save_then_load_round_trip(tmp_path):
    store = JsonHighScoreStore(tmp_path / "best.json")
    store.save(1350)

    assert json.loads((tmp_path / "best.json").read_text()) == {HIGH_SCORE_KEY: 1350}
    assert JsonHighScoreStore(tmp_path / "best.json").load() == 1350


def test_save_creates_parent_directories(tmp_path):
    path = tmp_path / "nested" / "dir" / "best.json"
    JsonHighScoreStore(path).save(40)

    assert JsonHighScoreStore(path).load() == 40


def test_corrupt_file_loads_as_zero(tmp_path, caplog):
    path = tmp_path / "best.json"
    path.write_text("{not json")

    with caplog.at_level(logging.WARNING, logger="highscore_store"):
        assert JsonHighScoreStore(path).load() == 0
    assert "unreadable" in caplog.text


def test_deeply_nested_file_loads_as_zero(tmp_path, caplog):
    path = tmp_path / "best.json"
    path.write_text("[" * 200000 + "]" * 200000)

    with caplog.at_level(logging.WARNING, logger="highscore_store"):
        assert JsonHighScoreStore(path).load() == 0
    assert "unreadable" in caplog.text


def test_non_utf8_file_loads_as_zero(tmp_path):
    path = tmp_path / "best.json"
    path.write_bytes(b"\xff\xfe\x00high")

    assert JsonHighScoreStore(path).load() == 0


def test_wrong_shapes_load_as_zero(tmp_path):
    path = tmp_path / "best.json"
    for payload in ([1, 2], {HIGH_SCORE_KEY: "lots"}, {HIGH_SCORE_KEY: -3}, {HIGH_SCORE_KEY: True}):
        path.write_text(json.dumps(payload))
        assert JsonHighScoreStore(path).load() == 0


def test_save_failure_is_swallowed(tmp_path, caplog):
    # The target path is a directory, so the final rename fails.
    target = tmp_path / "taken"
    target.mkdir()
    (target / "keep.txt").write_text("x")

    with caplog.at_level(logging.WARNING, logger="highscore_store"):
        JsonHighScoreStore(target).save(99)

    assert "Could not save" in caplog.text
    assert [p.name for p in tmp_path.iterdir()] == ["taken"]


def test_clear_removes_file(tmp_path):
    path = tmp_path / "best.json"
    store = JsonHighScoreStore(path)
    store.save(10)
    store.clear()

    assert not path.exists()
    assert store.load() == 0


def test_memory_store_counts_saves():
    store = MemoryHighScoreStore(5)
    assert store.load() == 5
    store.save(12)
    store.save(-4)
    assert store.load() == 0
    assert store.saves == 2
