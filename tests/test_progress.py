"""Tests for ProgressStore"""
import json
import sys
sys.path.insert(0, '..')

from rogue_engine.progress import MAX_LEVEL_KEY, ProgressStore


def test_missing_file_means_level_one(tmp_path):
    assert ProgressStore(tmp_path / "none.json").max_level() == 1


def test_record_only_raises_the_best(tmp_path):
    path = tmp_path / "save" / "progress.json"
    store = ProgressStore(path)
    assert store.record(4)
    assert not store.record(3)
    assert store.max_level() == 4
    assert json.loads(path.read_text()) == {MAX_LEVEL_KEY: 4}


def test_corrupt_file_is_ignored(tmp_path):
    path = tmp_path / "progress.json"
    path.write_text("{not json")
    store = ProgressStore(path)
    assert store.max_level() == 1
    assert store.record(2)
    assert store.max_level() == 2


def test_reset(tmp_path):
    store = ProgressStore(tmp_path / "progress.json")
    store.record(6)
    store.reset()
    assert store.max_level() == 1
