# tests/test_config.py
from __future__ import annotations

import json

from sitebook.services.record_store import RecordStore
from sitebook.utils.config import defaults, load_settings, save_settings

from conftest import MemoryPersistence


def test_missing_file_gives_defaults(tmp_path):
    s = load_settings(tmp_path / "settings.json")
    assert s["store"]["storage_key"] == "constructionAppData"
    assert s["ui"]["recent_activity_limit"] == 5


def test_saved_sections_win_over_defaults(tmp_path):
    path = tmp_path / "settings.json"
    save_settings({"store": {"default_role": "readonly", "roles": ["admin", "readonly"]}}, path)
    s = load_settings(path)
    assert s["store"] == {"default_role": "readonly", "roles": ["admin", "readonly"]}
    assert s["main_window"] == defaults()["main_window"]


def test_unreadable_file_falls_back(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_settings(path) == defaults()
    path.write_text(json.dumps([1, 2]), encoding="utf-8")
    assert load_settings(path) == defaults()


def test_defaults_are_copies():
    d = defaults()
    d["store"]["roles"].append("guest")
    assert "guest" not in defaults()["store"]["roles"]


def test_store_from_settings():
    settings = defaults()
    settings["store"]["default_role"] = "readonly"
    settings["ui"]["recent_activity_limit"] = 2
    store = RecordStore.from_settings(MemoryPersistence(), settings)

    assert store.role == "readonly"
    assert store.can_edit is False
    for i in range(4):
        store.record_activity("System", f"tick {i}")
    assert [a["action"] for a in store.recent_activities()] == ["tick 3", "tick 2"]
