# tests/test_record_store.py
from __future__ import annotations

from datetime import date, datetime

import pytest

from sitebook.services.errors import NotFound, PermissionDenied, SnapshotParseError
from sitebook.services.record_store import RecordStore
from sitebook.services.sample_data import SEED_ACTIVITY

from conftest import MemoryPersistence


def _actions(store: RecordStore) -> list[str]:
    return [a["action"] for a in store.activities()]


# --- create ------------------------------------------------------------------

def test_create_project_defaults_and_activity(store, persistence):
    rec = store.create("project", {"name": "Bridge"})

    assert rec["id"].startswith("project_")
    assert rec["status"] == "planning"
    assert rec["progress"] == 0
    assert rec["budget"] == 0
    assert rec["createdAt"]
    assert "lastUpdated" not in rec
    assert store.list("project") == [rec]
    assert _actions(store) == ["Created project: Bridge"]
    # persisted before returning
    assert persistence.last["projects"] == [rec]


@pytest.mark.parametrize("kind,verb", [
    ("architect", "Added architect"),
    ("supervisor", "Added supervisor"),
    ("contractor", "Added contractor"),
])
def test_create_people_uses_added_wording(store, kind, verb):
    store.create(kind, {"name": "Pat"})
    assert _actions(store) == [f"{verb}: Pat"]
    assert store.list(kind)[0]["status"] == "active"


def test_create_requires_name(store, persistence):
    with pytest.raises(ValueError):
        store.create("project", {"name": "   "})
    assert store.list("project") == []
    assert persistence.saved == []


def test_create_drops_unknown_keys_and_coerces_numbers(store):
    rec = store.create("project", {
        "name": "Depot",
        "budget": "-50",
        "progress": "250",
        "color": "red",
        "id": "project_forged",
    })
    assert "color" not in rec
    assert rec["id"] != "project_forged"
    assert rec["budget"] == 0
    assert rec["progress"] == 100


def test_create_unknown_kind_rejected(store):
    with pytest.raises(ValueError):
        store.create("plumber", {"name": "Mario"})


# --- update ------------------------------------------------------------------

def test_bridge_create_then_update(store):
    created = store.create("project", {"name": "Bridge"})
    store.update("project", created["id"], {"name": "Bridge", "status": "active", "progress": 40})

    projects = store.list("project")
    assert len(projects) == 1
    assert projects[0]["name"] == "Bridge"
    assert projects[0]["status"] == "active"
    assert projects[0]["progress"] == 40
    assert _actions(store) == ["Created project: Bridge", "Updated project: Bridge"]


def test_update_keeps_identity_and_stamps_after_created(store, clock):
    created = store.create("architect", {"name": "Ann", "experience": 4})
    # clock is frozen; lastUpdated must still move past createdAt
    updated = store.update("architect", created["id"], {"name": "Ann B.", "experience": 5})

    assert updated["id"] == created["id"]
    assert updated["createdAt"] == created["createdAt"]
    assert datetime.fromisoformat(updated["lastUpdated"]) > datetime.fromisoformat(created["createdAt"])

    again = store.update("architect", created["id"], {"name": "Ann C."})
    assert again["lastUpdated"] > updated["lastUpdated"]
    # full replace: omitted fields fall back to defaults
    assert again["experience"] == 0


def test_update_invalid_status_falls_back_to_default(store):
    rec = store.create("contractor", {"name": "Lee", "status": "on-project"})
    out = store.update("contractor", rec["id"], {"name": "Lee", "status": "retired"})
    assert out["status"] == "active"


def test_update_missing_raises_not_found(store, persistence):
    with pytest.raises(NotFound) as exc:
        store.update("project", "project_nope", {"name": "X"})
    assert exc.value.kind == "project"
    assert exc.value.record_id == "project_nope"
    assert store.activities() == []
    assert persistence.saved == []


# --- delete ------------------------------------------------------------------

def test_delete_removes_and_logs(store):
    keep = store.create("supervisor", {"name": "Kim"})
    gone = store.create("supervisor", {"name": "Sam"})
    store.delete("supervisor", gone["id"])

    assert [r["id"] for r in store.list("supervisor")] == [keep["id"]]
    assert _actions(store)[-1] == "Deleted supervisor: Sam"


def test_delete_missing_raises_unless_missing_ok(store):
    rec = store.create("project", {"name": "Shed"})
    store.delete("project", rec["id"])
    before = store.activities()

    with pytest.raises(NotFound):
        store.delete("project", rec["id"])
    store.delete("project", rec["id"], missing_ok=True)

    assert store.activities() == before


# --- roles -------------------------------------------------------------------

def test_readonly_blocks_every_mutation(store, persistence):
    rec = store.create("project", {"name": "Bridge"})
    store.set_role("readonly")
    before = store.snapshot()
    saves = len(persistence.saved)

    for kind in ("project", "architect", "supervisor", "contractor"):
        with pytest.raises(PermissionDenied):
            store.create(kind, {"name": "Nope"})
        with pytest.raises(PermissionDenied):
            store.delete(kind, "whatever")
    with pytest.raises(PermissionDenied):
        store.update("project", rec["id"], {"name": "Renamed"})

    assert store.snapshot() == before
    assert len(persistence.saved) == saves
    assert store.can_edit is False


def test_set_role_logs_change_once(store):
    store.set_role("readonly")
    store.set_role("readonly")
    assert _actions(store) == ["Role changed to readonly"]
    assert store.role == "readonly"

    with pytest.raises(ValueError):
        store.set_role("superuser")


def test_readonly_may_still_export_and_record_activity(store, tmp_path):
    store.set_role("readonly")
    store.record_activity("System", "GitHub sync completed (simulated)")
    path = store.export_to_file(tmp_path, today=date(2024, 5, 1))
    assert path.exists()
    assert _actions(store)[-2:] == ["GitHub sync completed (simulated)", "Exported data"]


def test_default_role_must_be_known(persistence):
    with pytest.raises(ValueError):
        RecordStore(persistence, roles=("admin",), default_role="readonly")


# --- ids ---------------------------------------------------------------------

def test_fresh_ids_skip_live_and_retired(persistence, clock):
    ids = iter(["project_a", "project_a", "project_b", "project_a", "project_b", "project_c"])
    store = RecordStore(persistence, clock=clock, id_factory=lambda kind: next(ids))

    first = store.create("project", {"name": "One"})
    second = store.create("project", {"name": "Two"})
    assert (first["id"], second["id"]) == ("project_a", "project_b")

    store.delete("project", "project_a")
    third = store.create("project", {"name": "Three"})
    assert third["id"] == "project_c"


# --- activity log ------------------------------------------------------------

def test_recent_activities_newest_first_and_limited(store, clock):
    for i in range(7):
        clock.tick()
        store.record_activity("User", f"step {i}")

    recent = store.recent_activities()
    assert [a["action"] for a in recent] == ["step 6", "step 5", "step 4", "step 3", "step 2"]
    assert store.recent_activities(limit=0) == []
    assert len(store.activities()) == 7


def test_activity_entries_have_unique_ids(store):
    for _ in range(20):
        store.record_activity("User", "ping")
    ids = [a["id"] for a in store.activities()]
    assert len(set(ids)) == len(ids)


# --- load / seed -------------------------------------------------------------

def test_seed_fills_empty_collections_with_one_save(store, persistence):
    assert store.seed_sample_data() is True

    assert store.count("project") == 2
    assert store.count("architect") == 1
    assert store.count("supervisor") == 1
    assert store.count("contractor") == 1
    assert _actions(store) == [SEED_ACTIVITY]
    assert len(persistence.saved) == 1

    assert store.seed_sample_data() is False
    assert len(persistence.saved) == 1


def test_load_merges_over_defaults(clock):
    persisted = MemoryPersistence({
        "projects": [{"id": "project_9", "name": "Mill", "status": "active", "progress": "55"}],
        "userRole": "readonly",
        "theme": "dark",
    })
    store = RecordStore(persisted, clock=clock)

    assert store.load() is True
    assert store.role == "readonly"
    assert store.list("project")[0]["progress"] == 55
    assert store.list("architect") == []
    assert "theme" not in store.snapshot()


def test_load_ignores_unknown_role_and_repairs_records(clock):
    persisted = MemoryPersistence({
        "userRole": "root",
        "architects": [
            {"id": "architect_1", "name": "A"},
            {"id": "architect_1", "name": "dup"},
            {"name": ""},
        ],
    })
    store = RecordStore(persisted, clock=clock)
    store.load()

    assert store.role == "admin"
    names = [r["name"] for r in store.list("architect")]
    assert names == ["A", "Unknown"]


def test_load_without_snapshot_keeps_defaults(store):
    assert store.load() is False
    assert store.role == "admin"
    assert store.list("project") == []


# --- persistence failures ----------------------------------------------------

def test_persist_failure_keeps_memory_state_and_reports(persistence, clock):
    seen = []
    store = RecordStore(persistence, clock=clock, on_persist_error=seen.append)
    persistence.fail = True

    rec = store.create("project", {"name": "Offline"})

    assert store.find("project", rec["id"]) is not None
    assert store.last_persist_error is not None
    assert len(seen) == 1

    persistence.fail = False
    store.record_activity("User", "back online")
    assert store.last_persist_error is None
    assert persistence.last["projects"][0]["name"] == "Offline"


# --- import / export ---------------------------------------------------------

def test_export_import_round_trip(store, clock):
    store.seed_sample_data()
    store.create("contractor", {"name": "Ola", "hourlyRate": "82.5"})
    before = store.snapshot()

    store.import_snapshot(store.export_snapshot())

    after = store.snapshot()
    for key in ("projects", "architects", "supervisors", "contractors", "userRole"):
        assert after[key] == before[key]
    assert after["activities"][:-1] == before["activities"]
    assert after["activities"][-1]["action"] == "Data imported"


def test_export_snapshot_is_pure(store, persistence):
    store.create("project", {"name": "Bridge"})
    saves = len(persistence.saved)
    store.export_snapshot()
    assert len(persistence.saved) == saves
    assert _actions(store) == ["Created project: Bridge"]


def test_import_replaces_only_present_keys(store):
    store.create("architect", {"name": "Stays"})
    store.create("project", {"name": "Goes"})

    store.import_snapshot('{"projects": [{"id": "project_x", "name": "New"}]}')

    assert [p["name"] for p in store.list("project")] == ["New"]
    assert [a["name"] for a in store.list("architect")] == ["Stays"]


def test_import_rejects_bad_payload_without_change(store, persistence):
    store.create("project", {"name": "Bridge"})
    before = store.snapshot()
    saves = len(persistence.saved)

    for blob in ("not json", "[1, 2]", '{"projects": {"id": 1}}', '{"userRole": "root"}'):
        with pytest.raises(SnapshotParseError):
            store.import_snapshot(blob)

    assert store.snapshot() == before
    assert len(persistence.saved) == saves


def test_import_denied_for_readonly(store):
    store.set_role("readonly")
    with pytest.raises(PermissionDenied):
        store.import_snapshot('{"projects": []}')


def test_export_to_file_names_by_date(store, tmp_path):
    path = store.export_to_file(tmp_path, today=date(2024, 12, 31))
    assert path.name == "construction_data_2024-12-31.json"

    explicit = store.export_to_file(tmp_path / "backup.json")
    assert explicit.name == "backup.json"
    assert explicit.read_text(encoding="utf-8").startswith("{")


def test_import_from_file(store, tmp_path):
    src = tmp_path / "in.json"
    src.write_text('{"supervisors": [{"id": "supervisor_7", "name": "Rae"}]}', encoding="utf-8")
    store.import_from_file(src)
    assert store.display_name("supervisor", "supervisor_7") == "Rae"
    assert store.display_name("supervisor", "missing") == "Unknown"


def test_import_oversized_number_becomes_zero(store):
    blob = '{"projects": [{"id": "p1", "name": "Big", "budget": 1' + "0" * 400 + '}]}'
    store.import_snapshot(blob)
    assert store.get("project", "p1")["budget"] == 0


def test_load_oversized_number_becomes_zero(clock):
    persisted = MemoryPersistence({
        "contractors": [{"id": "contractor_1", "name": "Big", "hourlyRate": 10 ** 400}],
    })
    store = RecordStore(persisted, clock=clock)
    assert store.load() is True
    assert store.get("contractor", "contractor_1")["hourlyRate"] == 0
