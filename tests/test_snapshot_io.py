# tests/test_snapshot_io.py
from __future__ import annotations

import json
from datetime import date

import pytest

from sitebook.services.errors import SnapshotParseError
from sitebook.services.snapshot_io import (
    dump_snapshot,
    export_filename,
    parse_snapshot,
    read_import,
    write_export,
)


def test_export_filename_is_dated():
    assert export_filename(date(2024, 2, 9)) == "construction_data_2024-02-09.json"


def test_dump_is_pretty_json():
    text = dump_snapshot({"userRole": "admin", "projects": []})
    assert "\n  " in text
    assert json.loads(text) == {"userRole": "admin", "projects": []}


def test_parse_keeps_known_keys_only():
    blob = json.dumps({
        "projects": [{"id": "project_1", "name": "Mill"}],
        "activities": [{"id": "activity_1", "user": "User", "action": "x", "timestamp": ""}],
        "userRole": "readonly",
        "settings": {"theme": "dark"},
    })
    out = parse_snapshot(blob, roles=("admin", "readonly"))
    assert set(out) == {"projects", "activities", "userRole"}


def test_parse_accepts_bytes():
    assert parse_snapshot('{"architects": []}'.encode("utf-8")) == {"architects": []}


@pytest.mark.parametrize("blob", [
    "",
    "{",
    "null",
    "42",
    b"\xff\xfe\x00",
    '{"projects": "none"}',
    '{"projects": [1]}',
    '{"projects": [{"name": "no id"}]}',
    '{"projects": [{"id": "project_1"}]}',
    '{"projects": [{"id": "p", "name": "a"}, {"id": "p", "name": "b"}]}',
    '{"activities": [{"action": "no id"}]}',
    '{"userRole": 7}',
])
def test_parse_rejects_malformed(blob):
    with pytest.raises(SnapshotParseError):
        parse_snapshot(blob)


def test_parse_role_restricted_when_roles_given():
    assert parse_snapshot('{"userRole": "guest"}') == {"userRole": "guest"}
    with pytest.raises(SnapshotParseError):
        parse_snapshot('{"userRole": "guest"}', roles=("admin", "readonly"))


def test_parse_error_is_value_error():
    with pytest.raises(ValueError):
        parse_snapshot("nope")


def test_write_and_read_file(tmp_path):
    path = write_export(tmp_path, {"projects": []}, today=date(2025, 1, 2))
    assert path == tmp_path / "construction_data_2025-01-02.json"
    assert json.loads(read_import(path)) == {"projects": []}


def test_read_import_rejects_non_utf8(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_bytes(b"\xff\xfe\xfa")
    with pytest.raises(SnapshotParseError):
        read_import(bad)
