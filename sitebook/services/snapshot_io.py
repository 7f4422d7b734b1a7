# Rev 0.1.0
"""Snapshot export/import codec.

Export is pretty-printed JSON of the full store state. Import parses untrusted
text and checks the snapshot shape; any failure raises SnapshotParseError
before the store is touched.
"""
from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from sitebook.models.entities import COLLECTION_KEYS
from sitebook.services.errors import SnapshotParseError
from sitebook.utils.logging_setup import get_logger

ACTIVITIES_KEY = "activities"
ROLE_KEY = "userRole"
SNAPSHOT_KEYS = COLLECTION_KEYS + (ACTIVITIES_KEY, ROLE_KEY)

EXPORT_PREFIX = "construction_data_"

_log = get_logger("snapshot_io")


def dump_snapshot(snapshot: Mapping[str, Any]) -> str:
    return json.dumps(snapshot, indent=2, ensure_ascii=False)


def export_filename(today: Optional[date] = None) -> str:
    """construction_data_YYYY-MM-DD.json"""
    today = today or date.today()
    return f"{EXPORT_PREFIX}{today.isoformat()}.json"


def _check_items(key: str, items: Any, *, require_name: bool = False) -> None:
    if not isinstance(items, list):
        raise SnapshotParseError(f"'{key}' must be a list")
    seen: set[str] = set()
    for pos, item in enumerate(items):
        if not isinstance(item, dict):
            raise SnapshotParseError(f"'{key}[{pos}]' must be an object")
        rid = item.get("id")
        if not isinstance(rid, str) or not rid.strip():
            raise SnapshotParseError(f"'{key}[{pos}]' has no string id")
        if require_name and not str(item.get("name") or "").strip():
            raise SnapshotParseError(f"'{key}[{pos}]' has no name")
        if rid in seen:
            raise SnapshotParseError(f"'{key}' has duplicate id {rid!r}")
        seen.add(rid)


def parse_snapshot(blob: str | bytes, *, roles: Iterable[str] = ()) -> Dict[str, Any]:
    """Parse and shape-check an import payload.

    Returns only the known top-level keys that were present. Unknown keys are
    dropped. ``roles`` (when given) restricts accepted ``userRole`` values.
    """
    if isinstance(blob, bytes):
        try:
            blob = blob.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SnapshotParseError(f"Invalid JSON file: {e}") from e
    try:
        data = json.loads(blob)
    except ValueError as e:
        raise SnapshotParseError(f"Invalid JSON file: {e}") from e
    if not isinstance(data, dict):
        raise SnapshotParseError("Invalid JSON file: top level must be an object")

    out: Dict[str, Any] = {}
    for key in COLLECTION_KEYS:
        if key in data:
            _check_items(key, data[key], require_name=True)
            out[key] = data[key]
    if ACTIVITIES_KEY in data:
        _check_items(ACTIVITIES_KEY, data[ACTIVITIES_KEY])
        out[ACTIVITIES_KEY] = data[ACTIVITIES_KEY]

    if ROLE_KEY in data:
        role = data[ROLE_KEY]
        allowed = set(roles)
        if not isinstance(role, str) or (allowed and role not in allowed):
            raise SnapshotParseError(f"unknown userRole {role!r}")
        out[ROLE_KEY] = role

    ignored = sorted(set(data) - set(SNAPSHOT_KEYS))
    if ignored:
        _log.debug("Ignoring unknown snapshot keys: %s", ", ".join(ignored))
    return out


def write_export(target: Path | str, snapshot: Mapping[str, Any], *, today: Optional[date] = None) -> Path:
    """Write to ``target``; a directory gets the dated export filename."""
    target = Path(target)
    if target.is_dir():
        target = target / export_filename(today)
    target.write_text(dump_snapshot(snapshot), encoding="utf-8")
    return target


def read_import(path: Path | str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise SnapshotParseError(f"Invalid JSON file: {e}") from e
