# Rev 0.1.0

"""Record store (Rev 0.1.0)
Kind-parameterized CRUD over projects/architects/supervisors/contractors,
an append-only activity log and the role flag.

Every mutation writes the full snapshot through the persistence adapter
before returning. Inside ``deferred_persist()`` writes are collapsed into a
single save at the end (used for sample seeding).
"""
from __future__ import annotations

import copy
from contextlib import contextmanager
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Protocol
from uuid import uuid4

from sitebook.models.entities import COLLECTION_KEYS, KIND_SCHEMAS, coerce_fields, normalize_record, schema_for
from sitebook.services.errors import NotFound, PermissionDenied, SnapshotStorageError
from sitebook.services.sample_data import SAMPLE_RECORDS, SEED_ACTIVITY
from sitebook.services.snapshot_io import (
    ACTIVITIES_KEY,
    ROLE_KEY,
    dump_snapshot,
    parse_snapshot,
    read_import,
    write_export,
)
from sitebook.utils.logging_setup import get_logger

UNKNOWN_NAME = "Unknown"
ACTOR_USER = "User"
ACTOR_SYSTEM = "System"


class SnapshotPersistence(Protocol):
    def load(self) -> Optional[Dict[str, Any]]: ...
    def save(self, snapshot: Dict[str, Any]) -> None: ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_ts(s: Any) -> Optional[datetime]:
    if not s:
        return None
    try:
        dt = datetime.fromisoformat(str(s).replace("Z", "+00:00"))
    except ValueError:
        return None
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def _default_id(kind: str) -> str:
    return f"{kind}_{uuid4().hex[:12]}"


class RecordStore:
    def __init__(
        self,
        persistence: SnapshotPersistence,
        *,
        roles: Iterable[str] = ("admin", "readonly"),
        readonly_roles: Iterable[str] = ("readonly",),
        default_role: str = "admin",
        recent_limit: int = 5,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[str], str]] = None,
        on_persist_error: Optional[Callable[[SnapshotStorageError], None]] = None,
    ) -> None:
        self._log = get_logger("RecordStore")
        self._persistence = persistence
        self._roles = tuple(roles)
        self._readonly_roles = frozenset(readonly_roles)
        if default_role not in self._roles:
            raise ValueError(f"default role {default_role!r} is not one of {self._roles}")
        self._default_role = default_role
        self._recent_limit = recent_limit
        self._clock = clock or _utc_now
        self._id_factory = id_factory or _default_id
        self.on_persist_error = on_persist_error

        self._state: Dict[str, Any] = self._defaults()
        self._retired_ids: set[str] = set()
        self._defer_depth = 0
        self._dirty = False
        self.last_persist_error: Optional[SnapshotStorageError] = None

    @classmethod
    def from_settings(cls, persistence: SnapshotPersistence, settings: Mapping[str, Any], **kw) -> "RecordStore":
        store_cfg = settings.get("store", {})
        ui_cfg = settings.get("ui", {})
        return cls(
            persistence,
            roles=store_cfg.get("roles", ("admin", "readonly")),
            readonly_roles=store_cfg.get("readonly_roles", ("readonly",)),
            default_role=store_cfg.get("default_role", "admin"),
            recent_limit=int(ui_cfg.get("recent_activity_limit", 5)),
            **kw,
        )

    # ---------- lifecycle ----------

    def _defaults(self) -> Dict[str, Any]:
        state: Dict[str, Any] = {key: [] for key in COLLECTION_KEYS}
        state[ACTIVITIES_KEY] = []
        state[ROLE_KEY] = self._default_role
        return state

    def load(self) -> bool:
        """Shallow-merge the persisted snapshot over defaults. Returns True if one was found."""
        snap = self._persistence.load()
        if not snap:
            self._log.info("Starting from defaults (no saved snapshot)")
            return False
        self._state = self._merged(self._state, snap)
        self._log.info(
            "Loaded snapshot: %s",
            ", ".join(f"{key}={len(self._state[key])}" for key in COLLECTION_KEYS + (ACTIVITIES_KEY,)),
        )
        return True

    def seed_sample_data(self) -> bool:
        """Fill every empty collection with sample records; persists once."""
        empty = [key for key in COLLECTION_KEYS if not self._state[key]]
        if not empty:
            return False
        now = self._now_iso()
        with self.deferred_persist():
            for key in empty:
                kind = self._kind_for_collection(key)
                for sample in SAMPLE_RECORDS.get(key, []):
                    rec = normalize_record(kind, sample)
                    rec.setdefault("createdAt", now)
                    self._state[key].append(rec)
            self.record_activity(ACTOR_SYSTEM, SEED_ACTIVITY)
        self._log.info("Seeded sample data into: %s", ", ".join(empty))
        return True

    @contextmanager
    def deferred_persist(self) -> Iterator[None]:
        self._defer_depth += 1
        try:
            yield
        finally:
            self._defer_depth -= 1
            if self._defer_depth == 0 and self._dirty:
                self._dirty = False
                self._persist()

    # ---------- roles ----------

    @property
    def role(self) -> str:
        return self._state[ROLE_KEY]

    @property
    def roles(self) -> tuple[str, ...]:
        return self._roles

    @property
    def can_edit(self) -> bool:
        return self.role not in self._readonly_roles

    def set_role(self, role: str) -> None:
        if role not in self._roles:
            raise ValueError(f"unknown role {role!r}; expected one of {self._roles}")
        if role == self.role:
            return
        self._state[ROLE_KEY] = role
        self._log.info("Role set to %s", role)
        self.record_activity(ACTOR_USER, f"Role changed to {role}")

    def _require_edit(self, action: str) -> None:
        if not self.can_edit:
            self._log.info("Blocked %s for read-only role %s", action, self.role)
            raise PermissionDenied(self.role, action)

    # ---------- queries ----------

    def list(self, kind: str) -> List[Dict[str, Any]]:
        return [dict(r) for r in self._collection(kind)]

    def find(self, kind: str, record_id: str) -> Optional[Dict[str, Any]]:
        idx = self._index_of(kind, record_id)
        return None if idx is None else dict(self._collection(kind)[idx])

    def get(self, kind: str, record_id: str) -> Dict[str, Any]:
        rec = self.find(kind, record_id)
        if rec is None:
            raise NotFound(kind, record_id)
        return rec

    def display_name(self, kind: str, record_id: str) -> str:
        rec = self.find(kind, record_id)
        return (rec or {}).get("name") or UNKNOWN_NAME

    def count(self, kind: str) -> int:
        return len(self._collection(kind))

    def recent_activities(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Newest first."""
        limit = self._recent_limit if limit is None else limit
        if limit <= 0:
            return []
        return [dict(a) for a in reversed(self._state[ACTIVITIES_KEY][-limit:])]

    def activities(self) -> List[Dict[str, Any]]:
        return [dict(a) for a in self._state[ACTIVITIES_KEY]]

    # ---------- commands ----------

    def create(self, kind: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        schema = schema_for(kind)
        self._require_edit(f"create {schema.collection}")
        rec = self._coerced_with_name(kind, fields)
        rec = {"id": self._fresh_id(kind), **rec, "createdAt": self._now_iso()}
        self._collection(kind).append(rec)
        self._log.info("Created %s %s (%s)", kind, rec["id"], rec["name"])
        self.record_activity(ACTOR_USER, f"{schema.create_verb} {kind}: {rec['name']}")
        return dict(rec)

    def update(self, kind: str, record_id: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        schema = schema_for(kind)
        self._require_edit(f"modify {schema.collection}")
        idx = self._index_of(kind, record_id)
        if idx is None:
            raise NotFound(kind, record_id)
        items = self._collection(kind)
        old = items[idx]
        rec = self._coerced_with_name(kind, fields)
        rec = {"id": old["id"], **rec}
        if old.get("createdAt"):
            rec["createdAt"] = old["createdAt"]
        rec["lastUpdated"] = self._stamp_after(old)
        items[idx] = rec
        self._log.info("Updated %s %s (%s)", kind, record_id, rec["name"])
        self.record_activity(ACTOR_USER, f"Updated {kind}: {rec['name']}")
        return dict(rec)

    def delete(self, kind: str, record_id: str, *, missing_ok: bool = False) -> None:
        schema = schema_for(kind)
        self._require_edit(f"delete {schema.collection}")
        idx = self._index_of(kind, record_id)
        if idx is None:
            if missing_ok:
                return
            raise NotFound(kind, record_id)
        items = self._collection(kind)
        name = items[idx].get("name") or UNKNOWN_NAME
        self._state[schema.collection] = [r for r in items if r.get("id") != record_id]
        self._retired_ids.add(record_id)
        self._log.info("Deleted %s %s (%s)", kind, record_id, name)
        self.record_activity(ACTOR_USER, f"Deleted {kind}: {name}")

    def record_activity(self, actor: str, action: str) -> Dict[str, Any]:
        entry = {
            "id": f"activity_{uuid4().hex[:12]}",
            "user": actor,
            "action": action,
            "timestamp": self._now_iso(),
        }
        self._state[ACTIVITIES_KEY].append(entry)
        self._persist()
        return dict(entry)

    # ---------- snapshot ----------

    def snapshot(self) -> Dict[str, Any]:
        return copy.deepcopy(self._state)

    def export_snapshot(self) -> str:
        return dump_snapshot(self._state)

    def import_snapshot(self, blob: str | bytes) -> Dict[str, Any]:
        """Parse, shallow-merge over current state, persist, then log "Data imported".

        Raises SnapshotParseError (state untouched) or PermissionDenied.
        """
        self._require_edit("import data")
        parsed = parse_snapshot(blob, roles=self._roles)
        self._state = self._merged(self._state, parsed)
        self._persist()
        self._log.info("Imported snapshot keys: %s", ", ".join(sorted(parsed)) or "(none)")
        self.record_activity(ACTOR_USER, "Data imported")
        return self.snapshot()

    def export_to_file(self, target: Path | str, *, today: Optional[date] = None) -> Path:
        target = write_export(target, self._state, today=today)
        self._log.info("Exported snapshot to %s", target)
        self.record_activity(ACTOR_USER, "Exported data")
        return target

    def import_from_file(self, path: Path | str) -> Dict[str, Any]:
        return self.import_snapshot(read_import(path))

    # ---------- internals ----------

    def _collection(self, kind: str) -> List[Dict[str, Any]]:
        return self._state[schema_for(kind).collection]

    @staticmethod
    def _kind_for_collection(key: str) -> str:
        for kind, schema in KIND_SCHEMAS.items():
            if schema.collection == key:
                return kind
        raise ValueError(f"unknown collection: {key!r}")

    def _index_of(self, kind: str, record_id: str) -> Optional[int]:
        for i, rec in enumerate(self._collection(kind)):
            if rec.get("id") == record_id:
                return i
        return None

    def _coerced_with_name(self, kind: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        rec = coerce_fields(kind, fields)
        if not rec["name"]:
            raise ValueError("name required")
        return rec

    def _fresh_id(self, kind: str) -> str:
        taken = {r.get("id") for r in self._collection(kind)} | self._retired_ids
        while True:
            candidate = self._id_factory(kind)
            if candidate not in taken:
                return candidate
            self._log.debug("Discarding colliding id %s", candidate)

    def _now_iso(self) -> str:
        return self._clock().isoformat()

    def _stamp_after(self, rec: Mapping[str, Any]) -> str:
        now = self._clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        floors = [ts for ts in (_parse_ts(rec.get("createdAt")), _parse_ts(rec.get("lastUpdated"))) if ts]
        if floors and now <= max(floors):
            now = max(floors) + timedelta(microseconds=1)
        return now.isoformat()

    def _merged(self, base: Mapping[str, Any], incoming: Mapping[str, Any]) -> Dict[str, Any]:
        merged = {key: base[key] for key in base}
        for key in COLLECTION_KEYS:
            if key in incoming:
                merged[key] = self._normalized_collection(key, incoming[key])
        if ACTIVITIES_KEY in incoming:
            merged[ACTIVITIES_KEY] = self._normalized_activities(incoming[ACTIVITIES_KEY])
        if ROLE_KEY in incoming:
            role = incoming[ROLE_KEY]
            if role in self._roles:
                merged[ROLE_KEY] = role
            else:
                self._log.warning("Ignoring unknown stored role %r", role)
        return merged

    def _normalized_collection(self, key: str, items: Any) -> List[Dict[str, Any]]:
        kind = self._kind_for_collection(key)
        out: List[Dict[str, Any]] = []
        seen: set[str] = set()
        for raw in items if isinstance(items, list) else []:
            if not isinstance(raw, dict):
                continue
            rec = normalize_record(kind, raw)
            if not rec["name"]:
                rec["name"] = UNKNOWN_NAME
            if not rec.get("id"):
                rec["id"] = self._fresh_id(kind)
            if rec["id"] in seen:
                self._log.warning("Dropping duplicate %s id %s", kind, rec["id"])
                continue
            seen.add(rec["id"])
            out.append({"id": rec.pop("id"), **rec})
        return out

    @staticmethod
    def _normalized_activities(items: Any) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        for raw in items if isinstance(items, list) else []:
            if not isinstance(raw, dict):
                continue
            out.append({
                "id": str(raw.get("id") or f"activity_{uuid4().hex[:12]}"),
                "user": str(raw.get("user") or ACTOR_SYSTEM),
                "action": str(raw.get("action") or ""),
                "timestamp": str(raw.get("timestamp") or ""),
            })
        return out

    def _persist(self) -> None:
        if self._defer_depth:
            self._dirty = True
            return
        try:
            self._persistence.save(self.snapshot())
        except SnapshotStorageError as e:
            self.last_persist_error = e
            self._log.warning("Snapshot not saved; keeping in-memory state: %s", e)
            if self.on_persist_error is not None:
                self.on_persist_error(e)
            return
        self.last_persist_error = None
