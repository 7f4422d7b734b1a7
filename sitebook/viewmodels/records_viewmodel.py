# Rev 0.1.0: one view-model for all four record kinds
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

from PySide6.QtCore import QObject, Signal

from sitebook.models.entities import coerce_fields, schema_for
from sitebook.models.types import ENTITY_KINDS
from sitebook.services.dashboard import compute_summary
from sitebook.services.errors import NotFound, PermissionDenied, SnapshotParseError, SnapshotStorageError
from sitebook.utils.logging_setup import get_logger
from sitebook.viewmodels.cards import build_activity, build_cards


class RecordsViewModel(QObject):
    """
    Emits:
      recordsReloaded(kind, [CardView])
      dashboardUpdated({"active_projects", "team_members", "completed_tasks", "overdue_items", ...})
      activityReloaded([ActivityView])       newest first
      roleChanged(role, can_edit)
      permissionDenied(message)              nothing was changed, nothing logged
      errorRaised(title, message)
      persistWarning(message)                in-memory state kept
    """
    recordsReloaded = Signal(str, list)
    dashboardUpdated = Signal(dict)
    activityReloaded = Signal(list)
    roleChanged = Signal(str, bool)
    permissionDenied = Signal(str)
    errorRaised = Signal(str, str)
    persistWarning = Signal(str)

    def __init__(self, store, *, now: Optional[Callable[[], datetime]] = None):
        super().__init__()
        self._log = get_logger("RecordsViewModel")
        self._store = store
        self._now = now

    @property
    def store(self):
        return self._store

    @property
    def role(self) -> str:
        return self._store.role

    @property
    def roles(self) -> tuple[str, ...]:
        return tuple(self._store.roles)

    @property
    def can_edit(self) -> bool:
        return self._store.can_edit

    # ---- queries
    def reload(self, kind: str) -> None:
        cards = build_cards(kind, self._store.list(kind), editable=self._store.can_edit)
        self.recordsReloaded.emit(kind, cards)

    def reload_dashboard(self) -> None:
        now = self._now() if self._now else None
        self.dashboardUpdated.emit(compute_summary(self._store, now=now).as_dict())
        self.activityReloaded.emit(build_activity(self._store.recent_activities()))

    def reload_all(self) -> None:
        for kind in ENTITY_KINDS:
            self.reload(kind)
        self.reload_dashboard()
        self.roleChanged.emit(self._store.role, self._store.can_edit)
        if self._store.last_persist_error is not None:
            self.on_persist_error(self._store.last_persist_error)

    def editor_values(self, kind: str, record_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Current field values for the editor; schema defaults for a new record."""
        if record_id is None:
            return coerce_fields(kind, {})
        rec = self._store.find(kind, record_id)
        if rec is None:
            self.errorRaised.emit("Not found", f"{schema_for(kind).label} no longer exists.")
            self.reload(kind)
        return rec

    def display_name(self, kind: str, record_id: str) -> str:
        return self._store.display_name(kind, record_id)

    # ---- commands
    def begin_edit(self, kind: str) -> bool:
        """Gate for opening an editor/confirm dialog."""
        if self._store.can_edit:
            return True
        self.permissionDenied.emit(f"Read-only access. Cannot modify {schema_for(kind).collection}.")
        return False

    def begin_import(self) -> bool:
        if self._store.can_edit:
            return True
        self.permissionDenied.emit("Read-only access. Cannot import data.")
        return False

    def save_record(self, kind: str, record_id: Optional[str], fields: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        if not str(fields.get("name") or "").strip():
            self.errorRaised.emit("Missing name", f"{schema_for(kind).label} name is required.")
            return None
        try:
            if record_id is None:
                rec = self._store.create(kind, fields)
            else:
                rec = self._store.update(kind, record_id, fields)
        except PermissionDenied as e:
            self.permissionDenied.emit(str(e))
            return None
        except NotFound:
            self.errorRaised.emit("Update failed", f"{schema_for(kind).label} not found.")
            self.reload(kind)
            return None
        self.reload(kind)
        self.reload_dashboard()
        return rec

    def delete_record(self, kind: str, record_id: str) -> bool:
        try:
            self._store.delete(kind, record_id)
        except PermissionDenied as e:
            self.permissionDenied.emit(str(e))
            return False
        except NotFound:
            self.errorRaised.emit("Delete failed", f"{schema_for(kind).label} not found.")
            self.reload(kind)
            return False
        self.reload(kind)
        self.reload_dashboard()
        return True

    def set_role(self, role: str) -> None:
        if role == self._store.role:
            return
        self._store.set_role(role)
        self.reload_all()

    def export_to(self, target: Path | str) -> Optional[Path]:
        try:
            target = self._store.export_to_file(target)
        except OSError as e:
            self._log.warning("Export failed: %s", e)
            self.errorRaised.emit("Export failed", str(e))
            return None
        self.reload_dashboard()
        return target

    def import_from(self, path: Path | str) -> bool:
        try:
            self._store.import_from_file(path)
        except PermissionDenied as e:
            self.permissionDenied.emit(str(e))
            return False
        except SnapshotParseError as e:
            self._log.warning("Import rejected: %s", e)
            self.errorRaised.emit("Import failed", f"Error importing data: {e}")
            return False
        except OSError as e:
            self.errorRaised.emit("Import failed", str(e))
            return False
        self.reload_all()
        return True

    # ---- store callback
    def on_persist_error(self, exc: SnapshotStorageError) -> None:
        self.persistWarning.emit(f"Changes are kept in memory but could not be saved: {exc}")
