# Rev 0.1.0
# sitebook – SQLiteSnapshotRepository
from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from sitebook.repositories.db import APP_STATE_TABLE
from sitebook.services.errors import SnapshotStorageError
from sitebook.utils.logging_setup import get_logger

DEFAULT_STORAGE_KEY = "constructionAppData"


class SQLiteSnapshotRepository:
    """
    Whole-store snapshot persisted under one key of app_state.

      load() -> dict | None     (None when nothing usable is stored)
      save(snapshot) -> None    (raises SnapshotStorageError on sqlite failure)
    """

    def __init__(self, db_or_conn: Union[sqlite3.Connection, Any], *, key: str = DEFAULT_STORAGE_KEY):
        self._db_or_conn = db_or_conn
        self._key = key
        self._log = get_logger("SnapshotRepository")

    @property
    def key(self) -> str:
        return self._key

    # -------------------------
    # Connection handling
    # -------------------------
    def _conn(self) -> sqlite3.Connection:
        if isinstance(self._db_or_conn, sqlite3.Connection):
            return self._db_or_conn
        if hasattr(self._db_or_conn, "conn") and isinstance(self._db_or_conn.conn, sqlite3.Connection):
            return self._db_or_conn.conn
        raise RuntimeError(
            "SQLiteSnapshotRepository: could not obtain sqlite3.Connection "
            "(expected .conn on wrapper, or a raw Connection)."
        )

    # -------------------------
    # Queries
    # -------------------------
    def load(self) -> Optional[Dict[str, Any]]:
        row = self._conn().execute(
            f"SELECT payload_json FROM {APP_STATE_TABLE} WHERE key = ?",
            (self._key,),
        ).fetchone()
        if row is None:
            self._log.info("No saved snapshot under key %r", self._key)
            return None
        try:
            payload = json.loads(row[0])
        except ValueError as e:
            self._log.warning("Stored snapshot %r is not valid JSON (%s); ignoring it", self._key, e)
            return None
        if not isinstance(payload, dict):
            self._log.warning("Stored snapshot %r is not a JSON object; ignoring it", self._key)
            return None
        return payload

    def saved_at(self) -> Optional[str]:
        row = self._conn().execute(
            f"SELECT saved_at_utc FROM {APP_STATE_TABLE} WHERE key = ?",
            (self._key,),
        ).fetchone()
        return row[0] if row else None

    # -------------------------
    # Commands
    # -------------------------
    def save(self, snapshot: Dict[str, Any]) -> None:
        payload_json = json.dumps(snapshot, ensure_ascii=False)
        saved_at = datetime.now(timezone.utc).isoformat()
        con = self._conn()
        try:
            con.execute(
                f"""
                INSERT INTO {APP_STATE_TABLE}(key, payload_json, saved_at_utc)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    payload_json = excluded.payload_json,
                    saved_at_utc = excluded.saved_at_utc
                """,
                (self._key, payload_json, saved_at),
            )
            con.commit()
        except sqlite3.Error as e:
            raise SnapshotStorageError(f"could not save snapshot {self._key!r}: {e}", cause=e) from e
        self._log.debug("Saved snapshot %r (%d bytes)", self._key, len(payload_json.encode("utf-8")))
