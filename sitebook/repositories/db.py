# Rev 0.1.0

"""SQLite connection wrapper (Rev 0.1.0)
- WAL mode
- Ensures the single key/value table app_state(key TEXT PRIMARY KEY, payload_json, saved_at_utc)
"""
from __future__ import annotations
import sqlite3
from pathlib import Path

from sitebook.utils.logging_setup import get_logger
from sitebook.utils.paths import DB_PATH


APP_STATE_TABLE = "app_state"


class Database:
    def __init__(self, path: Path | str = DB_PATH) -> None:
        self._log = get_logger("Database")
        self.path = Path(path)
        if str(self.path) != ":memory:":
            self.path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(str(self.path), check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        if str(self.path) != ":memory:":
            self.conn.execute("PRAGMA journal_mode=WAL;")
        self.ensure_schema()
        self._log.info("SQLite open %s", self.path)

    def ensure_schema(self) -> None:
        self.conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {APP_STATE_TABLE} (
                key TEXT PRIMARY KEY,
                payload_json TEXT NOT NULL,
                saved_at_utc TEXT NOT NULL
            )
            """
        )
        self.conn.commit()

    def close(self) -> None:
        self.conn.close()

    # Thin delegation helpers
    def execute(self, *a, **k):
        return self.conn.execute(*a, **k)

    def commit(self):
        return self.conn.commit()
