# sitebook application context
# Rev 0.1.0

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from sitebook.repositories.db import Database
from sitebook.repositories.sqlite_snapshot_repository import SQLiteSnapshotRepository
from sitebook.services.record_store import RecordStore
from sitebook.services.sync_simulator import SyncSimulator
from sitebook.utils.config import load_settings
from sitebook.utils.logging_setup import get_logger
from sitebook.viewmodels.records_viewmodel import RecordsViewModel


@dataclass
class AppContext:
    """Central container for shared app resources; handed to the UI explicitly."""
    db_path: Path
    settings: Dict[str, Any]
    db: Database
    snapshots: SQLiteSnapshotRepository
    store: RecordStore
    records: RecordsViewModel
    sync: SyncSimulator
    logfile: Optional[Path] = None

    @classmethod
    def create(cls, db_path: Path, *, settings: Optional[Dict[str, Any]] = None, logfile: Optional[Path] = None) -> "AppContext":
        """Open DB, load (and optionally seed) the store, build view-models."""
        log = get_logger("AppContext")
        settings = settings if settings is not None else load_settings()
        store_cfg = settings.get("store", {})

        db = Database(db_path)
        snapshots = SQLiteSnapshotRepository(db, key=store_cfg.get("storage_key", "constructionAppData"))
        store = RecordStore.from_settings(snapshots, settings)
        records = RecordsViewModel(store)
        store.on_persist_error = records.on_persist_error
        store.load()
        if store_cfg.get("seed_sample_data", True):
            store.seed_sample_data()

        sync = SyncSimulator(store, delay_ms=int(store_cfg.get("sync_delay_ms", 2000)))

        log.info("AppContext initialized with DB=%s role=%s", db_path, store.role)
        return cls(
            db_path=Path(db_path),
            settings=settings,
            db=db,
            snapshots=snapshots,
            store=store,
            records=records,
            sync=sync,
            logfile=logfile,
        )

    def close(self) -> None:
        self.sync.cancel()
        self.db.close()
