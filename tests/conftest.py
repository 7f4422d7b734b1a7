# Rev 0.1.0

"""Pytest fixtures for sitebook (Rev 0.1.0)"""
from __future__ import annotations
import copy
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from sitebook.repositories.db import Database
from sitebook.repositories.sqlite_snapshot_repository import SQLiteSnapshotRepository
from sitebook.services.errors import SnapshotStorageError
from sitebook.services.record_store import RecordStore


# --- A tiny in-memory persistence double ------------------------------------

class MemoryPersistence:
    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self.initial = initial
        self.saved: List[Dict[str, Any]] = []
        self.fail = False

    def load(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self.initial)

    def save(self, snapshot: Dict[str, Any]) -> None:
        if self.fail:
            raise SnapshotStorageError("disk full")
        self.saved.append(copy.deepcopy(snapshot))

    @property
    def last(self) -> Dict[str, Any]:
        return self.saved[-1]


class FakeClock:
    """Frozen unless tick() is called."""

    def __init__(self, start: datetime = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def tick(self, seconds: float = 1.0) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


# --- Fixtures --------------------------------------------------------------

@pytest.fixture()
def db(tmp_path: Path):
    db = Database(path=str(tmp_path / "test.db"))
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def snapshot_repo(db) -> SQLiteSnapshotRepository:
    return SQLiteSnapshotRepository(db)


@pytest.fixture()
def persistence() -> MemoryPersistence:
    return MemoryPersistence()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(persistence, clock) -> RecordStore:
    return RecordStore(persistence, clock=clock)


@pytest.fixture(scope="session")
def qcore_app():
    from PySide6.QtCore import QCoreApplication
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
