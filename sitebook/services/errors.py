# Rev 0.1.0
"""Record store error taxonomy."""
from __future__ import annotations
from typing import Optional


class RecordStoreError(Exception):
    """Base for everything the record store raises on purpose."""


class NotFound(RecordStoreError, LookupError):
    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} {record_id!r} not found")
        self.kind = kind
        self.record_id = record_id


class PermissionDenied(RecordStoreError):
    def __init__(self, role: str, action: str):
        super().__init__(f"Read-only access ({role}). Cannot {action}.")
        self.role = role
        self.action = action


class SnapshotParseError(RecordStoreError, ValueError):
    """Import payload is not a usable snapshot. Store state is untouched."""


class SnapshotStorageError(RecordStoreError):
    def __init__(self, message: str, *, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
