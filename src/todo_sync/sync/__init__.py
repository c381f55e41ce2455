"""Row to Microsoft To Do synchronization."""

from __future__ import annotations

from todo_sync.sync.engine import SyncEngine
from todo_sync.sync.outcomes import BatchReport, Failed, Skipped, Succeeded, SyncOutcome
from todo_sync.sync.payload import PayloadBuilder, build_payload

__all__ = [
    "SyncEngine",
    "PayloadBuilder",
    "build_payload",
    "BatchReport",
    "SyncOutcome",
    "Succeeded",
    "Skipped",
    "Failed",
]
