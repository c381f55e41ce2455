"""Sync task rows from a spreadsheet or CSV into Microsoft To Do.

Usage:
    from todo_sync import SyncEngine, TodoClient, TokenManager
    from todo_sync.config import load_settings
    from todo_sync.rows import CsvRowStore

    settings = load_settings()
    manager = TokenManager.from_settings(settings)
    with TodoClient() as client:
        report = SyncEngine(
            manager, client, CsvRowStore("tasks.csv"), time_zone=settings.timezone
        ).run()
"""

from todo_sync.auth import TokenManager
from todo_sync.graph import ListResolver, TodoClient
from todo_sync.sync import BatchReport, PayloadBuilder, SyncEngine

__all__ = [
    "TokenManager",
    "TodoClient",
    "ListResolver",
    "PayloadBuilder",
    "SyncEngine",
    "BatchReport",
]
