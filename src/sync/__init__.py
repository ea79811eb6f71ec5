"""Synchronization components for managing incremental file syncs."""

from src.sync.change_detector import ChangeDetector
from src.sync.confirm import ConsoleConfirmGate, is_affirmative
from src.sync.models import SyncEvent, SyncHooks, SyncResult
from src.sync.reporter import ChangeReporter
from src.sync.sync_coordinator import SyncCoordinator, sync, sync_async
from src.sync.sync_log import SyncLogStore, merge_sync_results, resolve_log_path

__all__ = [
    "ChangeDetector",
    "ChangeReporter",
    "ConsoleConfirmGate",
    "SyncCoordinator",
    "SyncEvent",
    "SyncHooks",
    "SyncLogStore",
    "SyncResult",
    "is_affirmative",
    "merge_sync_results",
    "resolve_log_path",
    "sync",
    "sync_async",
]
