"""Data models for the file synchronization system."""

from src.models.config import (
    AppConfig,
    ChangeOptions,
    GlobOptions,
    LoggingConfig,
    StoreConfig,
    SyncOptions,
)
from src.models.file import (
    ChangedRecord,
    ChangeReason,
    FileRecord,
    LogEntry,
    SyncLog,
)

__all__ = [
    "FileRecord",
    "LogEntry",
    "SyncLog",
    "ChangedRecord",
    "ChangeReason",
    "AppConfig",
    "ChangeOptions",
    "GlobOptions",
    "LoggingConfig",
    "StoreConfig",
    "SyncOptions",
]
