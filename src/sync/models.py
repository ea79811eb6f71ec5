"""Data models for synchronization operations."""

from typing import Any, Callable

from pydantic import BaseModel, Field

from src.models.file import ChangedRecord, FileRecord, LogEntry, SyncLog


class SyncEvent(BaseModel):
    """Snapshot handed to the post-log and post-sync hooks."""

    files: list[FileRecord] = Field(default_factory=list, description="Current file listing")
    changed_files: dict[str, ChangedRecord] = Field(
        default_factory=dict, description="Files detected as changed"
    )
    synced_files: dict[str, LogEntry] = Field(
        default_factory=dict, description="Log entries returned by the store"
    )
    log: SyncLog = Field(..., description="Sync log after merging the store outcome")


class SyncHooks(BaseModel):
    """Optional notification callbacks invoked as a run progresses.

    Each hook may be a plain function or return an awaitable; awaitables are
    driven to completion before the run moves on. Hooks observe the run,
    their return values are ignored.
    """

    on_files: Callable[[list[FileRecord]], Any] | None = Field(
        default=None, description="Called with the file listing"
    )
    on_change_files: Callable[[dict[str, ChangedRecord]], Any] | None = Field(
        default=None, description="Called with the changed-set"
    )
    on_log: Callable[[SyncEvent], Any] | None = Field(
        default=None, description="Called after store results are merged into the log"
    )
    on_sync: Callable[[SyncEvent], Any] | None = Field(
        default=None, description="Called after the store has been invoked"
    )


class SyncResult(BaseModel):
    """Result of one synchronization run."""

    files: list[FileRecord] = Field(default_factory=list, description="Current file listing")
    changed_files: dict[str, ChangedRecord] = Field(
        default_factory=dict, description="Files detected as changed"
    )
    synced_files: dict[str, LogEntry] = Field(
        default_factory=dict, description="Files the store committed during this run"
    )
    log: SyncLog = Field(..., description="Sync log as it stands after the run")
    is_confirm: bool = Field(
        default=True, description="False only when an interactive confirmation was declined"
    )

    @property
    def has_changes(self) -> bool:
        """Check if any file was detected as changed."""
        return bool(self.changed_files)

    @property
    def total_changes(self) -> int:
        """Get total number of changed files."""
        return len(self.changed_files)

    @property
    def failed_keys(self) -> list[str]:
        """Changed keys the store did not commit."""
        if not self.is_confirm:
            return []
        return [key for key in self.changed_files if key not in self.synced_files]
