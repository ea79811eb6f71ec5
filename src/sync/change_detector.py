"""Change detection for identifying files that differ from the sync log."""

from typing import Sequence

import structlog

from src.models.config import ChangeOptions
from src.models.file import ChangedRecord, ChangeReason, FileRecord, LogEntry, SyncLog
from src.processing.fingerprint import compute_hash

log = structlog.stdlib.get_logger()


class ChangeDetector:
    """Detects changes between the current file listing and the sync log."""

    def __init__(self, options: ChangeOptions | None = None):
        """
        Initialize change detector.

        Args:
            options: Change criteria; defaults to comparing size, mtime and hash
        """
        self._options: ChangeOptions = options or ChangeOptions()

    def detect_changes(
        self, files: Sequence[FileRecord], sync_log: SyncLog
    ) -> dict[str, ChangedRecord]:
        """
        Detect new and modified files.

        Files absent from the listing are never reported, even when the log
        still holds an entry for them.

        Args:
            files: Current file listing, already filtered and ordered
            sync_log: Sync log loaded for this run

        Returns:
            Changed files keyed by file key, in listing order

        Raises:
            FingerprintError: If a file cannot be read while hashing
        """
        log.info(
            "detecting_changes",
            file_count=len(files),
            logged_file_count=len(sync_log.files),
        )

        changed: dict[str, ChangedRecord] = {}

        for record in files:
            entry = sync_log.files.get(record.key)
            reason = self._change_reason(record, entry)

            if reason is None:
                continue

            # Every changed record carries a hash, even if comparison short-circuited
            self._ensure_hash(record)
            changed[record.key] = ChangedRecord(**record.model_dump(), reason=reason)

            log.debug("file_change_detected", key=record.key, reason=reason.value)

        log.info(
            "changes_detected",
            file_count=len(files),
            changed_count=len(changed),
            new_count=sum(1 for c in changed.values() if c.reason == ChangeReason.NEW),
        )

        return changed

    def is_file_modified(self, record: FileRecord, entry: LogEntry) -> bool:
        """
        Check whether a file differs from its log entry.

        Args:
            record: Current file record
            entry: Last synced state of the same key

        Returns:
            True if the file has changed, False otherwise
        """
        return self._change_reason(record, entry) is not None

    def _change_reason(self, record: FileRecord, entry: LogEntry | None) -> ChangeReason | None:
        """
        Compare a file against its log entry.

        Args:
            record: Current file record
            entry: Log entry for the key, or None if never synced

        Returns:
            The reason the file counts as changed, or None if unchanged
        """
        if entry is None:
            return ChangeReason.NEW

        if self._options.predicate is not None:
            self._ensure_hash(record)
            return ChangeReason.CUSTOM if self._options.predicate(record, entry) else None

        # Cheap comparisons first so hashing only happens when needed
        if self._options.compare_size and record.size != entry.size:
            return ChangeReason.SIZE

        if self._options.compare_mtime and record.mtime != entry.mtime:
            return ChangeReason.MTIME

        if self._options.compare_hash:
            self._ensure_hash(record)
            if record.hash != entry.hash:
                return ChangeReason.HASH

        return None

    def _ensure_hash(self, record: FileRecord) -> None:
        """Fill in the content hash of a record if it has not been computed yet."""
        if record.hash is None:
            record.hash = compute_hash(record.path, self._options.hash_algorithm)
