"""Sync log persistence for maintaining synchronization state between runs."""

import json
import os
from pathlib import Path
from typing import Mapping

import structlog
from pydantic import ValidationError

from src.exceptions import LogParseError
from src.models.file import LogEntry, SyncLog

log = structlog.stdlib.get_logger()

DEFAULT_LOG_FILE: str = "sync.json"


def resolve_log_path(log_file: str | None, cwd: str | None = None) -> Path:
    """
    Resolve the sync log location.

    Args:
        log_file: Configured log file; defaults to sync.json
        cwd: Directory relative paths are resolved against; defaults to os.getcwd()

    Returns:
        Absolute path of the sync log
    """
    path = Path(log_file or DEFAULT_LOG_FILE)
    if path.is_absolute():
        return path
    return Path(cwd or os.getcwd()).resolve() / path


def merge_sync_results(sync_log: SyncLog, synced: Mapping[str, LogEntry], now: int) -> bool:
    """
    Merge the outcome of a store call into the sync log.

    Only keys the store committed are written; every other key keeps its
    previous entry so that it is detected again on the next run.

    Args:
        sync_log: Sync log to update in place
        synced: Log entries returned by the store, keyed by file key
        now: Epoch seconds recorded as the last sync time

    Returns:
        True if any entry was merged, False otherwise
    """
    if not synced:
        log.info("no_sync_results_to_merge")
        return False

    sync_log.files = {**sync_log.files, **synced}
    sync_log.last_sync = now

    log.info("sync_results_merged", merged_count=len(synced), last_sync=now)
    return True


class SyncLogStore:
    """Loads and saves the sync log as a JSON document."""

    def __init__(self, path: str | Path):
        """
        Initialize sync log store.

        Args:
            path: Location of the sync log file
        """
        self._path: Path = Path(path)

    @property
    def path(self) -> Path:
        """Location of the sync log file."""
        return self._path

    def load(self) -> SyncLog:
        """
        Load the sync log.

        Returns:
            The persisted sync log, or an empty one if the file does not exist

        Raises:
            LogParseError: If the file exists but is not a valid sync log
            OSError: If the file exists but cannot be read
        """
        log.info("loading_sync_log", path=str(self._path))

        try:
            content = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            log.info("no_sync_log_found", path=str(self._path))
            return SyncLog()
        except UnicodeDecodeError as e:
            log.error("failed_to_decode_sync_log", path=str(self._path), error=str(e))
            raise LogParseError(str(self._path), str(e)) from e

        try:
            sync_log = SyncLog.model_validate_json(content)
        except ValidationError as e:
            log.error("failed_to_parse_sync_log", path=str(self._path), error=str(e))
            raise LogParseError(str(self._path), str(e)) from e

        log.info(
            "sync_log_loaded",
            path=str(self._path),
            file_count=len(sync_log.files),
            last_sync=sync_log.last_sync,
        )
        return sync_log

    def save(self, sync_log: SyncLog) -> None:
        """
        Write the full sync log, replacing the previous file.

        Parent directories are created as needed.

        Args:
            sync_log: Sync log to persist

        Raises:
            OSError: If the log cannot be written
        """
        log.info(
            "saving_sync_log",
            path=str(self._path),
            file_count=len(sync_log.files),
            last_sync=sync_log.last_sync,
        )

        document = sync_log.model_dump(by_alias=True, exclude_none=True)

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
        except OSError as e:
            log.error("failed_to_save_sync_log", path=str(self._path), error=str(e))
            raise

        log.info("sync_log_saved", path=str(self._path))
