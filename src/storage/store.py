"""Store interface and implementations for committing changed files."""

import shutil
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import Any, Callable, Mapping, Union

import structlog
from pydantic import ValidationError

from src.exceptions import StoreError
from src.models.file import ChangedRecord, LogEntry
from src.utils.retry import exponential_backoff_retry

log = structlog.stdlib.get_logger()


class StoreInterface(ABC):
    """Abstract interface for sync destinations.

    This interface defines the contract that all store implementations
    must follow, enabling pluggable destinations (local copies, remote
    uploads, content-addressed backends).
    """

    @abstractmethod
    def sync(self, changed: Mapping[str, ChangedRecord]) -> dict[str, LogEntry]:
        """Commit changed files to the destination.

        A store must not raise for a single failing file: keys it could not
        commit are simply left out of the returned mapping.

        Args:
            changed: Changed files keyed by file key

        Returns:
            Log entries for the keys actually committed, including any
            destination path assigned to them

        Raises:
            StoreError: If the destination is unusable and nothing was committed
        """
        pass


StoreCallable = Callable[
    [Mapping[str, ChangedRecord]], Mapping[str, Union[LogEntry, ChangedRecord, dict[str, Any]]]
]


def sync_store(
    changed: Mapping[str, ChangedRecord],
    store: Union[StoreInterface, StoreCallable],
) -> dict[str, LogEntry]:
    """
    Invoke a store once and normalize its outcome.

    Returned keys outside the changed-set are dropped. ChangedRecord
    outcomes are converted to log entries and anything else is validated as
    a LogEntry; keys with invalid entries count as not committed. A
    StoreError raised for the whole call counts as nothing committed. No
    retries are attempted here.

    Args:
        changed: Changed files keyed by file key
        store: StoreInterface instance or plain callable with the same contract

    Returns:
        Log entries for committed keys, in changed-set order
    """
    log.info("store_sync_started", changed_count=len(changed))

    sync_fn = store.sync if isinstance(store, StoreInterface) else store

    try:
        outcome = sync_fn(changed)
    except StoreError as e:
        log.error("store_sync_failed", changed_count=len(changed), error=str(e))
        return {}

    outcome = outcome or {}

    unknown_keys = [key for key in outcome if key not in changed]
    if unknown_keys:
        log.warning("store_returned_unknown_keys", keys=unknown_keys)

    synced: dict[str, LogEntry] = {}
    for key in changed:
        if key not in outcome:
            continue
        entry = outcome[key]
        if isinstance(entry, ChangedRecord):
            entry = entry.to_log_entry()
        else:
            try:
                entry = LogEntry.model_validate(entry)
            except ValidationError as e:
                log.error("store_returned_invalid_entry", key=key, error=str(e))
                continue
        synced[key] = entry

    log.info(
        "store_sync_completed",
        changed_count=len(changed),
        synced_count=len(synced),
        failed_count=len(changed) - len(synced),
    )
    return synced


def versioned_path(key: str, content_hash: str, hash_length: int = 8) -> str:
    """
    Build a destination path that embeds a short content hash.

    Args:
        key: File key relative to the entry root
        content_hash: Hex digest of the file content
        hash_length: Number of digest characters to embed

    Returns:
        Posix path such as docs/a.1f2e3d4c.txt
    """
    key_path = PurePosixPath(key)
    short_hash = content_hash[:hash_length]
    suffix = key_path.suffix
    stem = key_path.name[: -len(suffix)] if suffix else key_path.name
    return str(key_path.with_name(f"{stem}.{short_hash}{suffix}"))


def is_transient_error(error: Exception) -> bool:
    """Check whether a copy failure may succeed when retried."""
    return not isinstance(error, (FileNotFoundError, PermissionError, IsADirectoryError))


class LocalCopyStore(StoreInterface):
    """Store that copies changed files into a destination directory.

    With versioning enabled every synced revision lands under a path that
    embeds its content hash, so previous revisions are left untouched.
    """

    def __init__(
        self,
        dest_dir: str | Path,
        versioned: bool = True,
        hash_length: int = 8,
        max_retries: int = 2,
        retry_delay: float = 0.1,
    ):
        """Initialize local copy store.

        Args:
            dest_dir: Destination root directory
            versioned: Embed the content hash in destination file names
            hash_length: Number of hash characters embedded in versioned names
            max_retries: Copy retries before a file counts as failed
            retry_delay: Initial delay between copy retries in seconds
        """
        self._dest_dir: Path = Path(dest_dir)
        self._versioned: bool = versioned
        self._hash_length: int = hash_length
        self._copy = exponential_backoff_retry(
            max_retries=max_retries,
            base_delay=retry_delay,
            exceptions=(OSError,),
            retry_if=is_transient_error,
        )(self._copy_file)

        log.info(
            "local_copy_store_initialized",
            dest_dir=str(self._dest_dir),
            versioned=versioned,
        )

    @property
    def dest_dir(self) -> Path:
        return self._dest_dir

    @property
    def versioned(self) -> bool:
        return self._versioned

    @property
    def hash_length(self) -> int:
        return self._hash_length

    def sync(self, changed: Mapping[str, ChangedRecord]) -> dict[str, LogEntry]:
        """Copy every changed file, skipping the ones that fail.

        Args:
            changed: Changed files keyed by file key

        Returns:
            Log entries for the files copied successfully
        """
        synced: dict[str, LogEntry] = {}

        for key, record in changed.items():
            ver_path = self._destination_for(key, record.hash)

            try:
                self._copy(record.path, self._dest_dir / ver_path)
            except OSError as e:
                log.error(
                    "failed_to_copy_file",
                    key=key,
                    source=record.path,
                    ver_path=ver_path,
                    error=str(e),
                )
                continue

            synced[key] = LogEntry(
                size=record.size,
                mtime=record.mtime,
                hash=record.hash,
                ver_path=ver_path,
            )
            log.debug("file_copied", key=key, ver_path=ver_path)

        log.info("local_copy_completed", copied=len(synced), failed=len(changed) - len(synced))
        return synced

    def _destination_for(self, key: str, content_hash: str) -> str:
        """Destination path of a key relative to the store root."""
        if self._versioned:
            return versioned_path(key, content_hash, self._hash_length)
        return str(PurePosixPath(key))

    @staticmethod
    def _copy_file(source: str, destination: Path) -> None:
        """Copy one file, creating destination directories as needed."""
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, destination)
