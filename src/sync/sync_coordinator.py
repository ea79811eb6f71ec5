"""Synchronization coordinator for orchestrating incremental file syncs."""

import asyncio
import inspect
import os
import time
from pathlib import Path
from typing import Any, Callable, Generator, Union

import structlog

from src.exceptions import SyncError
from src.ingestion.file_lister import FileLister, OrderFiles
from src.models.config import SyncOptions
from src.models.file import ChangedRecord, FileRecord, LogEntry
from src.storage.store import StoreCallable, StoreInterface, sync_store
from src.sync.change_detector import ChangeDetector
from src.sync.confirm import CONFIRM_QUESTION, ConfirmGate, ConsoleConfirmGate
from src.sync.models import SyncEvent, SyncHooks, SyncResult
from src.sync.reporter import ChangeReporter
from src.sync.sync_log import SyncLogStore, merge_sync_results, resolve_log_path

log = structlog.stdlib.get_logger()

HookCall = tuple[str, Callable[..., Any] | None, Any]


async def _await(awaitable: Any) -> Any:
    return await awaitable


def _call_hook(name: str, hook: Callable[..., Any] | None, payload: Any) -> None:
    """Invoke a notification hook, waiting for it if it returns an awaitable.

    Awaitables get their own event loop, so this cannot be used from inside
    a running loop; async callers go through SyncCoordinator.sync_async.
    """
    if hook is None:
        return

    log.debug("calling_hook", hook=name)
    result = hook(payload)
    if inspect.isawaitable(result):
        asyncio.run(_await(result))


async def _call_hook_async(name: str, hook: Callable[..., Any] | None, payload: Any) -> None:
    """Invoke a notification hook on the caller's event loop."""
    if hook is None:
        return

    log.debug("calling_hook", hook=name)
    result = hook(payload)
    if inspect.isawaitable(result):
        await result


class SyncCoordinator:
    """Orchestrates listing, change detection, confirmation, store sync and log merge."""

    def __init__(
        self,
        store: Union[StoreInterface, StoreCallable],
        hooks: SyncHooks | None = None,
        order_files: OrderFiles | None = None,
        confirm_gate: ConfirmGate | None = None,
        reporter: ChangeReporter | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize sync coordinator.

        Args:
            store: Destination the changed files are committed to
            hooks: Optional notification callbacks
            order_files: Optional function reordering the file listing
            confirm_gate: Yes/no gate used when confirmation is enabled
                          (defaults to a console prompt)
            reporter: Console reporter (defaults to printing to stdout)
            clock: Source of the current time in epoch seconds
        """
        self._store = store
        self._hooks: SyncHooks = hooks or SyncHooks()
        self._order_files = order_files
        self._confirm_gate = confirm_gate
        self._reporter: ChangeReporter = reporter or ChangeReporter()
        self._clock = clock

        log.info("sync_coordinator_initialized")

    def sync(self, options: SyncOptions | None = None) -> SyncResult:
        """
        Perform one incremental synchronization run.

        This method:
        1. Loads the sync log
        2. Lists the files under the entry
        3. Detects changed files
        4. Optionally asks for confirmation
        5. Syncs changed files to the store and merges the outcome into the log

        Hooks returning an awaitable are run to completion on a fresh event
        loop; use sync_async when calling from inside a running loop.

        Args:
            options: Run options; defaults to SyncOptions()

        Returns:
            SyncResult with the listing, changed-set, log and confirmation state

        Raises:
            LogParseError: If the existing sync log is malformed
            FingerprintError: If a file cannot be read during detection
            SyncError: If the listing contains duplicate keys
            OSError: If the sync log cannot be written
        """
        steps = self._run(options or SyncOptions())
        try:
            while True:
                _call_hook(*next(steps))
        except StopIteration as stop:
            return stop.value

    async def sync_async(self, options: SyncOptions | None = None) -> SyncResult:
        """
        Perform one synchronization run from inside an event loop.

        Same steps and errors as sync(), but awaitable hooks are awaited on
        the running loop. Listing, hashing, the store call and the
        confirmation prompt still block.
        """
        steps = self._run(options or SyncOptions())
        try:
            while True:
                await _call_hook_async(*next(steps))
        except StopIteration as stop:
            return stop.value

    def _run(self, options: SyncOptions) -> Generator[HookCall, None, SyncResult]:
        """Run the sync steps, yielding each hook invocation to the caller."""
        cwd = options.cwd or os.getcwd()

        log_store = SyncLogStore(resolve_log_path(options.log_file, cwd))
        sync_log = log_store.load()

        log.info("sync_started", entry=options.entry, cwd=cwd, log_path=str(log_store.path))

        files = FileLister(options.glob).list_files(
            options.entry, options.ext, cwd, self._order_files
        )
        files = self._exclude_log_file(files, log_store.path)
        self._check_unique_keys(files)
        yield "on_files", self._hooks.on_files, files

        changed_files = ChangeDetector(options.change).detect_changes(files, sync_log)
        yield "on_change_files", self._hooks.on_change_files, changed_files

        result = SyncResult(files=files, changed_files=changed_files, log=sync_log, is_confirm=True)

        if not changed_files:
            self._reporter.report_no_changes()
            log.info("sync_completed", changed_count=0, synced_count=0)
            return result

        self._reporter.report_changes(changed_files)

        if options.confirm:
            gate = self._confirm_gate or ConsoleConfirmGate(
                timeout=options.confirm_timeout, writer=self._reporter.write
            )
            result.is_confirm = gate(CONFIRM_QUESTION)

        if not result.is_confirm:
            log.info("sync_declined", changed_count=len(changed_files))
            return result

        now = int(self._clock())
        synced_files = sync_store(changed_files, self._store)
        self._assign_ver_paths(changed_files, synced_files)
        result.synced_files = synced_files

        event = SyncEvent(
            files=files,
            changed_files=changed_files,
            synced_files=synced_files,
            log=sync_log,
        )

        if merge_sync_results(sync_log, synced_files, now):
            yield "on_log", self._hooks.on_log, event
            if options.save_log:
                log_store.save(sync_log)

        yield "on_sync", self._hooks.on_sync, event

        log.info(
            "sync_completed",
            changed_count=len(changed_files),
            synced_count=len(synced_files),
            failed_keys=result.failed_keys,
        )
        return result

    @staticmethod
    def _exclude_log_file(files: list[FileRecord], log_path: Path) -> list[FileRecord]:
        """Drop the sync log itself from the listing."""
        log_path = log_path.resolve()
        kept = [record for record in files if Path(record.path).resolve() != log_path]
        if len(kept) != len(files):
            log.debug("sync_log_excluded_from_listing", log_path=str(log_path))
        return kept

    @staticmethod
    def _assign_ver_paths(
        changed_files: dict[str, ChangedRecord], synced_files: dict[str, LogEntry]
    ) -> None:
        """Copy the destination identifiers chosen by the store onto the changed records."""
        for key, entry in synced_files.items():
            changed_files[key].ver_path = entry.ver_path

    @staticmethod
    def _check_unique_keys(files: list[FileRecord]) -> None:
        """Reject a listing in which the same key appears twice."""
        seen: set[str] = set()
        for record in files:
            if record.key in seen:
                log.error("duplicate_file_key", key=record.key)
                raise SyncError(f"Duplicate file key in listing: {record.key}")
            seen.add(record.key)


def sync(
    store: Union[StoreInterface, StoreCallable],
    options: SyncOptions | None = None,
    hooks: SyncHooks | None = None,
    order_files: OrderFiles | None = None,
    confirm_gate: ConfirmGate | None = None,
    reporter: ChangeReporter | None = None,
) -> SyncResult:
    """
    Run a single synchronization with a fresh coordinator.

    Args:
        store: Destination the changed files are committed to
        options: Run options; defaults to SyncOptions()
        hooks: Optional notification callbacks
        order_files: Optional function reordering the file listing
        confirm_gate: Yes/no gate used when confirmation is enabled
        reporter: Console reporter

    Returns:
        SyncResult of the run
    """
    coordinator = SyncCoordinator(
        store=store,
        hooks=hooks,
        order_files=order_files,
        confirm_gate=confirm_gate,
        reporter=reporter,
    )
    return coordinator.sync(options)


async def sync_async(
    store: Union[StoreInterface, StoreCallable],
    options: SyncOptions | None = None,
    hooks: SyncHooks | None = None,
    order_files: OrderFiles | None = None,
    confirm_gate: ConfirmGate | None = None,
    reporter: ChangeReporter | None = None,
) -> SyncResult:
    """Async counterpart of sync() for callers already running an event loop."""
    coordinator = SyncCoordinator(
        store=store,
        hooks=hooks,
        order_files=order_files,
        confirm_gate=confirm_gate,
        reporter=reporter,
    )
    return await coordinator.sync_async(options)
