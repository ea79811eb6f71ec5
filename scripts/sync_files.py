#!/usr/bin/env python3
"""
Incremental file synchronization script.

This script syncs the files that changed since the last run:
- Lists files under the entry directory
- Detects new and modified files against the sync log
- Copies them to the configured store and records the result

Designed to be run by hand or on a schedule (e.g., via cron).

Usage:
    python scripts/sync_files.py [--config CONFIG_PATH] [--entry DIR] [--ext md] [--confirm]
"""

import argparse
import sys
from datetime import datetime

import structlog

from src.providers import get_store
from src.sync.sync_coordinator import SyncCoordinator
from src.utils.config_loader import ConfigLoader, ConfigurationError
from src.utils.logging_config import configure_logging_from_config

log = structlog.stdlib.get_logger()


def perform_sync(args: argparse.Namespace) -> dict:
    """
    Perform one synchronization run.

    Args:
        args: Parsed command line arguments

    Returns:
        Dictionary with sync statistics
    """
    start_time = datetime.now()

    try:
        config = ConfigLoader().load_config(args.config)
    except ConfigurationError as e:
        return {"success": False, "error": str(e), "duration_seconds": 0.0}

    configure_logging_from_config(config.logging)
    ConfigLoader().validate_config(config)

    options = config.sync
    overrides = {
        "entry": args.entry,
        "ext": args.ext,
        "log_file": args.log_file,
        "cwd": args.cwd,
    }
    options = options.model_copy(update={k: v for k, v in overrides.items() if v is not None})
    if args.no_save_log:
        options = options.model_copy(update={"save_log": False})
    if args.confirm:
        options = options.model_copy(update={"confirm": True})

    store_config = config.store
    if args.dest:
        store_config = store_config.model_copy(
            update={"config": {**store_config.config, "dest_dir": args.dest}}
        )

    log.info("sync_run_started", entry=options.entry, timestamp=start_time.isoformat())

    try:
        store = get_store(store_config)
        result = SyncCoordinator(store=store).sync(options)
    except Exception as e:
        duration = (datetime.now() - start_time).total_seconds()
        log.error("sync_run_failed", error=str(e), error_type=type(e).__name__)
        return {"success": False, "error": str(e), "duration_seconds": duration}

    duration = (datetime.now() - start_time).total_seconds()
    stats = {
        "success": True,
        "confirmed": result.is_confirm,
        "entry": options.entry,
        "total_files": len(result.files),
        "changed_files": len(result.changed_files),
        "synced_files": len(result.synced_files),
        "failed_files": result.failed_keys,
        "duration_seconds": duration,
    }

    log.info("sync_run_completed", **stats)
    return stats


def main():
    """Main entry point for the sync script."""
    parser = argparse.ArgumentParser(description="Incremental file synchronization")
    parser.add_argument("--config", type=str, default=None, help="Path to configuration file")
    parser.add_argument("--entry", type=str, default=None, help="Directory to synchronize")
    parser.add_argument("--ext", type=str, default=None, help="Extension filter, e.g. md or md,txt")
    parser.add_argument("--log-file", type=str, default=None, help="Sync log path")
    parser.add_argument("--cwd", type=str, default=None, help="Working directory")
    parser.add_argument("--dest", type=str, default=None, help="Destination directory for the local store")
    parser.add_argument("--no-save-log", action="store_true", help="Do not persist the sync log")
    parser.add_argument("--confirm", action="store_true", help="Ask before syncing")

    args = parser.parse_args()
    stats = perform_sync(args)

    print("\n" + "=" * 60)
    print("SYNCHRONIZATION SUMMARY")
    print("=" * 60)

    if stats.get("success"):
        print("Status: ✓ SUCCESS" if stats.get("confirmed") else "Status: - DECLINED")
        print(f"Entry: {stats.get('entry')}")
        print(f"Files Listed: {stats.get('total_files', 0)}")
        print(f"Files Changed: {stats.get('changed_files', 0)}")
        print(f"Files Synced: {stats.get('synced_files', 0)}")
        if stats.get("failed_files"):
            print(f"Files Failed (retried next run): {', '.join(stats['failed_files'])}")
    else:
        print("Status: ✗ FAILED")
        print(f"Error: {stats.get('error', 'Unknown error')}")
    print(f"Duration: {stats.get('duration_seconds', 0):.2f} seconds")

    print("=" * 60)

    sys.exit(0 if stats.get("success") and not stats.get("failed_files") else 1)


if __name__ == "__main__":
    main()
