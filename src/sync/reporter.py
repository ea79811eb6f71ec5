"""Console reporting of the files about to be synced."""

from datetime import datetime
from typing import Callable, Mapping

import structlog

from src.models.file import ChangedRecord

log = structlog.stdlib.get_logger()

NO_CHANGES_MESSAGE: str = "There are no files to sync yet!"


def format_size(size: int) -> str:
    """Format a byte count for display, e.g. 512 B or 1.5 KB."""
    if size < 1024:
        return f"{size} B"

    value = float(size)
    for unit in ("KB", "MB", "GB"):
        value /= 1024
        if value < 1024:
            break
    return f"{value:.1f} {unit}"


def format_mtime(mtime: int) -> str:
    """Format epoch seconds as local YYYY-MM-DD HH:MM:SS."""
    return datetime.fromtimestamp(mtime).strftime("%Y-%m-%d %H:%M:%S")


class ChangeReporter:
    """Formats the changed-set for display.

    Output goes through an injected writer so callers (and tests) decide
    where it ends up.
    """

    def __init__(self, writer: Callable[[str], None] | None = None) -> None:
        """Initialize the reporter.

        Args:
            writer: Function receiving each output line (defaults to print)
        """
        self._writer = writer or print

    def write(self, line: str) -> None:
        """Write a single line."""
        self._writer(line)

    def report_no_changes(self) -> None:
        """Tell the user there is nothing to sync."""
        self._writer(NO_CHANGES_MESSAGE)

    def report_changes(self, changed_files: Mapping[str, ChangedRecord]) -> None:
        """Write the summary line followed by one aligned line per file."""
        for line in self.format_changes(changed_files):
            self._writer(line)
        log.debug("changes_reported", changed_count=len(changed_files))

    def format_changes(self, changed_files: Mapping[str, ChangedRecord]) -> list[str]:
        """Format the changed-set as display lines.

        Keys are padded to the longest key and sizes right-aligned to the
        widest size, so columns line up.
        """
        lines = [f"There are {len(changed_files)} file(s) to be synced:"]
        if not changed_files:
            return lines

        sizes = {key: format_size(record.size) for key, record in changed_files.items()}
        key_width = max(len(key) for key in changed_files)
        size_width = max(len(size) for size in sizes.values())

        for key, record in changed_files.items():
            lines.append(
                f"{key.ljust(key_width)}: {sizes[key].rjust(size_width)}, "
                f"{format_mtime(record.mtime)}, {record.hash} => {record.ver_path or '-'}"
            )

        return lines
