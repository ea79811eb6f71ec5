"""File discovery for building the listing of a synchronization run."""

import os
from pathlib import Path, PurePosixPath
from typing import Callable, Sequence

import structlog

from src.models.config import GlobOptions
from src.models.file import FileRecord
from src.processing.fingerprint import read_stat

log = structlog.stdlib.get_logger()

OrderFiles = Callable[[list[FileRecord]], Sequence[FileRecord]]


def parse_extensions(ext: str | None) -> tuple[str, ...]:
    """
    Normalize an extension filter.

    Args:
        ext: Extension filter such as "md", ".md" or "md, txt"

    Returns:
        Lowercase suffixes with a leading dot; empty when every file matches
    """
    if not ext:
        return ()

    suffixes = []
    for part in ext.split(","):
        part = part.strip().lower()
        if not part:
            continue
        suffixes.append(part if part.startswith(".") else f".{part}")
    return tuple(suffixes)


class FileLister:
    """Lists files under an entry directory as FileRecords."""

    def __init__(self, glob_options: GlobOptions | None = None):
        """
        Initialize file lister.

        Args:
            glob_options: Pattern, ignore list and hidden-file handling
        """
        self._glob_options: GlobOptions = glob_options or GlobOptions()

    def list_files(
        self,
        entry: str,
        ext: str | None = None,
        cwd: str | None = None,
        order_files: OrderFiles | None = None,
    ) -> list[FileRecord]:
        """
        List files under the entry directory.

        Args:
            entry: Directory or single file, relative to cwd unless absolute
            ext: Extension filter; empty lists every file
            cwd: Working directory; defaults to os.getcwd()
            order_files: Optional function reordering the listing

        Returns:
            File records with size and mtime filled in, sorted by key unless
            order_files says otherwise

        Raises:
            FingerprintError: If a listed file cannot be stat'ed
        """
        root = Path(cwd or os.getcwd()) / entry
        root = root.resolve()
        suffixes = parse_extensions(ext)

        log.info(
            "listing_files",
            entry=str(root),
            ext=list(suffixes),
            pattern=self._glob_options.pattern,
        )

        if root.is_file():
            paths = [(root.name, root)] if self._matches_extension(root, suffixes) else []
        elif root.is_dir():
            paths = [
                (key, path)
                for key, path in self._walk(root)
                if self._matches_extension(path, suffixes)
            ]
        else:
            log.warning("entry_not_found", entry=str(root))
            return []

        files: list[FileRecord] = []
        for key, path in sorted(paths):
            size, mtime = read_stat(str(path))
            files.append(FileRecord(key=key, path=str(path), size=size, mtime=mtime))

        if order_files is not None:
            files = list(order_files(files))

        log.info("files_listed", entry=str(root), file_count=len(files))
        return files

    def _walk(self, root: Path):
        """Yield (key, path) pairs for every regular file matching the glob options."""
        options = self._glob_options

        for path in root.glob(options.pattern):
            key = path.relative_to(root).as_posix()

            if not options.follow_symlinks and path.is_symlink():
                continue
            if not path.is_file():
                continue
            if not options.dot and self._is_hidden(key):
                continue
            if self._is_ignored(key):
                log.debug("file_ignored", key=key)
                continue

            yield key, path

    def _is_ignored(self, key: str) -> bool:
        """Check whether a key matches one of the ignore patterns."""
        key_path = PurePosixPath(key)
        return any(key_path.match(pattern) for pattern in self._glob_options.ignore)

    @staticmethod
    def _is_hidden(key: str) -> bool:
        """Check whether any component of a key starts with a dot."""
        return any(part.startswith(".") for part in PurePosixPath(key).parts)

    @staticmethod
    def _matches_extension(path: Path, suffixes: tuple[str, ...]) -> bool:
        """Check a path against the extension filter."""
        if not suffixes:
            return True
        return path.name.lower().endswith(suffixes)
