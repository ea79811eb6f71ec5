"""Exceptions raised by the synchronization engine."""


class SyncError(Exception):
    """Base class for synchronization failures that abort a run."""

    pass


class LogParseError(SyncError):
    """Raised when the sync log exists but is not a well-formed document."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to parse sync log {path}: {reason}")


class FingerprintError(OSError):
    """Raised when a file cannot be read while computing its fingerprint."""

    def __init__(self, path: str, error: OSError):
        self.path = path
        self.error = error
        super().__init__(f"Failed to fingerprint {path}: {error}")
        self.errno = error.errno


class StoreError(SyncError):
    """Raised by a store when a file could not be committed.

    Store failures never abort a run: the affected keys are left out of the
    outcome map and picked up again on the next run.
    """

    def __init__(self, message: str, key: str | None = None):
        self.key = key
        super().__init__(message)
