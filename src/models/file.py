"""Pydantic models for discovered files and the persisted sync log."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FileRecord(BaseModel):
    """Represents one file discovered under the entry directory."""

    key: str = Field(default=..., min_length=1, description="Path relative to the entry root")
    path: str = Field(default=..., description="Absolute filesystem path")
    size: int = Field(default=..., ge=0, description="File size in bytes")
    mtime: int = Field(default=..., description="Modification time in epoch seconds")
    hash: str | None = Field(default=None, description="Content digest, computed lazily")

    model_config = {
        "json_schema_extra": {
            "example": {
                "key": "docs/a.txt",
                "path": "/srv/site/docs/a.txt",
                "size": 10,
                "mtime": 1700000000,
                "hash": "9f86d081884c7d659a2feaa0c55ad015a3bf4f1b2b0b822cd15d6c15b0f00a08",
            }
        }
    }


class LogEntry(BaseModel):
    """Last successfully synced fingerprint of a file."""

    model_config = ConfigDict(populate_by_name=True)

    size: int = Field(default=..., ge=0, description="File size in bytes")
    mtime: int = Field(default=..., description="Modification time in epoch seconds")
    hash: str = Field(default=..., description="Content digest")
    ver_path: str | None = Field(
        default=None,
        alias="verPath",
        description="Destination identifier assigned by the store",
    )


class SyncLog(BaseModel):
    """Durable record of the last synced state of every file key."""

    model_config = ConfigDict(populate_by_name=True)

    files: dict[str, LogEntry] = Field(
        default_factory=dict, description="Last synced fingerprint keyed by file key"
    )
    last_sync: int | None = Field(
        default=None,
        alias="lastSync",
        description="Epoch seconds of the last sync that committed at least one file",
    )


class ChangeReason(str, Enum):
    """Why a file was placed in the changed-set."""

    NEW = "new"
    SIZE = "size"
    MTIME = "mtime"
    HASH = "hash"
    CUSTOM = "custom"


class ChangedRecord(FileRecord):
    """A file whose current fingerprint differs from its log entry."""

    model_config = ConfigDict(populate_by_name=True)

    hash: str = Field(default=..., description="Content digest")
    ver_path: str | None = Field(
        default=None,
        alias="verPath",
        description="Destination identifier, assigned once the file is synced",
    )
    reason: ChangeReason = Field(default=ChangeReason.NEW, description="Comparison that failed")

    def to_log_entry(self) -> LogEntry:
        """Build the log entry recorded for this file once it is synced."""
        return LogEntry(size=self.size, mtime=self.mtime, hash=self.hash, ver_path=self.ver_path)
