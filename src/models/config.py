"""Configuration models for the file synchronization system."""

import hashlib
from typing import Any, Callable

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GlobOptions(BaseModel):
    """Options controlling how files are discovered under the entry directory."""

    pattern: str = Field(default="**/*", description="Glob pattern relative to the entry")
    ignore: list[str] = Field(
        default_factory=list, description="Glob patterns matched against file keys to skip"
    )
    dot: bool = Field(default=False, description="Include files and directories starting with '.'")
    follow_symlinks: bool = Field(default=False, description="Follow symlinked files")


class ChangeOptions(BaseModel):
    """Criteria used to decide whether a file differs from its log entry."""

    compare_size: bool = Field(default=True, description="Treat a size difference as a change")
    compare_mtime: bool = Field(
        default=True, description="Treat a modification time difference as a change"
    )
    compare_hash: bool = Field(default=True, description="Treat a content hash difference as a change")
    hash_algorithm: str = Field(default="sha256", description="hashlib algorithm for content digests")
    predicate: Callable[..., bool] | None = Field(
        default=None,
        exclude=True,
        description="Custom (record, entry) -> bool comparison replacing the flags above",
    )

    @field_validator("hash_algorithm")
    @classmethod
    def validate_hash_algorithm(cls, v: str) -> str:
        """Reject digests hashlib does not provide."""
        if v.lower() not in hashlib.algorithms_available:
            raise ValueError(f"Unsupported hash algorithm: {v}")
        return v.lower()


class SyncOptions(BaseModel):
    """Inputs of a single synchronization run."""

    entry: str = Field(default=".", description="Directory (or single file) to synchronize")
    ext: str = Field(
        default="", description="Extension filter, e.g. '.md' or 'md,txt'; empty means all files"
    )
    log_file: str = Field(default="sync.json", description="Sync log path, relative to cwd")
    save_log: bool = Field(default=True, description="Persist the sync log after a sync")
    confirm: bool = Field(default=False, description="Ask for confirmation before syncing")
    confirm_timeout: float | None = Field(
        default=None, gt=0, description="Seconds to wait for confirmation; None waits forever"
    )
    cwd: str | None = Field(default=None, description="Working directory; defaults to os.getcwd()")
    glob: GlobOptions = Field(default_factory=GlobOptions)
    change: ChangeOptions = Field(default_factory=ChangeOptions)


class StoreConfig(BaseModel):
    """Configuration for the destination store."""

    type: str = Field(default="local", description="Store type (local)")
    config: dict[str, Any] = Field(default_factory=dict, description="Store-specific configuration")


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_logs: bool = Field(
        default=True,
        description="If True, output JSON logs. If False, use console format.",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional path to log file. If None, logs only to stdout.",
    )


class AppConfig(BaseSettings):
    """Main application configuration.

    This class uses pydantic-settings to load configuration from environment
    variables with the APP_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    sync: SyncOptions = Field(default_factory=SyncOptions)
    store: StoreConfig = Field(default_factory=StoreConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
