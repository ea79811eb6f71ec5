"""Storage components for committing changed files to a destination."""

from src.storage.store import LocalCopyStore, StoreInterface, sync_store, versioned_path

__all__ = ["LocalCopyStore", "StoreInterface", "sync_store", "versioned_path"]
