"""Centralized provider module for store implementations.

This module provides the factory function for creating StoreInterface instances.
Developers can modify it to swap destinations without changing other code.

Default implementation:
- Store: LocalCopyStore (local directory, no external services required)
"""

import structlog

from src.models.config import StoreConfig
from src.storage.store import LocalCopyStore, StoreInterface

log = structlog.stdlib.get_logger()


def get_store(store_config: StoreConfig) -> StoreInterface:
    """Get the configured store implementation.

    Developers: Modify this function to add a destination type.
    Default: LocalCopyStore (copies files into config["dest_dir"])

    Example - Add an S3 upload store:
        if store_config.type == "s3":
            return S3Store(bucket=store_config.config["bucket"])

    Args:
        store_config: Store type and store-specific settings

    Returns:
        StoreInterface instance

    Raises:
        ValueError: If the store type is unknown or its settings are incomplete
    """
    store_type = store_config.type.lower()

    if store_type == "local":
        dest_dir = store_config.config.get("dest_dir")
        if not dest_dir:
            error_msg = "store.config.dest_dir is required for the local store"
            log.error("get_store_failed", store_type=store_type, error=error_msg)
            raise ValueError(error_msg)

        log.info("initializing_store", store_type=store_type, dest_dir=dest_dir)
        return LocalCopyStore(
            dest_dir=dest_dir,
            versioned=store_config.config.get("versioned", True),
            hash_length=store_config.config.get("hash_length", 8),
        )

    error_msg = f"Unsupported store type: {store_config.type}"
    log.error("get_store_failed", store_type=store_type, error=error_msg)
    raise ValueError(error_msg)
