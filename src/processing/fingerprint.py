"""Fingerprint extraction for files on disk."""

import hashlib
import os

import structlog
from pydantic import BaseModel, Field

from src.exceptions import FingerprintError

log = structlog.stdlib.get_logger()

# Block size used when feeding file content to the digest
READ_BLOCK_SIZE: int = 1024 * 1024


class Fingerprint(BaseModel):
    """Size, modification time and content digest of a file."""

    size: int = Field(default=..., ge=0, description="File size in bytes")
    mtime: int = Field(default=..., description="Modification time in epoch seconds")
    hash: str = Field(default=..., description="Hex content digest")


def read_stat(path: str) -> tuple[int, int]:
    """
    Read size and modification time of a file.

    Args:
        path: Absolute path of the file

    Returns:
        Tuple of (size in bytes, mtime in whole epoch seconds)

    Raises:
        FingerprintError: If the file cannot be stat'ed
    """
    try:
        stat = os.stat(path)
    except OSError as e:
        log.error("failed_to_stat_file", path=path, error=str(e))
        raise FingerprintError(path, e) from e

    return stat.st_size, int(stat.st_mtime)


def compute_hash(path: str, algorithm: str = "sha256") -> str:
    """
    Compute the content digest of a file.

    The whole file is read, so the cost is proportional to its size.

    Args:
        path: Absolute path of the file
        algorithm: Name of a hashlib algorithm

    Returns:
        Hex digest of the file content

    Raises:
        FingerprintError: If the file cannot be read
    """
    digest = hashlib.new(algorithm)

    try:
        with open(path, "rb") as f:
            for block in iter(lambda: f.read(READ_BLOCK_SIZE), b""):
                digest.update(block)
    except OSError as e:
        log.error("failed_to_hash_file", path=path, algorithm=algorithm, error=str(e))
        raise FingerprintError(path, e) from e

    return digest.hexdigest()


def extract_fingerprint(path: str, algorithm: str = "sha256") -> Fingerprint:
    """
    Extract the full fingerprint of a file.

    Args:
        path: Absolute path of the file
        algorithm: Name of a hashlib algorithm

    Returns:
        Fingerprint with size, mtime and content hash

    Raises:
        FingerprintError: If the file cannot be stat'ed or read
    """
    size, mtime = read_stat(path)
    content_hash = compute_hash(path, algorithm)

    log.debug("fingerprint_extracted", path=path, size=size, mtime=mtime, hash=content_hash)
    return Fingerprint(size=size, mtime=mtime, hash=content_hash)
