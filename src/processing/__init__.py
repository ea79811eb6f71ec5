"""File processing module for fingerprint extraction."""

from src.processing.fingerprint import Fingerprint, compute_hash, extract_fingerprint, read_stat

__all__ = ["Fingerprint", "compute_hash", "extract_fingerprint", "read_stat"]
