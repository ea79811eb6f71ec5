"""Ingestion components for discovering files to synchronize"""

from src.ingestion.file_lister import FileLister, parse_extensions

__all__ = ["FileLister", "parse_extensions"]
