"""Utility functions for cdhit-clstr."""

from .logging import setup_logging
from .file_operations import open_text, safe_open, ensure_directory

__all__ = [
    "setup_logging",
    "open_text",
    "safe_open",
    "ensure_directory",
]
