"""
File operations utilities for cdhit-clstr.

This module opens cluster reports and sequence databases with consistent
error handling and transparent gzip support.
"""

import gzip
from typing import Iterator, TextIO
from pathlib import Path
from contextlib import contextmanager

from ..core.types import PathLike
from ..core.exceptions import FileSystemError


def open_text(
    file_path: PathLike,
    mode: str = 'r',
    encoding: str = 'utf-8',
) -> TextIO:
    """
    Open a text file, decompressing or compressing when the suffix is ``.gz``.

    The caller owns the returned handle.

    Args:
        file_path: Path to file
        mode: 'r', 'w' or 'a'
        encoding: File encoding

    Returns:
        Open text handle

    Raises:
        FileSystemError: If the file cannot be opened
    """
    path = Path(file_path)

    try:
        if mode.startswith('w') or mode.startswith('a'):
            # Ensure parent directory exists for write operations
            path.parent.mkdir(parents=True, exist_ok=True)

        if path.suffix == '.gz':
            return gzip.open(path, mode + 't', encoding=encoding)
        return open(path, mode, encoding=encoding)

    except PermissionError as e:
        raise FileSystemError(
            f"Permission denied accessing file: {path}",
            file_path=str(path),
            operation=f"open_{mode}"
        ) from e
    except OSError as e:
        raise FileSystemError(
            f"OS error accessing file: {path} - {e}",
            file_path=str(path),
            operation=f"open_{mode}"
        ) from e


@contextmanager
def safe_open(
    file_path: PathLike,
    mode: str = 'r',
    encoding: str = 'utf-8',
) -> Iterator[TextIO]:
    """
    Open a file for the duration of a ``with`` block.

    Yields:
        File handle

    Raises:
        FileSystemError: If the file cannot be opened
    """
    handle = open_text(file_path, mode, encoding)
    try:
        yield handle
    finally:
        handle.close()


def ensure_directory(dir_path: PathLike) -> Path:
    """
    Ensure directory exists, create if necessary.

    Raises:
        FileSystemError: If directory cannot be created
    """
    path = Path(dir_path)

    try:
        path.mkdir(parents=True, exist_ok=True)
        return path
    except OSError as e:
        raise FileSystemError(
            f"OS error creating directory: {path} - {e}",
            file_path=str(path),
            operation="mkdir"
        ) from e


def derive_output_path(input_path: PathLike, suffix: str) -> Path:
    """
    Build an output path next to ``input_path`` by replacing its extension.

    ``clusters.clstr`` with suffix ``top10.clstr`` gives ``clusters.top10.clstr``;
    a trailing ``.gz`` on the input is dropped first.
    """
    path = Path(input_path)
    if path.suffix == '.gz':
        path = path.with_suffix('')
    return path.with_suffix(f".{suffix}")
