"""Output directory preparation and file writing."""

from __future__ import annotations

import shutil
from pathlib import Path

from quire.exceptions import DirectoryError
from quire.logger import get_logger


def prepare_output_directory(directory: Path, *, clean: bool) -> None:
    """Make sure ``directory`` exists, optionally removing its old contents first.

    Raises:
        DirectoryError: If the directory cannot be removed or created
    """
    logger = get_logger()

    if clean and directory.exists():
        logger.detail(f"Cleaning output directory {directory}")
        try:
            if directory.is_dir():
                shutil.rmtree(directory)
            else:
                directory.unlink()
        except OSError as e:
            raise DirectoryError(
                f"Could not empty the output directory {directory}: {e}"
            ) from e

    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryError(f"Could not create the output directory {directory}: {e}") from e


def write_file(path: Path, contents: str | bytes) -> None:
    """Write text (as UTF-8) or bytes to ``path``, creating parent directories.

    Raises:
        OSError: If the file cannot be written
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(contents, bytes):
        path.write_bytes(contents)
    else:
        path.write_text(contents, encoding="utf-8")
