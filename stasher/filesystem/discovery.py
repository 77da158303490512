"""File discovery functions for finding media files."""

from pathlib import Path
from typing import Generator, List

from loguru import logger

from stasher.config.settings import SIDECAR_FILENAMES


def is_sidecar(path: Path) -> bool:
    """Check if a file is a synopsis/poster written by an earlier run."""
    return path.name.lower() in SIDECAR_FILENAMES


def get_files(directory: Path) -> Generator[Path, None, None]:
    """
    Generate all media files below a directory, recursively.

    Sidecar outputs of earlier runs are skipped. Files are yielded in
    sorted path order so runs are reproducible.

    Args:
        directory: Root directory to search in.

    Yields:
        Path objects for each file found.
    """
    if not directory.is_dir():
        logger.warning(f"Source folder doesn't exist: {directory}")
        return

    try:
        paths = sorted(directory.rglob("*"))
    except OSError as e:
        logger.warning(f"File system access error for {directory}: {e}")
        return

    file_count = 0
    for path in paths:
        if not path.is_file():
            continue
        if is_sidecar(path):
            logger.debug(f"Skipping sidecar: {path}")
            continue
        file_count += 1
        yield path
    logger.debug(f"{file_count} files found in {directory}")


def list_files(directory: Path) -> List[Path]:
    """Return get_files() as a list."""
    return list(get_files(directory))


def count_files(directory: Path) -> int:
    """
    Count media files below a directory.

    Args:
        directory: Root directory to count files in.

    Returns:
        Number of files get_files() would yield.
    """
    return sum(1 for _ in get_files(directory))
