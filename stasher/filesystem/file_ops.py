"""File operations: moves and sidecar writes that never overwrite."""

import shutil
from pathlib import Path

import requests
from loguru import logger

from stasher.config.settings import REQUEST_TIMEOUT_SECONDS, USER_AGENT
from stasher.models.media import ResolvedMetadata


def move_file_if_absent(source: Path, destination: Path) -> bool:
    """
    Move a file unless the destination already exists.

    Args:
        source: Source file path.
        destination: Destination file path.

    Returns:
        True if the file was moved, False if the destination exists,
        the source is missing, or the move failed.
    """
    if destination.exists():
        logger.warning(f'Destination file exists, not moving: {destination}')
        return False

    if not source.exists():
        logger.warning(f'Source file not found: {source}')
        return False

    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(source), str(destination))
        logger.info(f'File moved: {destination}')
        return True
    except OSError as e:
        logger.error(f'Error moving {source}: {e}')
        return False


def format_synopsis(metadata: ResolvedMetadata) -> str:
    """
    Render the synopsis.txt content of a title.

    Args:
        metadata: Resolved metadata.

    Returns:
        Title line, rating lines, cast and plot overview.
    """
    heading = f"{metadata.title} ({metadata.year})" if metadata.year else metadata.title
    lines = [heading]
    if metadata.content_rating:
        lines.append(f"Age rating: {metadata.content_rating}")
    if metadata.rating is not None:
        lines.append(f"Rating: {metadata.rating}%")
    if metadata.cast:
        lines.append(f"Cast: {metadata.cast}")
    lines.append("")
    lines.append(metadata.synopsis or "No synopsis available.")
    return "\n".join(lines) + "\n"


def write_sidecar_if_absent(path: Path, content: str) -> bool:
    """
    Write a text sidecar file unless it already exists.

    Args:
        path: Sidecar file path.
        content: Text content.

    Returns:
        True if the file was written.
    """
    if path.exists():
        logger.debug(f'Sidecar already present: {path}')
        return False

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding='utf-8')
        logger.info(f'Saved {path.name} in {path.parent}')
        return True
    except OSError as e:
        logger.error(f'Error writing {path}: {e}')
        return False


def download_poster(url: str, save_path: Path) -> bool:
    """
    Download a poster image unless the file already exists.

    Args:
        url: Absolute image URL.
        save_path: Where to store the image.

    Returns:
        True if the poster was downloaded and saved.
    """
    if save_path.exists():
        logger.debug(f'Poster already present: {save_path}')
        return False

    try:
        response = requests.get(
            url,
            headers={'User-Agent': USER_AGENT},
            timeout=REQUEST_TIMEOUT_SECONDS
        )
    except requests.RequestException as e:
        logger.warning(f'Error downloading poster: {e}')
        return False

    if response.status_code != 200:
        logger.warning(f'Poster download error: {response.status_code}')
        return False

    try:
        save_path.parent.mkdir(parents=True, exist_ok=True)
        save_path.write_bytes(response.content)
    except OSError as e:
        logger.error(f'Error saving poster {save_path}: {e}')
        return False

    logger.info(f'Poster saved to {save_path.parent}')
    return True
