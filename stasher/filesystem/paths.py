"""Destination path and file name rules for organized media."""

from pathlib import Path
from typing import Optional

from stasher.classification.text_processing import (
    capitalize_words,
    is_generic_episode_title,
    sanitize_segment,
)
from stasher.config.settings import (
    DEFAULT_SEASON,
    DIGIT_BUCKET,
    MOVIES_FOLDER,
    SERIES_FOLDER,
    SYMBOL_BUCKET,
)
from stasher.models.media import DestinationPlan, MediaType, ResolvedMetadata


def title_basis(metadata: ResolvedMetadata, offline: bool = False) -> str:
    """
    Choose the text a destination is named after.

    Offline runs name files after the lookup key so reruns stay stable
    without provider titles.

    Args:
        metadata: Resolved metadata.
        offline: Whether the run is offline.

    Returns:
        Raw title text, before casing and sanitization.
    """
    if offline and metadata.lookup_key and metadata.lookup_key.strip():
        return metadata.lookup_key
    return metadata.title


def display_title(metadata: ResolvedMetadata, offline: bool = False) -> str:
    """
    Return the capitalized, path-safe title of a metadata record.

    When the preferred basis sanitizes to nothing, the other one (provider
    title or lookup key) is tried before giving up with an empty string.
    """
    preferred = title_basis(metadata, offline)
    for candidate in (preferred, metadata.title, metadata.lookup_key):
        title = sanitize_segment(capitalize_words(candidate or ""))
        if title:
            return title
    return ""


def bucket_for(title: str) -> str:
    """
    Get the first-letter bucket folder of a title.

    Args:
        title: Sanitized title.

    Returns:
        Uppercased first letter, DIGIT_BUCKET for digits, SYMBOL_BUCKET
        for anything else (including an empty title).

    Examples:
        >>> bucket_for("anaconda")
        'A'
        >>> bucket_for("24")
        '1 - 1000'
    """
    first = title[:1].upper()
    if first.isdigit():
        return DIGIT_BUCKET
    if first.isalpha():
        return first
    return SYMBOL_BUCKET


def title_folder_name(title: str, year: Optional[int]) -> str:
    """Return "<Title> (<Year>)", or just the title when the year is unknown."""
    return f"{title} ({year})" if year else title


def episode_file_name(episode: int, episode_title: Optional[str], extension: str) -> str:
    """
    Build an episode file name.

    Args:
        episode: Episode number.
        episode_title: Provider episode title; generic ones are dropped.
        extension: Original file extension, dot included.

    Returns:
        "05 - Title.mkv", or "05.mkv" without a usable title.
    """
    name = f"{episode:02d}"
    if episode_title and episode_title.strip() and not is_generic_episode_title(episode_title):
        clean_title = sanitize_segment(episode_title)
        if clean_title:
            name = f"{name} - {clean_title}"
    return f"{name}{extension}"


def derive_path(
    source_file: Path,
    metadata: ResolvedMetadata,
    offline: bool = False,
    destination_root: Path = Path()
) -> DestinationPlan:
    """
    Compute where a media file goes and how it is renamed.

    Movies: Movies/<bucket>/<Title> (<Year>)/<Title><ext>.
    Series and anime: TV Series/<bucket>/<Title> (<Year>)/Season <N>/<NN - Episode><ext>.
    Pure function, no file system access.

    Args:
        source_file: Original file path (only the extension is used).
        metadata: Resolved metadata.
        offline: Whether the run is offline (names from the lookup key).
        destination_root: Library root the layout is built under.

    Returns:
        DestinationPlan with target folder, file name and sidecar folder.

    Raises:
        ValueError: If the media type is unknown or no title survives
            sanitization.
    """
    title = display_title(metadata, offline)
    if not title:
        raise ValueError(f"No usable title for {Path(source_file).name!r}")
    extension = Path(source_file).suffix
    bucket = bucket_for(title)
    folder_name = title_folder_name(title, metadata.year)

    if metadata.media_type is MediaType.MOVIE:
        title_folder = destination_root / MOVIES_FOLDER / bucket / folder_name
        return DestinationPlan(
            target_folder=title_folder,
            file_name=f"{title}{extension}",
            sidecar_folder=title_folder,
        )

    if metadata.media_type in (MediaType.SERIES, MediaType.ANIME):
        title_folder = destination_root / SERIES_FOLDER / bucket / folder_name
        season = metadata.season if metadata.season is not None else DEFAULT_SEASON
        if metadata.episode is None:
            file_name = f"{title}{extension}"
        else:
            file_name = episode_file_name(metadata.episode, metadata.episode_title, extension)
        return DestinationPlan(
            target_folder=title_folder / f"Season {season}",
            file_name=file_name,
            sidecar_folder=title_folder,
        )

    raise ValueError(f"Unknown media type: {metadata.media_type!r}")
