"""Media data models for the stasher package."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from stasher.classification.text_processing import normalize_title_key
from stasher.config.settings import SENTINEL_VALUE


class MediaType(Enum):
    """Kind of media a file holds."""

    MOVIE = "Movie"
    SERIES = "Series"
    ANIME = "Anime"

    @property
    def is_episodic(self) -> bool:
        """Check if this type is organized by season and episode."""
        if self is MediaType.MOVIE:
            return False
        if self in (MediaType.SERIES, MediaType.ANIME):
            return True
        raise ValueError(f"Unknown media type: {self!r}")

    @classmethod
    def from_label(cls, label: str) -> "MediaType":
        """
        Get a media type from its stored label, case-insensitively.

        Args:
            label: Label such as "movie" or "Series".

        Returns:
            Matching MediaType.

        Raises:
            ValueError: If the label names no media type.
        """
        for member in cls:
            if member.value.lower() == label.strip().lower():
                return member
        raise ValueError(f"Unknown media type label: {label!r}")


@dataclass(frozen=True)
class ParsedInfo:
    """
    Structured guess extracted from a filename.

    Attributes:
        title: Title text left after cleaning, empty when unparseable.
        media_type: Movie, series or anime.
        season: Season number, if found.
        episode: Episode number, if found.
        year: Release year, if found.
    """

    title: str
    media_type: MediaType
    season: Optional[int] = None
    episode: Optional[int] = None
    year: Optional[int] = None

    @property
    def is_unparseable(self) -> bool:
        """Check if no usable title was recovered."""
        return not self.title or not self.title.strip()


@dataclass(frozen=True)
class NormalizedKey:
    """
    Cache address of a metadata lookup.

    Season and episode hold SENTINEL_VALUE when not applicable, so a movie
    lookup never shares a row with a series lookup of the same title.
    """

    title: str
    media_type: MediaType
    season: int = SENTINEL_VALUE
    episode: int = SENTINEL_VALUE

    @classmethod
    def from_parsed(cls, parsed: ParsedInfo) -> "NormalizedKey":
        """Build the key for a parsed filename."""
        return cls(
            title=normalize_title_key(parsed.title),
            media_type=parsed.media_type,
            season=SENTINEL_VALUE if parsed.season is None else parsed.season,
            episode=SENTINEL_VALUE if parsed.episode is None else parsed.episode,
        )


@dataclass(frozen=True)
class ResolvedMetadata:
    """
    Canonical metadata for one file, read-only once produced.

    Attributes:
        title: Display title (provider title, or filename title).
        media_type: Movie, series or anime.
        year: Release or first-air year.
        synopsis: Plot overview.
        cast: Comma-separated main cast and director.
        content_rating: Localized age classification.
        rating: Audience score from 0 to 100.
        poster_url: Absolute poster image URL.
        season: Season number.
        episode: Episode number.
        episode_title: Episode name from the provider.
        lookup_key: Normalized title text of the key used to fetch/store it.
    """

    title: str
    media_type: MediaType
    year: Optional[int] = None
    synopsis: Optional[str] = None
    cast: Optional[str] = None
    content_rating: Optional[str] = None
    rating: Optional[int] = None
    poster_url: Optional[str] = None
    season: Optional[int] = None
    episode: Optional[int] = None
    episode_title: Optional[str] = None
    lookup_key: str = ""

    @property
    def has_details(self) -> bool:
        """Check if the record carries anything worth a synopsis file."""
        return bool(self.synopsis or self.cast or self.content_rating or self.rating is not None)

    @classmethod
    def minimal(cls, parsed: ParsedInfo, title: Optional[str] = None) -> "ResolvedMetadata":
        """
        Build a record from filename data only.

        Args:
            parsed: Parsed filename information.
            title: Display title override (defaults to the parsed title).

        Returns:
            ResolvedMetadata without synopsis, cast or poster.
        """
        return cls(
            title=title or parsed.title,
            media_type=parsed.media_type,
            year=parsed.year,
            season=parsed.season,
            episode=parsed.episode,
            lookup_key=normalize_title_key(parsed.title),
        )


@dataclass(frozen=True)
class DestinationPlan:
    """Where a file goes and where its sidecars live."""

    target_folder: Path
    file_name: str
    sidecar_folder: Path

    @property
    def destination(self) -> Path:
        """Full destination path of the renamed file."""
        return self.target_folder / self.file_name


@dataclass
class MoveHistoryRecord:
    """One completed move, as stored by the history sink."""

    original_file_name: str
    new_file_name: str
    source_path: str
    destination_path: str
    moved_at: datetime
    id: Optional[int] = None
