"""Pytest configuration and fixtures."""

import pytest
from pathlib import Path
from unittest.mock import MagicMock

from stasher.api.base import MetadataProvider
from stasher.api.cache_db import MetadataCache
from stasher.models.media import MediaType, ResolvedMetadata


@pytest.fixture
def sample_media_names():
    """Sample media filenames for testing."""
    return [
        "Show.Name.S01E02.1080p.WEBRip.x264-GROUP.mkv",
        "Anaconda.1997.BluRay.mkv",
        "Breaking.Bad.S01E01.720p.WEB-DL.x265.mkv",
        "[SubsPlease] Frieren - 05 (1080p).mkv",
        "The.Office.US.2x03.HDTV.mkv",
    ]


@pytest.fixture
def source_dir(tmp_path):
    """Source folder holding a few fake media files."""
    folder = tmp_path / "incoming"
    folder.mkdir()
    for name in ("Anaconda.1997.BluRay.mkv", "Show.Name.S01E02.1080p.WEBRip.x264-GROUP.mkv"):
        (folder / name).write_bytes(b"fake video content")
    return folder


@pytest.fixture
def cache(tmp_path):
    """Metadata cache stored in a temporary database."""
    metadata_cache = MetadataCache(tmp_path / "cache.db")
    yield metadata_cache
    metadata_cache.close()


@pytest.fixture
def general_provider():
    """General provider mock that finds nothing by default."""
    provider = MagicMock(spec=MetadataProvider)
    provider.name = "TMDB"
    provider.fetch_movie.return_value = None
    provider.fetch_series.return_value = None
    provider.fetch_anime.return_value = None
    provider.display_title.return_value = None
    return provider


@pytest.fixture
def anime_provider():
    """Anime provider mock that finds nothing by default."""
    provider = MagicMock(spec=MetadataProvider)
    provider.name = "Jikan"
    provider.fetch_movie.return_value = None
    provider.fetch_series.return_value = None
    provider.fetch_anime.return_value = None
    provider.display_title.return_value = None
    return provider


@pytest.fixture
def movie_metadata():
    """Provider metadata for a movie."""
    return ResolvedMetadata(
        title="Anaconda",
        media_type=MediaType.MOVIE,
        year=1997,
        synopsis="A documentary crew is taken hostage.",
        cast="Jennifer Lopez (Terri Flores), Director: Luis Llosa",
        content_rating="16",
        rating=49,
        poster_url="https://image.tmdb.org/t/p/w500/anaconda.jpg",
    )


@pytest.fixture
def episode_metadata():
    """Provider metadata for a series episode."""
    return ResolvedMetadata(
        title="Show Name",
        media_type=MediaType.SERIES,
        year=2015,
        synopsis="A show about names.",
        season=1,
        episode=2,
        episode_title="The Second One",
    )


@pytest.fixture
def mock_tmdb_response():
    """Mock TMDB movie search response."""
    return {
        "total_results": 1,
        "results": [{
            "id": 9360,
            "title": "Anaconda",
            "original_title": "Anaconda",
            "release_date": "1997-04-11",
            "overview": "A documentary crew is taken hostage.",
        }]
    }


@pytest.fixture
def mock_tmdb_series_response():
    """Mock TMDB TV search response."""
    return {
        "total_results": 1,
        "results": [{
            "id": 1396,
            "name": "Breaking Bad",
            "original_name": "Breaking Bad",
            "first_air_date": "2008-01-20",
            "overview": "A high school chemistry teacher turned meth producer.",
        }]
    }
