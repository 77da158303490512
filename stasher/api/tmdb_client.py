"""TMDB (The Movie Database) API client."""

import urllib.parse
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from loguru import logger

from stasher.api.base import (
    MetadataProvider,
    best_fuzzy_match,
    localize_content_rating,
    score_to_rating,
)
from stasher.api.exceptions import APIError
from stasher.config.settings import CAST_LIMIT, DEFAULT_CONTENT_RATING, TMDB_IMAGE_BASE_URL
from stasher.models.media import MediaType, ResolvedMetadata


def year_from_date(value: Any) -> Optional[int]:
    """Extract the year of a "YYYY-MM-DD" date string."""
    parsed = parse_date(value)
    return parsed.year if parsed else None


def parse_date(value: Any) -> Optional[date]:
    """Parse a "YYYY-MM-DD" date string, None when missing or invalid."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.strptime(value.strip()[:10], "%Y-%m-%d").date()
    except ValueError:
        return None


def poster_url(poster_path: Optional[str]) -> Optional[str]:
    """Build the absolute poster URL of a TMDB poster path."""
    if not poster_path:
        return None
    return f"{TMDB_IMAGE_BASE_URL}{poster_path}"


class TmdbClient(MetadataProvider):
    """
    Client for The Movie Database (TMDB) API.

    General-purpose provider: movies, TV series and their episodes.
    Multiple search results are narrowed down without user interaction:
    a single result wins, then a release-year match, then the closest title.

    Attributes:
        api_key: TMDB API key for authentication.
        language: Language code for results.
    """

    name = "TMDB"
    BASE_URL = 'https://api.themoviedb.org/3'
    SEARCH_MOVIE_ENDPOINT = '/search/movie'
    SEARCH_TV_ENDPOINT = '/search/tv'
    DEFAULT_LANGUAGE = 'en-US'

    def __init__(
        self,
        api_key: Optional[str] = None,
        language: str = DEFAULT_LANGUAGE
    ) -> None:
        """
        Initialize TMDB client.

        Args:
            api_key: TMDB API key. If None, lookups return None.
            language: Language code for results (default: en-US).
        """
        self.api_key = api_key
        self.language = language

    def build_url(self, endpoint: str, **params: Any) -> str:
        """
        Build an API URL.

        Args:
            endpoint: Endpoint path, e.g. '/search/movie'.
            **params: Extra query parameters; None values are left out.

        Returns:
            Full URL for the API request.
        """
        query = {'api_key': self.api_key, 'language': self.language}
        query.update({k: v for k, v in params.items() if v is not None})
        return f'{self.BASE_URL}{endpoint}?{urllib.parse.urlencode(query)}'

    def _has_key(self) -> bool:
        if not self.api_key:
            logger.warning("TMDB API key missing")
            return False
        return True

    def search(
        self,
        query: str,
        media_type: MediaType,
        year: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Search movies or TV shows.

        Args:
            query: Title to search for.
            media_type: MOVIE searches movies, SERIES and ANIME search TV.
            year: Optional release (or first air) year filter.

        Returns:
            List of raw search results.

        Raises:
            APIError: On transport failure.
        """
        if media_type is MediaType.MOVIE:
            url = self.build_url(self.SEARCH_MOVIE_ENDPOINT, query=query, year=year)
        elif media_type.is_episodic:
            url = self.build_url(self.SEARCH_TV_ENDPOINT, query=query, first_air_date_year=year)
        else:
            raise ValueError(f"Unknown media type: {media_type!r}")

        results = self._request_json(url).get('results') or []
        return [r for r in results if isinstance(r, dict)]

    @staticmethod
    def choose_candidate(
        query: str,
        results: List[Dict[str, Any]],
        year: Optional[int],
        title_field: str,
        date_field: str
    ) -> Optional[Dict[str, Any]]:
        """
        Select one search result.

        Args:
            query: Title searched for.
            results: Raw search results.
            year: Year parsed from the filename, if any.
            title_field: 'title' for movies, 'name' for TV.
            date_field: 'release_date' for movies, 'first_air_date' for TV.

        Returns:
            Chosen result, or None when there are no results.
        """
        if not results:
            return None
        if len(results) == 1:
            return results[0]

        if year is not None:
            same_year = [r for r in results if year_from_date(r.get(date_field)) == year]
            if same_year:
                results = same_year
                if len(results) == 1:
                    return results[0]

        return best_fuzzy_match(
            query,
            results,
            lambda r: [r.get(title_field), r.get('original_' + title_field)]
        )

    def get_cast(self, kind: str, tmdb_id: int) -> str:
        """
        Fetch main cast and director as one line.

        Args:
            kind: 'movie' or 'tv'.
            tmdb_id: TMDB identifier.

        Returns:
            "Actor (Character), ..., Director: Name", empty on failure.
        """
        try:
            data = self._request_json(self.build_url(f'/{kind}/{tmdb_id}/credits'))
        except APIError as e:
            logger.warning(f"Failed to fetch cast for {kind}/{tmdb_id}: {e}")
            return ""

        entries = []
        for member in (data.get('cast') or [])[:CAST_LIMIT]:
            actor = member.get('name')
            character = member.get('character')
            if actor and character:
                entries.append(f"{actor} ({character})")
            elif actor:
                entries.append(actor)

        director = next(
            (c.get('name') for c in data.get('crew') or [] if 'Director' in (c.get('job') or '')),
            None
        )
        if director:
            entries.append(f"Director: {director}")

        return ", ".join(entries)

    def get_content_rating(self, tmdb_id: int, is_movie: bool) -> str:
        """
        Fetch the US certification and localize it.

        Args:
            tmdb_id: TMDB identifier.
            is_movie: True for movies (release_dates), False for TV.

        Returns:
            Localized rating, DEFAULT_CONTENT_RATING on failure.
        """
        endpoint = f'/movie/{tmdb_id}/release_dates' if is_movie else f'/tv/{tmdb_id}/content_ratings'
        try:
            data = self._request_json(self.build_url(endpoint))
        except APIError as e:
            logger.warning(f"Failed to fetch content rating: {e}")
            return DEFAULT_CONTENT_RATING

        us_entry = next(
            (r for r in data.get('results') or [] if r.get('iso_3166_1') == 'US'),
            None
        )
        us_rating = None
        if us_entry and is_movie:
            releases = us_entry.get('release_dates') or []
            us_rating = releases[0].get('certification') if releases else None
        elif us_entry:
            us_rating = us_entry.get('rating')

        return localize_content_rating(us_rating)

    def fetch_movie(self, title: str, year: Optional[int] = None) -> Optional[ResolvedMetadata]:
        """
        Look up a movie.

        Args:
            title: Title parsed from the filename.
            year: Release year parsed from the filename.

        Returns:
            ResolvedMetadata, or None when TMDB has no match.

        Raises:
            APIError: When the search or details request fails.
        """
        if not self._has_key():
            return None

        logger.info(f"Searching movie '{title}' on TMDB")
        candidate = self.choose_candidate(
            title, self.search(title, MediaType.MOVIE), year, 'title', 'release_date'
        )
        if candidate is None:
            logger.warning(f"No TMDB results for movie '{title}'")
            return None

        movie_id = candidate.get('id')
        details = self._request_json(self.build_url(f'/movie/{movie_id}'))

        return ResolvedMetadata(
            title=details.get('title') or title,
            media_type=MediaType.MOVIE,
            year=year_from_date(details.get('release_date')),
            synopsis=details.get('overview') or None,
            cast=self.get_cast('movie', movie_id) or None,
            content_rating=self.get_content_rating(movie_id, is_movie=True),
            rating=score_to_rating(details.get('vote_average')),
            poster_url=poster_url(details.get('poster_path')),
        )

    def find_tv_id(self, title: str) -> Optional[int]:
        """
        Find the TMDB identifier of a TV show.

        Raises:
            APIError: When the search request fails.
        """
        candidate = self.choose_candidate(
            title, self.search(title, MediaType.SERIES), None, 'name', 'first_air_date'
        )
        if candidate is None:
            logger.warning(f"No TMDB results for series '{title}'")
            return None
        return candidate.get('id')

    def find_episode_title(self, tv_id: int, season: int, episode: int) -> Optional[str]:
        """
        Find the title of an aired episode.

        The season listing is tried first; episodes without title, without
        air date or airing in the future are ignored. The single-episode
        endpoint is used only when the season listing cannot be fetched.

        Args:
            tv_id: TMDB show identifier.
            season: Season number.
            episode: Episode number.

        Returns:
            Episode title, or None when the episode is unknown or not aired.
        """
        try:
            season_data = self._request_json(self.build_url(f'/tv/{tv_id}/season/{season}'))
        except APIError as e:
            logger.warning(f"Season listing failed, fetching episode directly: {e}")
            try:
                episode_data = self._request_json(
                    self.build_url(f'/tv/{tv_id}/season/{season}/episode/{episode}')
                )
            except APIError as e:
                logger.warning(f"Episode fetch failed: {e}")
                return None
            return (episode_data.get('name') or '').strip() or None

        today = date.today()
        for entry in season_data.get('episodes') or []:
            if entry.get('episode_number') != episode:
                continue
            name = (entry.get('name') or '').strip()
            air_date = parse_date(entry.get('air_date'))
            if not name or air_date is None:
                logger.debug(f"Skipping S{season}E{episode}: missing title or air date")
                return None
            if air_date > today:
                logger.debug(f"Skipping S{season}E{episode}: airs on {air_date}")
                return None
            return name
        return None

    def fetch_series(
        self,
        title: str,
        season: Optional[int] = None,
        episode: Optional[int] = None
    ) -> Optional[ResolvedMetadata]:
        """
        Look up a TV series, and its episode when season and episode are given.

        Args:
            title: Title parsed from the filename.
            season: Season number.
            episode: Episode number.

        Returns:
            ResolvedMetadata, or None when the show or aired episode is unknown.

        Raises:
            APIError: When the search or details request fails.
        """
        if not self._has_key():
            return None

        logger.info(f"Searching series '{title}' on TMDB")
        tv_id = self.find_tv_id(title)
        if tv_id is None:
            return None

        details = self._request_json(self.build_url(f'/tv/{tv_id}'))

        episode_title = None
        if season is not None and episode is not None:
            episode_title = self.find_episode_title(tv_id, season, episode)
            if episode_title is None:
                logger.warning(f"No aired episode S{season:02d}E{episode:02d} for '{title}' on TMDB")
                return None

        return ResolvedMetadata(
            title=details.get('name') or title,
            media_type=MediaType.SERIES,
            year=year_from_date(details.get('first_air_date')),
            synopsis=details.get('overview') or None,
            cast=self.get_cast('tv', tv_id) or None,
            content_rating=self.get_content_rating(tv_id, is_movie=False),
            rating=score_to_rating(details.get('vote_average')),
            poster_url=poster_url(details.get('poster_path')),
            season=season,
            episode=episode,
            episode_title=episode_title,
        )

    def display_title(
        self,
        title: str,
        media_type: MediaType,
        year: Optional[int] = None
    ) -> Optional[str]:
        """
        Look up the canonical title of a movie or show.

        Returns:
            Title of the first search result, or None.

        Raises:
            APIError: When the search request fails.
        """
        if not self._has_key():
            return None

        results = self.search(title, media_type, year)
        if not results:
            return None
        field = 'title' if media_type is MediaType.MOVIE else 'name'
        return results[0].get(field) or None
