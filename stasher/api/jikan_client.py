"""Jikan (unofficial MyAnimeList) API client."""

import time
import urllib.parse
from typing import Any, Dict, List, Optional

from loguru import logger

from stasher.api.base import (
    MetadataProvider,
    best_fuzzy_match,
    localize_content_rating,
    score_to_rating,
)
from stasher.config.settings import (
    JIKAN_MAX_EPISODE_PAGES,
    JIKAN_REQUEST_DELAY_SECONDS,
    JIKAN_SEARCH_LIMIT,
)
from stasher.models.media import MediaType, ResolvedMetadata


def anime_titles(anime: Dict[str, Any]) -> List[str]:
    """Return every known title of a Jikan anime entry."""
    titles = [anime.get('title'), anime.get('title_english'), anime.get('title_japanese')]
    titles.extend(t.get('title') for t in anime.get('titles') or [] if isinstance(t, dict))
    return [t for t in titles if isinstance(t, str) and t]


def preferred_title(anime: Dict[str, Any], fallback: str) -> str:
    """
    Pick the display title of an anime.

    The English entry of 'titles' wins, then 'title_english', then 'title'.
    """
    english = next(
        (t.get('title') for t in anime.get('titles') or []
         if isinstance(t, dict) and t.get('type') == 'English' and t.get('title')),
        None
    )
    return english or anime.get('title_english') or anime.get('title') or fallback


class JikanClient(MetadataProvider):
    """
    Client for the Jikan API (MyAnimeList data).

    Anime-specialized provider. Jikan rate-limits aggressively, so episode
    pages are fetched one at a time with a short delay in between.
    """

    name = "Jikan"
    BASE_URL = 'https://api.jikan.moe/v4'

    def __init__(
        self,
        request_delay: float = JIKAN_REQUEST_DELAY_SECONDS,
        max_episode_pages: int = JIKAN_MAX_EPISODE_PAGES
    ) -> None:
        """
        Initialize Jikan client.

        Args:
            request_delay: Seconds to wait between episode page requests.
            max_episode_pages: Maximum number of episode pages to read.
        """
        self.request_delay = request_delay
        self.max_episode_pages = max_episode_pages

    def search_anime(self, title: str) -> Optional[Dict[str, Any]]:
        """
        Search an anime and pick the best match.

        An exact (case-insensitive) match on the main, English or Japanese
        title wins; otherwise the closest title is used.

        Args:
            title: Title to search for.

        Returns:
            Raw anime entry, or None when nothing was found.

        Raises:
            APIError: When the search request fails.
        """
        query = urllib.parse.urlencode({'q': title, 'limit': JIKAN_SEARCH_LIMIT})
        results = self._request_json(f'{self.BASE_URL}/anime?{query}').get('data') or []
        results = [r for r in results if isinstance(r, dict)]
        if not results:
            logger.warning(f"No Jikan results for '{title}'")
            return None

        wanted = title.lower()
        for anime in results:
            exact = (anime.get('title'), anime.get('title_english'), anime.get('title_japanese'))
            if any(isinstance(t, str) and t.lower() == wanted for t in exact):
                return anime

        return best_fuzzy_match(title, results, anime_titles)

    def find_season_id(self, mal_id: int, season: int) -> Optional[int]:
        """
        Find the MyAnimeList id of a later season through sequel relations.

        Args:
            mal_id: Id of the first season.
            season: Season number wanted (> 1).

        Returns:
            Id of the sequel entry naming "Season <N>", or None.
        """
        data = self._request_json(f'{self.BASE_URL}/anime/{mal_id}/relations').get('data') or []
        marker = f"Season {season}"
        for relation in data:
            if (relation.get('relation') or '').lower() != 'sequel':
                continue
            for entry in relation.get('entry') or []:
                if marker in (entry.get('name') or ''):
                    return entry.get('mal_id')
        return None

    def find_episode_title(self, mal_id: int, episode: int) -> Optional[str]:
        """
        Walk episode pages until an episode is found.

        Stops on the requested episode, on the last page, or after
        max_episode_pages pages.

        Args:
            mal_id: Anime id.
            episode: Episode number.

        Returns:
            Episode title, or None.
        """
        for page in range(1, self.max_episode_pages + 1):
            if page > 1:
                time.sleep(self.request_delay)
            data = self._request_json(f'{self.BASE_URL}/anime/{mal_id}/episodes?page={page}')

            for entry in data.get('data') or []:
                if entry.get('mal_id') == episode:
                    return (entry.get('title') or '').strip() or None

            if not (data.get('pagination') or {}).get('has_next_page'):
                break

        logger.debug(f"Episode {episode} not found for anime {mal_id}")
        return None

    def fetch_anime(
        self,
        title: str,
        season: Optional[int] = None,
        episode: Optional[int] = None
    ) -> Optional[ResolvedMetadata]:
        """
        Look up an anime, and its episode title when an episode is given.

        Args:
            title: Title parsed from the filename.
            season: Season number; seasons after the first are followed
                through sequel relations.
            episode: Episode number.

        Returns:
            ResolvedMetadata (without episode title when the episode is
            unknown), or None when no anime or season matches.

        Raises:
            APIError: When a request fails.
        """
        logger.info(f"Searching anime '{title}' on Jikan")
        anime = self.search_anime(title)
        if anime is None:
            return None

        mal_id = anime.get('mal_id')
        if season is not None and season > 1:
            mal_id = self.find_season_id(mal_id, season)
            if mal_id is None:
                logger.warning(f"Season {season} of '{title}' not found in Jikan relations")
                return None

        episode_title = None
        if episode is not None:
            episode_title = self.find_episode_title(mal_id, episode)

        poster = ((anime.get('images') or {}).get('jpg') or {}).get('image_url')

        return ResolvedMetadata(
            title=preferred_title(anime, title),
            media_type=MediaType.ANIME,
            year=anime.get('year') if isinstance(anime.get('year'), int) else None,
            synopsis=anime.get('synopsis') or None,
            content_rating=localize_content_rating(anime.get('rating')),
            rating=score_to_rating(anime.get('score')),
            poster_url=poster or None,
            season=season,
            episode=episode,
            episode_title=episode_title,
        )

    def fetch_series(
        self,
        title: str,
        season: Optional[int] = None,
        episode: Optional[int] = None
    ) -> Optional[ResolvedMetadata]:
        """Series lookups on Jikan are anime lookups."""
        return self.fetch_anime(title, season, episode)

    def display_title(
        self,
        title: str,
        media_type: MediaType,
        year: Optional[int] = None
    ) -> Optional[str]:
        """
        Look up the preferred title of an anime.

        Raises:
            APIError: When the search request fails.
        """
        anime = self.search_anime(title)
        if anime is None:
            return None
        return preferred_title(anime, title)
