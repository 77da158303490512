"""Metadata provider contract shared by the TMDb and Jikan clients."""

from typing import Any, Callable, Dict, List, Optional

import requests
from loguru import logger
from rapidfuzz import fuzz

from stasher.api.exceptions import APIConnectionError, APIResponseError
from stasher.config.settings import (
    CONTENT_RATING_MAP,
    DEFAULT_CONTENT_RATING,
    REQUEST_TIMEOUT_SECONDS,
    USER_AGENT,
)
from stasher.models.media import MediaType, ResolvedMetadata


class MetadataProvider:
    """
    Base class for metadata providers.

    Every lookup returns None when the provider has no answer, and raises
    an APIError subclass on transport failure. Subclasses override the
    lookups they support.
    """

    name = "provider"

    def fetch_movie(self, title: str, year: Optional[int] = None) -> Optional[ResolvedMetadata]:
        """Look up a movie."""
        return None

    def fetch_series(
        self,
        title: str,
        season: Optional[int] = None,
        episode: Optional[int] = None
    ) -> Optional[ResolvedMetadata]:
        """Look up a TV series, or one of its episodes."""
        return None

    def fetch_anime(
        self,
        title: str,
        season: Optional[int] = None,
        episode: Optional[int] = None
    ) -> Optional[ResolvedMetadata]:
        """Look up an anime, or one of its episodes."""
        return None

    def display_title(
        self,
        title: str,
        media_type: MediaType,
        year: Optional[int] = None
    ) -> Optional[str]:
        """Look up only the canonical title of a work."""
        return None

    def _request_json(self, url: str) -> Dict[str, Any]:
        """
        Perform a GET request and decode the JSON body.

        Args:
            url: Absolute URL, query string included.

        Returns:
            Decoded JSON object.

        Raises:
            APIConnectionError: On network failure or timeout.
            APIResponseError: On non-200 status or invalid JSON.
        """
        try:
            response = requests.get(
                url,
                headers={"User-Agent": USER_AGENT},
                timeout=REQUEST_TIMEOUT_SECONDS
            )
        except requests.RequestException as e:
            raise APIConnectionError(f"{self.name} request failed: {e}") from e

        if response.status_code != 200:
            raise APIResponseError(
                f"{self.name} returned HTTP {response.status_code}",
                status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise APIResponseError(f"{self.name} returned invalid JSON: {e}") from e


def localize_content_rating(rating: Optional[str]) -> str:
    """
    Convert a US or MyAnimeList age rating to the local classification.

    Args:
        rating: Rating such as "PG-13", "TV-MA" or "R - 17+ (violence)".

    Returns:
        Localized rating, DEFAULT_CONTENT_RATING when unknown.

    Examples:
        >>> localize_content_rating("PG-13")
        '13'
        >>> localize_content_rating("R+ - Mild Nudity")
        '18'
    """
    if not rating or not rating.strip():
        return DEFAULT_CONTENT_RATING

    code = rating.split(" - ")[0].strip().upper()
    localized = CONTENT_RATING_MAP.get(code)
    if localized is None:
        logger.debug(f"Unknown content rating '{rating}', using {DEFAULT_CONTENT_RATING}")
        return DEFAULT_CONTENT_RATING
    return localized


def score_to_rating(vote_average: Any) -> Optional[int]:
    """Convert a 0-10 average score to a 0-100 rating."""
    if not isinstance(vote_average, (int, float)) or vote_average <= 0:
        return None
    return int(round(vote_average * 10))


def best_fuzzy_match(
    query: str,
    candidates: List[Dict[str, Any]],
    titles_of: Callable[[Dict[str, Any]], List[str]]
) -> Optional[Dict[str, Any]]:
    """
    Pick the candidate whose title is closest to the query.

    Args:
        query: Title searched for.
        candidates: Provider search results.
        titles_of: Returns the titles of a candidate to compare against.

    Returns:
        Best scoring candidate (first one on ties), or None when empty.
    """
    best_score = -1.0
    best_candidate = None
    query_lower = query.lower()

    for candidate in candidates:
        titles = [t for t in titles_of(candidate) if isinstance(t, str) and t]
        score = max((fuzz.ratio(query_lower, t.lower()) for t in titles), default=0.0)
        if score > best_score:
            best_score = score
            best_candidate = candidate

    return best_candidate
