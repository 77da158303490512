"""Metadata resolution: cache, provider fallback chain, minimal records."""

from dataclasses import replace
from typing import Callable, List, Optional, Tuple

from loguru import logger

from stasher.api.base import MetadataProvider
from stasher.api.cache_db import MetadataCache
from stasher.models.media import MediaType, NormalizedKey, ParsedInfo, ResolvedMetadata
from stasher.models.state import ResolutionState
from stasher.pipeline.exceptions import UnparseableFilenameError

ProviderCall = Tuple[str, Callable[[], Optional[ResolvedMetadata]]]


def _is_title(value: object) -> bool:
    return isinstance(value, str) and bool(value.strip())


class DisplayTitleResolver:
    """
    Title-only lookup used when no provider returns full metadata.

    Anime titles are asked to the anime provider, everything else to the
    general provider. Failures are logged and give None.
    """

    def __init__(self, general: MetadataProvider, anime: MetadataProvider) -> None:
        self.general = general
        self.anime = anime

    def resolve(self, parsed: ParsedInfo, offline: bool = False) -> Optional[str]:
        """
        Look up the canonical title of a parsed file.

        Args:
            parsed: Parsed filename information.
            offline: No lookup is made when True.

        Returns:
            Provider title, or None when offline or nothing was found.
        """
        if offline or parsed.is_unparseable:
            return None

        if parsed.media_type is MediaType.ANIME:
            provider = self.anime
        elif parsed.media_type in (MediaType.MOVIE, MediaType.SERIES):
            provider = self.general
        else:
            raise ValueError(f"Unknown media type: {parsed.media_type!r}")

        try:
            title = provider.display_title(parsed.title, parsed.media_type, parsed.year)
        except Exception as e:
            logger.warning(f"{provider.name} title lookup failed for '{parsed.title}': {e}")
            return None

        if not _is_title(title):
            return None
        logger.debug(f"{provider.name} resolved title '{title}' for '{parsed.title}'")
        return title.strip()


class MetadataResolver:
    """
    Resolve parsed filenames into metadata.

    Order of resolution:
    1. Cache hit on the exact NormalizedKey.
    2. Offline: stop, nothing resolved.
    3. Provider chain for the media type, each step fault-isolated.
    4. Title-only lookup, producing a minimal record.

    Provider results and minimal records are written to the cache.

    Attributes:
        cache: Metadata cache, or None to run without one.
        general: General-purpose provider (movies and series).
        anime: Anime-specialized provider.
        title_resolver: Title-only lookup used as last resort.
    """

    def __init__(
        self,
        cache: Optional[MetadataCache],
        general: MetadataProvider,
        anime: MetadataProvider,
        title_resolver: Optional[DisplayTitleResolver] = None
    ) -> None:
        self.cache = cache
        self.general = general
        self.anime = anime
        self.title_resolver = title_resolver or DisplayTitleResolver(general, anime)

    def provider_chain(self, parsed: ParsedInfo) -> List[ProviderCall]:
        """
        List the provider calls to try for a parsed file, in order.

        Movies only ever use the general provider's movie lookup.

        Raises:
            ValueError: If the media type is unknown.
        """
        title, season, episode = parsed.title, parsed.season, parsed.episode
        general, anime = self.general, self.anime

        if parsed.media_type is MediaType.MOVIE:
            return [
                (f"{general.name} movie", lambda: general.fetch_movie(title, parsed.year)),
            ]
        if parsed.media_type is MediaType.SERIES:
            return [
                (f"{general.name} series", lambda: general.fetch_series(title, season, episode)),
                (f"{anime.name} anime", lambda: anime.fetch_anime(title, season, episode)),
            ]
        if parsed.media_type is MediaType.ANIME:
            return [
                (f"{anime.name} anime", lambda: anime.fetch_anime(title, season, episode)),
                (f"{general.name} series", lambda: general.fetch_series(title, season, episode)),
            ]
        raise ValueError(f"Unknown media type: {parsed.media_type!r}")

    def _cached(self, key: NormalizedKey) -> Optional[ResolvedMetadata]:
        if self.cache is None:
            return None
        return self.cache.get(key)

    def _store(self, key: NormalizedKey, metadata: ResolvedMetadata) -> None:
        """Write a record through to the cache unless a row appeared meanwhile."""
        if self.cache is None:
            return
        if self.cache.contains(key):
            logger.debug(f"Cache row already present for '{key.title}', not overwriting")
            return
        self.cache.put(key, metadata)

    def resolve(self, parsed: ParsedInfo, offline: bool = False) -> Optional[ResolvedMetadata]:
        """
        Resolve metadata for a parsed filename.

        Args:
            parsed: Parsed filename information.
            offline: Only the cache is consulted when True.

        Returns:
            ResolvedMetadata, or None when nothing could be resolved.

        Raises:
            UnparseableFilenameError: If the parsed title is empty.
        """
        if parsed.is_unparseable:
            raise UnparseableFilenameError("Empty title after parsing")

        key = NormalizedKey.from_parsed(parsed)

        cached = self._cached(key)
        if cached is not None:
            logger.debug(f"Cache hit for '{key.title}' ({key.media_type.value})")
            return replace(cached, media_type=parsed.media_type, lookup_key=key.title)

        if offline:
            logger.debug(f"Offline cache miss for '{key.title}'")
            return None

        for label, call in self.provider_chain(parsed):
            try:
                metadata = call()
            except Exception as e:
                logger.warning(f"{label} lookup failed for '{parsed.title}': {e}")
                continue

            if metadata is None:
                logger.warning(f"{label} lookup found nothing for '{parsed.title}'")
                continue

            metadata = replace(
                metadata,
                media_type=parsed.media_type,
                season=parsed.season,
                episode=parsed.episode,
                lookup_key=key.title,
            )
            self._store(key, metadata)
            logger.info(f"Resolved '{parsed.title}' as '{metadata.title}' via {label}")
            return metadata

        title = self.title_resolver.resolve(parsed)
        if title:
            metadata = ResolvedMetadata.minimal(parsed, title=title)
            self._store(key, metadata)
            logger.info(f"Only the title of '{parsed.title}' was resolved: '{title}'")
            return metadata

        logger.warning(f"No metadata resolved for '{parsed.title}'")
        return None

    def resolve_or_minimal(self, parsed: ParsedInfo, offline: bool = False) -> Optional[ResolvedMetadata]:
        """
        Resolve metadata, falling back to filename data when offline.

        Args:
            parsed: Parsed filename information.
            offline: Whether the run is offline.

        Returns:
            ResolvedMetadata; None only for online runs that resolved nothing.

        Raises:
            UnparseableFilenameError: If the parsed title is empty.
        """
        metadata = self.resolve(parsed, offline)
        if metadata is None and offline:
            return ResolvedMetadata.minimal(parsed)
        return metadata

    def resolve_once(
        self,
        parsed: ParsedInfo,
        state: ResolutionState,
        offline: bool = False
    ) -> Optional[ResolvedMetadata]:
        """
        Resolve metadata, reusing earlier results of the same run.

        Files sharing an episode key, or a movie title, are resolved once;
        later ones reuse the first file's metadata.

        Args:
            parsed: Parsed filename information.
            state: Per-run dedupe state.
            offline: Whether the run is offline.

        Returns:
            ResolvedMetadata, or None when nothing was resolved.

        Raises:
            UnparseableFilenameError: If the parsed title is empty.
        """
        if state.is_duplicate(parsed):
            logger.info(f"Already resolved '{parsed.title}' in this run, reusing metadata")
            return state.cached_metadata(parsed)

        metadata = self.resolve_or_minimal(parsed, offline)
        if metadata is not None:
            state.mark_processed(parsed, metadata)
        return metadata
