"""Per-run state shared by the preview builder and the executor."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Set, Tuple

from stasher.classification.text_processing import normalize_title_key
from stasher.models.media import MediaType, ParsedInfo, ResolvedMetadata

DedupeKey = Tuple[str, Optional[int], Optional[int]]


@dataclass
class ResolutionState:
    """
    Dedupe bookkeeping for one preview or organize run.

    A fresh instance is created per run, so repeated runs stay independent.

    Attributes:
        processed_episodes: (title, season, episode) keys already resolved.
        processed_movies: Movie titles already resolved.
        resolved: Metadata of the first file for each dedupe key.
        seen_extras_folders: Folders that already received a sidecar pair.
    """

    processed_episodes: Set[DedupeKey] = field(default_factory=set)
    processed_movies: Set[str] = field(default_factory=set)
    resolved: Dict[DedupeKey, ResolvedMetadata] = field(default_factory=dict)
    seen_extras_folders: Set[Path] = field(default_factory=set)

    @staticmethod
    def dedupe_key(parsed: ParsedInfo) -> DedupeKey:
        """Key shared by files holding the same episode or movie."""
        title = normalize_title_key(parsed.title)
        if parsed.media_type is MediaType.MOVIE:
            return title, None, None
        return title, parsed.season, parsed.episode

    def is_duplicate(self, parsed: ParsedInfo) -> bool:
        """Check if metadata work for this file was already done."""
        key = self.dedupe_key(parsed)
        if parsed.media_type is MediaType.MOVIE:
            return key[0] in self.processed_movies
        return key in self.processed_episodes

    def mark_processed(self, parsed: ParsedInfo, metadata: ResolvedMetadata) -> None:
        """Remember the metadata resolved for this file's dedupe key."""
        key = self.dedupe_key(parsed)
        if parsed.media_type is MediaType.MOVIE:
            self.processed_movies.add(key[0])
        else:
            self.processed_episodes.add(key)
        self.resolved[key] = metadata

    def cached_metadata(self, parsed: ParsedInfo) -> Optional[ResolvedMetadata]:
        """Metadata resolved earlier in this run for the same key."""
        return self.resolved.get(self.dedupe_key(parsed))

    def claim_extras_folder(self, folder: Path) -> bool:
        """
        Register a sidecar folder.

        Returns:
            True the first time a folder is seen, False afterwards.
        """
        if folder in self.seen_extras_folders:
            return False
        self.seen_extras_folders.add(folder)
        return True

    def __len__(self) -> int:
        """Return the number of distinct resolved items."""
        return len(self.resolved)
