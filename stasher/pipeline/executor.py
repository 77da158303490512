"""Organize run: moves files into the library and writes their sidecars."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from loguru import logger
from tqdm import tqdm

from stasher.classification.filename_parser import parse
from stasher.config.settings import POSTER_FILENAME, SYNOPSIS_FILENAME
from stasher.filesystem.file_ops import (
    download_poster,
    format_synopsis,
    move_file_if_absent,
    write_sidecar_if_absent,
)
from stasher.filesystem.paths import derive_path
from stasher.models.media import DestinationPlan, MoveHistoryRecord, ResolvedMetadata
from stasher.models.preview import PreviewTree
from stasher.models.state import ResolutionState
from stasher.pipeline.exceptions import (
    DestinationConflictError,
    MoveFailedError,
    NoMetadataResolvedError,
    OrganizeError,
    UnparseableFilenameError,
)
from stasher.pipeline.resolver import MetadataResolver
from stasher.utils.history import HistoryStore

ProgressCallback = Callable[[int, int], None]


class OutcomeStatus(Enum):
    """What happened to one file."""

    MOVED = "moved"
    SKIPPED = "skipped"
    CONFLICT = "conflict"
    FAILED = "failed"


@dataclass
class FileOutcome:
    """Result of organizing one file."""

    source: Path
    status: OutcomeStatus
    destination: Optional[Path] = None
    error: Optional[OrganizeError] = None

    @property
    def message(self) -> str:
        """Short description for reports."""
        if self.error is not None:
            return str(self.error)
        return str(self.destination) if self.destination else ""


@dataclass
class OrganizeReport:
    """Outcomes of an organize run, in processing order."""

    outcomes: List[FileOutcome] = field(default_factory=list)

    def add(self, outcome: FileOutcome) -> None:
        """Append an outcome."""
        self.outcomes.append(outcome)

    def _count(self, status: OutcomeStatus) -> int:
        return sum(1 for o in self.outcomes if o.status is status)

    @property
    def moved(self) -> int:
        """Number of files moved."""
        return self._count(OutcomeStatus.MOVED)

    @property
    def skipped(self) -> int:
        """Number of files skipped (unparseable or unresolved)."""
        return self._count(OutcomeStatus.SKIPPED)

    @property
    def conflicts(self) -> int:
        """Number of files whose destination already existed."""
        return self._count(OutcomeStatus.CONFLICT)

    @property
    def failed(self) -> int:
        """Number of files that could not be moved."""
        return self._count(OutcomeStatus.FAILED)

    @property
    def total(self) -> int:
        """Number of files processed."""
        return len(self.outcomes)


def _status_of(error: OrganizeError) -> OutcomeStatus:
    if isinstance(error, DestinationConflictError):
        return OutcomeStatus.CONFLICT
    if isinstance(error, MoveFailedError):
        return OutcomeStatus.FAILED
    return OutcomeStatus.SKIPPED


class OrganizeExecutor:
    """
    Move files into the library, one at a time.

    Every per-file error is contained: it is logged, recorded in the
    report, and the run goes on with the next file. Nothing is rolled back.

    Attributes:
        resolver: Metadata resolver.
        history: Move history sink, or None.
        download_posters: Whether poster images are downloaded.
    """

    def __init__(
        self,
        resolver: MetadataResolver,
        history: Optional[HistoryStore] = None,
        download_posters: bool = True
    ) -> None:
        self.resolver = resolver
        self.history = history
        self.download_posters = download_posters

    def organize(
        self,
        files: Iterable[Path],
        destination_root: Path,
        offline: bool = False,
        progress: Optional[ProgressCallback] = None,
        state: Optional[ResolutionState] = None
    ) -> OrganizeReport:
        """
        Organize a list of files.

        Args:
            files: Source media files.
            destination_root: Library root folder.
            offline: Resolve from the cache and filenames only.
            progress: Called with (processed, total) after each file.
            state: Dedupe state; a fresh one is used when None.

        Returns:
            OrganizeReport with one outcome per file.
        """
        files = list(files)
        total = len(files)
        state = state if state is not None else ResolutionState()
        report = OrganizeReport()

        with tqdm(files, desc="Organizing", unit="file") as pbar:
            for processed, file in enumerate(pbar, start=1):
                pbar.set_postfix_str(f"{file.name[:30]}...")
                try:
                    destination = self.organize_file(file, destination_root, offline, state)
                    report.add(FileOutcome(file, OutcomeStatus.MOVED, destination))
                except OrganizeError as e:
                    logger.warning(f"{file.name}: {e}")
                    report.add(FileOutcome(file, _status_of(e), error=e))

                if progress is not None:
                    progress(processed, total)

        logger.info(
            f"Organize finished: {report.moved} moved, {report.skipped} skipped, "
            f"{report.conflicts} conflicts, {report.failed} failed"
        )
        return report

    def organize_selection(
        self,
        tree: PreviewTree,
        destination_root: Path,
        offline: bool = False,
        progress: Optional[ProgressCallback] = None
    ) -> OrganizeReport:
        """
        Organize the files left selected in a preview tree.

        Args:
            tree: Preview tree, possibly with unchecked nodes.
            destination_root: Library root folder.
            offline: Resolve from the cache and filenames only.
            progress: Called with (processed, total) after each file.

        Returns:
            OrganizeReport for the selected files.
        """
        files = [node.source_path for node in tree.selected_files() if node.source_path]
        return self.organize(files, destination_root, offline, progress)

    def organize_file(
        self,
        file: Path,
        destination_root: Path,
        offline: bool,
        state: ResolutionState
    ) -> Path:
        """
        Organize one file.

        Args:
            file: Source media file.
            destination_root: Library root folder.
            offline: Whether the run is offline.
            state: Dedupe state of the run.

        Returns:
            Destination path of the moved file.

        Raises:
            UnparseableFilenameError: No title in the filename.
            NoMetadataResolvedError: Nothing resolved (online runs only).
            DestinationConflictError: Destination already exists.
            MoveFailedError: The move itself failed.
        """
        parsed = parse(file)
        try:
            metadata = self.resolver.resolve_once(parsed, state, offline)
        except UnparseableFilenameError as e:
            raise UnparseableFilenameError(f"No title in '{file.name}'", source=file) from e

        if metadata is None:
            raise NoMetadataResolvedError(f"No metadata for '{parsed.title}'", source=file)

        try:
            plan = derive_path(file, metadata, offline, destination_root=destination_root)
        except ValueError as e:
            raise UnparseableFilenameError(str(e), source=file) from e

        destination = plan.destination

        if destination.exists():
            raise DestinationConflictError(f"Destination exists: {destination}", source=file)

        if not move_file_if_absent(file, destination):
            raise MoveFailedError(f"Could not move to {destination}", source=file)

        if state.claim_extras_folder(plan.sidecar_folder):
            self.write_sidecars(plan, metadata)

        self.record_history(file, plan)
        return destination

    def write_sidecars(self, plan: DestinationPlan, metadata: ResolvedMetadata) -> None:
        """
        Write synopsis.txt and poster.jpg in the sidecar folder, if absent.

        Records without details (offline filename-only ones) get no synopsis.
        """
        if metadata.has_details:
            write_sidecar_if_absent(plan.sidecar_folder / SYNOPSIS_FILENAME, format_synopsis(metadata))
        else:
            logger.debug(f"No details for '{metadata.title}', {SYNOPSIS_FILENAME} not written")
        if self.download_posters and metadata.poster_url:
            download_poster(metadata.poster_url, plan.sidecar_folder / POSTER_FILENAME)

    def record_history(self, file: Path, plan: DestinationPlan) -> None:
        """Record a completed move; a failure is only logged."""
        if self.history is None:
            return

        record = MoveHistoryRecord(
            original_file_name=file.name,
            new_file_name=plan.file_name,
            source_path=str(file),
            destination_path=str(plan.destination),
            moved_at=datetime.now(),
        )
        if not self.history.record(record):
            logger.warning(f"Move of '{file.name}' not recorded in history")
