"""Dry run: the planned library as a preview tree, without touching files."""

from pathlib import Path
from typing import Optional

from loguru import logger

from stasher.classification.filename_parser import parse
from stasher.config.settings import (
    POSTER_FILENAME,
    PREVIEW_ROOT_NAME,
    PREVIEW_SELECTOR_DEPTH,
    SYNOPSIS_FILENAME,
)
from stasher.filesystem.discovery import get_files
from stasher.filesystem.paths import derive_path
from stasher.models.preview import PreviewNode, PreviewTree
from stasher.models.state import ResolutionState
from stasher.pipeline.exceptions import UnparseableFilenameError
from stasher.pipeline.resolver import MetadataResolver


class DryRunTreeBuilder:
    """
    Build the preview tree of an organize run.

    Runs the same parse, resolve and naming chain as the real run, under a
    PREVIEW_ROOT_NAME root instead of the destination folder. The only file
    system access is the read-only scan of the source folder.

    Attributes:
        resolver: Metadata resolver shared with the real run.
        selector_depth: Depth of the title folders offering a selector.
    """

    def __init__(
        self,
        resolver: MetadataResolver,
        selector_depth: int = PREVIEW_SELECTOR_DEPTH
    ) -> None:
        self.resolver = resolver
        self.selector_depth = selector_depth
        self.root = Path(PREVIEW_ROOT_NAME)

    def build(
        self,
        source_folder: Path,
        offline: bool = False,
        state: Optional[ResolutionState] = None
    ) -> PreviewTree:
        """
        Build the preview of organizing a folder.

        Args:
            source_folder: Folder scanned recursively (sidecars skipped).
            offline: Resolve from the cache and filenames only.
            state: Dedupe state; a fresh one is used when None.

        Returns:
            PreviewTree rooted at PREVIEW_ROOT_NAME.
        """
        state = state if state is not None else ResolutionState()
        tree = PreviewTree()
        tree.ensure_folders(self.root, (self.root.name,), self.selector_depth)

        skipped = 0
        for file in get_files(source_folder):
            if not self.add_file(tree, file, offline, state):
                skipped += 1

        planned = len(tree.files())
        logger.info(f"Preview: {planned} files planned, {skipped} skipped")
        return tree

    def add_file(
        self,
        tree: PreviewTree,
        file: Path,
        offline: bool,
        state: ResolutionState
    ) -> bool:
        """
        Plan one file into the tree.

        Args:
            tree: Tree being built.
            file: Source media file.
            offline: Whether the run is offline.
            state: Dedupe state of the run.

        Returns:
            True if the file was added, False if it was skipped.
        """
        parsed = parse(file)
        try:
            metadata = self.resolver.resolve_once(parsed, state, offline)
        except UnparseableFilenameError:
            logger.warning(f"Skipping '{file.name}': no title in filename")
            return False

        if metadata is None:
            logger.warning(f"Skipping '{file.name}': no metadata resolved")
            return False

        try:
            plan = derive_path(file, metadata, offline, destination_root=self.root)
        except ValueError as e:
            logger.warning(f"Skipping '{file.name}': {e}")
            return False

        folder = tree.ensure_folders(self.root, plan.target_folder.parts, self.selector_depth)
        index = tree.add_node(folder, PreviewNode(
            display_name=plan.file_name,
            is_file=True,
            destination_path=plan.destination,
            source_path=file,
            original_name=file.name,
            renamed_name=plan.file_name,
        ))
        if tree[index].source_path != file:
            logger.warning(
                f"'{file.name}' and '{tree[index].original_name}' both map to {plan.destination}"
            )

        if state.claim_extras_folder(plan.sidecar_folder):
            extras = tree.ensure_folders(self.root, plan.sidecar_folder.parts, self.selector_depth)
            for name in (SYNOPSIS_FILENAME, POSTER_FILENAME):
                tree.add_node(extras, PreviewNode(
                    display_name=name,
                    is_file=True,
                    destination_path=plan.sidecar_folder / name,
                ))
        return True
