"""Command-line interface argument parsing."""

import argparse
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from loguru import logger

from stasher.config.settings import DEFAULT_DATABASE_PATH


@dataclass
class CLIArgs:
    """
    Parsed command-line arguments.

    Attributes:
        source_dir: Folder holding the files to organize.
        destination_dir: Library root receiving the organized files.
        offline: If True, never query metadata providers.
        preview_only: If True, stop after displaying the preview tree.
        assume_yes: If True, skip the confirmation prompt.
        database: SQLite file holding the metadata cache and move history.
        show_history: If True, print the move history and exit.
        history_search: Text to look for in the move history.
        history_delete: Id of a history record to delete.
        history_clear: If True, delete the whole move history.
        exclude: Title folders left out of the run.
        select_titles: If True, ask title by title what to organize.
        debug: If True, enable debug logging.
    """

    source_dir: Optional[Path] = None
    destination_dir: Optional[Path] = None
    offline: bool = False
    preview_only: bool = False
    assume_yes: bool = False
    database: Path = DEFAULT_DATABASE_PATH
    show_history: bool = False
    history_search: Optional[str] = None
    history_delete: Optional[int] = None
    history_clear: bool = False
    exclude: List[str] = field(default_factory=list)
    select_titles: bool = False
    debug: bool = False

    @property
    def history_mode(self) -> bool:
        """Check if the run only works on the move history."""
        return bool(
            self.show_history
            or self.history_search is not None
            or self.history_delete is not None
            or self.history_clear
        )


def create_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog='stasher',
        description="""
        Reorganizes movies, TV episodes and anime episodes into a
        Category/Letter/Title (Year) library with normalized file names.
        """
    )

    parser.add_argument(
        'source',
        nargs='?',
        help="folder holding the files to organize"
    )

    parser.add_argument(
        'destination',
        nargs='?',
        help="library root receiving the organized files"
    )

    parser.add_argument(
        '--offline',
        action='store_true',
        help="use cached metadata and filenames only, no network lookups"
    )

    parser.add_argument(
        '--preview-only',
        action='store_true',
        help="display the preview tree without moving anything"
    )

    parser.add_argument(
        '-y', '--yes',
        action='store_true',
        help="organize without asking for confirmation"
    )

    parser.add_argument(
        '--database',
        default=str(DEFAULT_DATABASE_PATH),
        help=f"metadata cache and history database (default: {DEFAULT_DATABASE_PATH})"
    )

    parser.add_argument(
        '--exclude',
        action='append',
        default=[],
        metavar='TITLE',
        help="leave a title out of the run (repeatable, matches the title folder)"
    )

    parser.add_argument(
        '--select',
        action='store_true',
        help="ask title by title which ones to organize"
    )

    parser.add_argument(
        '--history',
        action='store_true',
        help="show the move history and exit"
    )

    parser.add_argument(
        '--history-search',
        metavar='TEXT',
        help="show the moves whose original or new file name contains TEXT"
    )

    parser.add_argument(
        '--history-delete',
        type=int,
        metavar='ID',
        help="delete one move history record"
    )

    parser.add_argument(
        '--history-clear',
        action='store_true',
        help="delete the whole move history"
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help="enable debug logging"
    )

    return parser


def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: Optional list of arguments (defaults to sys.argv).

    Returns:
        Parsed argument namespace.
    """
    parser = create_parser()
    namespace = parser.parse_args(args)

    history_mode = (
        namespace.history
        or namespace.history_search is not None
        or namespace.history_delete is not None
        or namespace.history_clear
    )
    if not history_mode and not (namespace.source and namespace.destination):
        parser.error("source and destination are required unless a history option is given")

    return namespace


def args_to_cli_args(namespace: argparse.Namespace) -> CLIArgs:
    """
    Convert an argparse namespace to a CLIArgs dataclass.

    Args:
        namespace: Parsed argparse namespace.

    Returns:
        CLIArgs instance with resolved paths.
    """
    return CLIArgs(
        source_dir=Path(namespace.source).expanduser() if namespace.source else None,
        destination_dir=Path(namespace.destination).expanduser() if namespace.destination else None,
        offline=namespace.offline,
        preview_only=namespace.preview_only,
        assume_yes=namespace.yes,
        database=Path(namespace.database).expanduser(),
        show_history=namespace.history,
        history_search=namespace.history_search,
        history_delete=namespace.history_delete,
        history_clear=namespace.history_clear,
        exclude=list(namespace.exclude),
        select_titles=namespace.select,
        debug=namespace.debug,
    )


def validate_directories(source_dir: Path, destination_dir: Path) -> bool:
    """
    Check that the source exists and the destination is usable.

    Args:
        source_dir: Folder holding the files to organize.
        destination_dir: Library root.

    Returns:
        True when both folders are valid.
    """
    if not source_dir.is_dir():
        logger.error(f"Source folder doesn't exist: {source_dir}")
        return False

    if destination_dir.exists() and not destination_dir.is_dir():
        logger.error(f"Destination is not a folder: {destination_dir}")
        return False

    source = source_dir.resolve()
    destination = destination_dir.resolve()
    if destination == source:
        logger.error("Source and destination must be different folders")
        return False

    # Files already organized below the source would be picked up again
    if source in destination.parents:
        logger.error(f"Destination must not be inside the source folder: {destination_dir}")
        return False

    return True
