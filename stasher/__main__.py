"""Entry point for the stasher package.

This module provides the command-line entry point for the media organization tool.
Run with: python -m stasher
"""

import sys
from typing import List, Optional

from dotenv import load_dotenv
from loguru import logger

from stasher.api.cache_db import MetadataCache
from stasher.api.jikan_client import JikanClient
from stasher.api.tmdb_client import TmdbClient
from stasher.api.validation import get_api_key, validate_api_keys
from stasher.config import (
    CLIArgs,
    parse_arguments,
    args_to_cli_args,
    validate_directories,
)
from stasher.models.preview import PreviewTree
from stasher.pipeline import DryRunTreeBuilder, MetadataResolver, OrganizeExecutor
from stasher.ui import ConsoleUI, display_history, display_preview, display_report
from stasher.utils.history import HistoryStore


def setup_logging(debug: bool = False) -> None:
    """
    Configure loguru logging.

    Args:
        debug: If True, enable debug-level logging.
    """
    logger.remove()
    level = "DEBUG" if debug else "INFO"
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )
    logger.add(
        "stasher.log",
        rotation="10 MB",
        retention="7 days",
        level="DEBUG",
    )


def display_configuration(cli_args: CLIArgs, console: ConsoleUI) -> None:
    """
    Display the current configuration to the user.

    Args:
        cli_args: Parsed CLI arguments.
        console: Console UI instance.
    """
    mode_parts = []
    if cli_args.offline:
        mode_parts.append("[yellow]OFFLINE[/yellow]")
    if cli_args.preview_only:
        mode_parts.append("[yellow]PREVIEW ONLY[/yellow]")
    if not mode_parts:
        mode_parts.append("[green]Normal[/green]")

    console.print_panel(
        f"[bold]Organize configuration[/bold]\n"
        f"Source: [cyan]{cli_args.source_dir}[/cyan]\n"
        f"Destination: [cyan]{cli_args.destination_dir}[/cyan]\n"
        f"Database: [cyan]{cli_args.database}[/cyan]\n"
        f"Mode: {' '.join(mode_parts)}",
        title="Stasher",
    )


def exclude_titles(tree: PreviewTree, titles: List[str], console: ConsoleUI) -> None:
    """
    Uncheck the title folders named with --exclude.

    Args:
        tree: Preview tree to update.
        titles: Titles given on the command line.
        console: Console UI instance.
    """
    excluded = tree.uncheck_titles(titles)
    for name in excluded:
        console.print_info(f"Excluded: {name}")
    if not excluded:
        console.print_warning("No title matched --exclude")


def select_titles(tree: PreviewTree, console: ConsoleUI) -> None:
    """Ask about every title still included and uncheck the declined ones."""
    for index, node in tree.selectors():
        if node.is_checked and not console.confirm(f"Organize {node.display_name}?", default=True):
            tree.set_checked(index, False)


def run_organize(cli_args: CLIArgs, console: ConsoleUI) -> int:
    """
    Preview, confirm and organize.

    Args:
        cli_args: Parsed CLI arguments.
        console: Console UI instance.

    Returns:
        Exit code.
    """
    if not validate_directories(cli_args.source_dir, cli_args.destination_dir):
        console.print_error("Directory validation failed")
        return 1

    if not cli_args.offline and not validate_api_keys(console):
        console.print_warning("Movies and series will only be named from the cache and Jikan")

    display_configuration(cli_args, console)

    with MetadataCache(cli_args.database) as cache:
        resolver = MetadataResolver(
            cache,
            general=TmdbClient(api_key=get_api_key("TMDB_API_KEY")),
            anime=JikanClient(),
        )

        tree = DryRunTreeBuilder(resolver).build(cli_args.source_dir, offline=cli_args.offline)
        if cli_args.exclude:
            exclude_titles(tree, cli_args.exclude, console)
        display_preview(tree)

        if not tree.selected_files():
            console.print_warning("Nothing to organize")
            return 0

        if cli_args.preview_only:
            return 0

        if cli_args.select_titles:
            select_titles(tree, console)
            if not tree.selected_files():
                console.print_info("No title selected, no file was moved")
                return 0

        if not cli_args.assume_yes and not console.confirm("Organize these files?"):
            console.print_info("Cancelled, no file was moved")
            return 0

        executor = OrganizeExecutor(resolver, history=HistoryStore(cli_args.database))
        report = executor.organize_selection(
            tree,
            cli_args.destination_dir,
            offline=cli_args.offline,
        )

    display_report(report)
    return 0 if report.failed == 0 else 2


def run_history(cli_args: CLIArgs, console: ConsoleUI) -> int:
    """
    List, search, delete or clear the move history.

    Args:
        cli_args: Parsed CLI arguments.
        console: Console UI instance.

    Returns:
        Exit code (1 when the record to delete doesn't exist).
    """
    history = HistoryStore(cli_args.database)

    if cli_args.history_clear:
        if not cli_args.assume_yes and not console.confirm("Delete the whole move history?"):
            console.print_info("Cancelled, history kept")
            return 0
        console.print_info(f"{history.clear()} history records deleted")
        return 0

    if cli_args.history_delete is not None:
        if not history.delete(cli_args.history_delete):
            console.print_warning(f"No history record with id {cli_args.history_delete}")
            return 1
        console.print_info(f"History record {cli_args.history_delete} deleted")
        return 0

    if cli_args.history_search is not None:
        display_history(history.search(cli_args.history_search))
        return 0

    display_history(history.list_all())
    return 0


def main(args: Optional[List[str]] = None) -> int:
    """
    Main entry point for the media organization tool.

    Args:
        args: Command-line arguments (defaults to sys.argv).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    load_dotenv()

    namespace = parse_arguments(args)
    cli_args = args_to_cli_args(namespace)

    setup_logging(cli_args.debug)

    console = ConsoleUI()

    if cli_args.history_mode:
        return run_history(cli_args, console)

    logger.info("Starting media organization...")
    exit_code = run_organize(cli_args, console)
    logger.info("Media organization complete")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
