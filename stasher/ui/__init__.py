"""User interface components."""

from stasher.ui.console import ConsoleUI, console
from stasher.ui.display import (
    format_file_count,
    node_label,
    build_rich_tree,
    display_preview,
    display_report,
    display_history,
)

__all__ = [
    "ConsoleUI",
    "console",
    "format_file_count",
    "node_label",
    "build_rich_tree",
    "display_preview",
    "display_report",
    "display_history",
]
