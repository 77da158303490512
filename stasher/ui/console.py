"""Console UI wrapper using Rich library."""

from typing import Dict, List, Optional, Tuple

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

# Message kind -> (style, prefix)
MESSAGE_STYLES: Dict[str, Tuple[str, str]] = {
    "info": ("blue", "ℹ️  "),
    "warning": ("yellow", "⚠️  "),
    "error": ("red", "❌ "),
    "preview": ("dim", "🔍 PREVIEW - "),
}


class ConsoleUI:
    """
    Rich Console wrapper used by the preview, the run summary and the CLI.

    Output goes to an injectable Rich Console so tests can record it.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def print(self, *args, **kwargs) -> None:
        """Print to console (delegates to Rich Console)."""
        self.console.print(*args, **kwargs)

    def rule(self, title: str = "", **kwargs) -> None:
        """Print a horizontal rule with optional title."""
        self.console.rule(title, **kwargs)

    def print_message(self, kind: str, message: str) -> None:
        """
        Print a message styled after its kind.

        Args:
            kind: Key of MESSAGE_STYLES.
            message: Text to print.

        Raises:
            KeyError: If the kind is unknown.
        """
        style, prefix = MESSAGE_STYLES[kind]
        self.console.print(f"[{style}]{prefix}{message}[/{style}]")

    def print_info(self, message: str) -> None:
        """Print info message (blue)."""
        self.print_message("info", message)

    def print_warning(self, message: str) -> None:
        """Print warning message (yellow)."""
        self.print_message("warning", message)

    def print_error(self, message: str) -> None:
        """Print error message (red)."""
        self.print_message("error", message)

    def print_preview(self, message: str) -> None:
        """Print a dry-run preview message (dim)."""
        self.print_message("preview", message)

    def print_count(self, label: str, value: int, style: str = "blue") -> None:
        """Print one "Label: value" line of a run summary."""
        self.console.print(f"[{style}]{label}:[/{style}] {value}")

    def print_panel(
        self,
        content: str,
        title: str = "",
        border_style: str = "blue"
    ) -> None:
        """
        Print content in a bordered panel.

        Args:
            content: Panel content (Rich markup allowed).
            title: Panel title.
            border_style: Border color/style.
        """
        self.console.print(Panel(content, title=title, border_style=border_style))

    def create_table(
        self,
        title: str,
        columns: Optional[List[str]] = None
    ) -> Table:
        """
        Create a Rich Table with optional columns.

        Args:
            title: Table title.
            columns: List of column headers.

        Returns:
            Rich Table instance.
        """
        table = Table(title=title, show_header=True, header_style="bold magenta")
        for column in columns or []:
            table.add_column(column)
        return table

    def print_table(self, table: Table) -> None:
        """Print a Rich Table."""
        self.console.print(table)

    def confirm(self, question: str, default: bool = False) -> bool:
        """Ask a yes/no question before files are moved."""
        return Confirm.ask(question, default=default, console=self.console)


# Shared console used by the display functions
console = ConsoleUI()
