"""Display functions for previews, run summaries and history."""

from typing import TYPE_CHECKING, List, Optional

from rich.text import Text
from rich.tree import Tree

from stasher.models.media import MoveHistoryRecord
from stasher.models.preview import PreviewNode, PreviewTree
from stasher.ui.console import console

if TYPE_CHECKING:
    from stasher.pipeline.executor import OrganizeReport


def format_file_count(count: int) -> str:
    """
    Format a file count with pluralization.

    Args:
        count: Number of files.

    Returns:
        Formatted string like "5 files" or "1 file".
    """
    return f"{count} file{'s' if count != 1 else ''}"


def node_label(node: PreviewNode) -> Text:
    """
    Build the label of a preview node.

    Media files read "original → renamed"; sidecars and folders show
    their name. Unchecked nodes are struck through.
    """
    if node.is_folder:
        label = Text(f"📁 {node.display_name}", style="bold cyan")
        if node.show_selector:
            label.append(" [x]" if node.is_checked else " [ ]", style="magenta")
    elif node.is_sidecar:
        label = Text(f"📄 {node.display_name}", style="dim")
    else:
        label = Text("🎬 ")
        label.append(node.original_name or "", style="dim")
        label.append(" → ")
        label.append(node.renamed_name or node.display_name, style="green")

    if not node.is_checked:
        label.stylize("strike")
    return label


def build_rich_tree(tree: PreviewTree) -> Tree:
    """
    Convert a preview tree into a Rich tree.

    Args:
        tree: Preview tree.

    Returns:
        Rich Tree mirroring the preview (an empty root when there are no nodes).
    """
    if not tree.roots:
        return Tree("📁 [bold cyan](empty)[/bold cyan]")

    root_index = tree.roots[0]
    rich_root = Tree(node_label(tree[root_index]))
    stack = [(child, rich_root) for child in reversed(tree[root_index].children)]
    while stack:
        index, parent = stack.pop()
        branch = parent.add(node_label(tree[index]))
        stack.extend((child, branch) for child in reversed(tree[index].children))
    return rich_root


def display_preview(tree: PreviewTree) -> None:
    """
    Display the preview tree and its file count.

    Args:
        tree: Preview tree.
    """
    console.rule("[bold blue]Preview[/bold blue]")
    console.print(build_rich_tree(tree))
    console.print_preview(f"{format_file_count(len(tree.selected_files()))} would be organized")


def display_report(report: "OrganizeReport") -> None:
    """
    Display the summary of an organize run.

    Args:
        report: Report returned by the executor.
    """
    console.rule("[bold green]Summary[/bold green]")
    console.print_count("Total processed", report.total)
    console.print_count("Moved", report.moved, "green")
    if report.skipped:
        console.print_count("Skipped", report.skipped, "yellow")
    if report.conflicts:
        console.print_count("Conflicts", report.conflicts, "yellow")
    if report.failed:
        console.print_count("Failed", report.failed, "red")

    problems = [o for o in report.outcomes if o.error is not None]
    if problems:
        table = console.create_table("Not organized", ["File", "Status", "Reason"])
        for outcome in problems:
            table.add_row(outcome.source.name, outcome.status.value, outcome.message)
        console.print_table(table)


def display_history(
    records: List[MoveHistoryRecord],
    limit: Optional[int] = None
) -> None:
    """
    Display the move history as a table.

    Args:
        records: History records, most recent first.
        limit: Maximum number of rows shown.
    """
    if not records:
        console.print_info("No moves recorded yet.")
        return

    shown = records[:limit] if limit else records
    table = console.create_table(
        "Move history",
        ["ID", "Date", "Original name", "New name", "Destination"]
    )
    for record in shown:
        table.add_row(
            str(record.id) if record.id is not None else "",
            record.moved_at.strftime("%Y-%m-%d %H:%M"),
            record.original_file_name,
            record.new_file_name,
            record.destination_path,
        )
    console.print_table(table)

    remaining = len(records) - len(shown)
    if remaining > 0:
        console.print(f"[dim]... and {remaining} more[/dim]")
