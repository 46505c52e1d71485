"""
Human-readable text output formatter.
"""

from io import StringIO

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from diff_review.models.alignment import SideLine, SideLineType
from diff_review.models.diff import DiffGroup
from diff_review.models.result import DiffResult
from diff_review.output.formatters import BaseFormatter, register_formatter
from diff_review.review.processor import ReviewState


@register_formatter("text")
class TextFormatter(BaseFormatter):
    """
    Format output as a side-by-side review using Rich.
    """

    def __init__(self, include_unchanged: bool = False, colorize: bool = True) -> None:
        """
        Initialize the text formatter.

        Args:
            include_unchanged: Also render groups without any change.
            colorize: Whether to use colors in output.
        """
        super().__init__(include_unchanged)
        self.colorize = colorize

    def _row_style(self, row: SideLine) -> str:
        """Get the style for a row."""
        if not self.colorize:
            return ""

        styles = {
            SideLineType.DELETED: "red",
            SideLineType.INSERTED: "green",
        }
        return styles.get(row.type, "")

    def _group_table(self, group: DiffGroup, rows: list[SideLine]) -> Table:
        """Build the two-column table of one hunk."""
        title = f"Hunk {group.id}  +{group.added_count} -{group.removed_count}"
        table = Table(title=title, show_header=True, header_style="bold", expand=True)
        table.add_column("#", justify="right", style="dim", no_wrap=True)
        table.add_column("Original", ratio=1)
        table.add_column("#", justify="right", style="dim", no_wrap=True)
        table.add_column("Updated", ratio=1)

        for row in rows:
            style = self._row_style(row)
            left = escape(row.text) if row.on_left else ""
            right = escape(row.text) if row.on_right else ""
            table.add_row(
                str(row.original_line_number) if row.on_left else "",
                f"[{style}]{left}[/{style}]" if style and left else left,
                str(row.updated_line_number) if row.on_right else "",
                f"[{style}]{right}[/{style}]" if style and right else right,
            )
        return table

    def format(self, state: ReviewState) -> str:
        """Format a review as text."""
        output = StringIO()
        console = Console(file=output, force_terminal=self.colorize, width=120)
        result = state.result

        # Header
        console.print()
        console.print(
            Panel.fit(
                f"[bold]Diff Review[/bold]\n{escape(result.file_path or 'content')}",
                border_style="blue",
            )
        )
        console.print()

        # Summary
        console.print("[bold]Summary[/bold]")
        console.print(f"  Edits: {len(state.edits)}")
        console.print(f"  Added Lines: {state.file_change.added_lines}")
        console.print(f"  Removed Lines: {state.file_change.removed_lines}")
        console.print(f"  Hunks: {len(state.changed_groups)}")
        console.print()

        for review in state.edits:
            if review.edit.description:
                label = review.edit.id or "edit"
                console.print(f"  [cyan]{escape(label)}[/cyan]: {escape(review.edit.description)}")
            if review.edit.has_short_pattern:
                console.print(
                    f"  [yellow]Warning:[/yellow] short search pattern "
                    f"{escape(repr(review.edit.search))}"
                )

        aligned = state.aligned(self.include_unchanged)
        if not aligned:
            console.print("[green]No changes.[/green]")
            console.print()
            return output.getvalue()

        for group, rows in aligned:
            console.print(self._group_table(group, rows))
            console.print()

        return output.getvalue()

    def format_results(self, results: list[DiffResult]) -> str:
        """Format stored records as a table."""
        output = StringIO()
        console = Console(file=output, force_terminal=self.colorize, width=120)

        if not results:
            console.print("[dim]No stored edits.[/dim]")
            return output.getvalue()

        table = Table(title="Stored Edits", show_header=True, header_style="bold")
        table.add_column("File", style="cyan")
        table.add_column("Path", style="green")
        table.add_column("Patch", justify="center")
        table.add_column("Original", justify="right", style="dim")
        table.add_column("Updated", justify="right", style="dim")

        for result in results:
            table.add_row(
                escape(result.file_name),
                escape(result.file_path),
                "yes" if result.diff else "no",
                str(len(result.original)),
                str(len(result.updated)),
            )

        console.print(table)
        console.print(f"\nTotal: {len(results)} edits")

        return output.getvalue()
