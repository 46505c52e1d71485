"""
Markdown output formatter.
"""

from diff_review.models.alignment import SideLineType
from diff_review.models.result import DiffResult
from diff_review.output.formatters import BaseFormatter, register_formatter
from diff_review.review.processor import ReviewState

_PREFIXES = {
    SideLineType.UNCHANGED: " ",
    SideLineType.DELETED: "-",
    SideLineType.INSERTED: "+",
}


@register_formatter("markdown")
class MarkdownFormatter(BaseFormatter):
    """
    Format output as Markdown.
    """

    def format(self, state: ReviewState) -> str:
        """Format a review as Markdown."""
        result = state.result
        lines = []

        # Header
        lines.append(f"# Review: `{result.file_name or result.file_path or 'content'}`")
        lines.append("")

        # Summary
        lines.append("## Summary")
        lines.append("")
        if result.file_path:
            lines.append(f"- **File:** `{result.file_path}`")
        lines.append(f"- **Edits:** {len(state.edits)}")
        lines.append(f"- **Added Lines:** {state.file_change.added_lines}")
        lines.append(f"- **Removed Lines:** {state.file_change.removed_lines}")
        lines.append(f"- **Hunks:** {len(state.changed_groups)}")
        lines.append("")

        # Edits
        described = [review for review in state.edits if review.edit.description]
        if described:
            lines.append("## Edits")
            lines.append("")
            for review in described:
                label = f"`{review.edit.id}`: " if review.edit.id else ""
                lines.append(f"- {label}{review.edit.description}")
            lines.append("")

        # Hunks
        aligned = state.aligned(self.include_unchanged)
        if aligned:
            lines.append("## Hunks")
            lines.append("")
            language = result.file_extension or ""
            for group, rows in aligned:
                first = group.first_line_number
                where = f" (line {first})" if first is not None else ""
                lines.append(
                    f"### Hunk `{group.id}`{where}: +{group.added_count} -{group.removed_count}"
                )
                lines.append("")
                lines.append("```diff" if group.has_changes else f"```{language}")
                for row in rows:
                    lines.append(f"{_PREFIXES[row.type]}{row.text}")
                lines.append("```")
                lines.append("")
        else:
            lines.append("_No changes._")
            lines.append("")

        return "\n".join(lines)

    def format_results(self, results: list[DiffResult]) -> str:
        """Format stored records as a Markdown table."""
        lines = []
        lines.append("# Stored Edits")
        lines.append("")

        if not results:
            lines.append("_No stored edits._")
            return "\n".join(lines)

        lines.append("| File | Path | Patch |")
        lines.append("|------|------|-------|")
        for result in results:
            patch = "yes" if result.diff else "no"
            lines.append(f"| {result.file_name} | `{result.file_path}` | {patch} |")
        lines.append("")
        lines.append(f"**Total:** {len(results)} edits")

        return "\n".join(lines)
