"""
Side-by-side alignment renderer.

Turns one hunk into rows for a two-column review: the left column shows the
original lines, the right column the updated lines, and both stay
positionally synchronized.
"""

from typing import Optional

from diff_review.models.alignment import SideLine, SideLineType
from diff_review.models.diff import ChangeType, DiffGroup


class AlignmentRenderer:
    """Render a ``DiffGroup`` into synchronized ``SideLine`` rows."""

    def render(self, group: DiffGroup) -> list[SideLine]:
        """
        Align one hunk.

        Each side keeps its own counter. Deleted rows advance only the
        original counter and inserted rows only the updated counter;
        unchanged rows take their numbers from the record itself, which
        re-synchronizes both counters after any insert/delete run.

        Args:
            group: The hunk to render.

        Returns:
            One row per line change, in order.
        """
        original_line = self._first_number(group, ChangeType.REMOVED, old_side=True)
        updated_line = self._first_number(group, ChangeType.ADDED, old_side=False)

        rows: list[SideLine] = []
        for index, change in enumerate(group.changes):
            if change.type == ChangeType.UNCHANGED:
                rows.append(SideLine(
                    id=f"u-{index}",
                    text=change.content,
                    original_line_number=change.old_line_number,
                    updated_line_number=change.new_line_number,
                    type=SideLineType.UNCHANGED,
                ))
                original_line = (change.old_line_number or original_line) + 1
                updated_line = (change.new_line_number or updated_line) + 1
            elif change.type == ChangeType.REMOVED:
                rows.append(SideLine(
                    id=f"d-{index}",
                    text=change.content,
                    original_line_number=original_line,
                    type=SideLineType.DELETED,
                ))
                original_line += 1
            else:
                rows.append(SideLine(
                    id=f"i-{index}",
                    text=change.content,
                    updated_line_number=updated_line,
                    type=SideLineType.INSERTED,
                ))
                updated_line += 1
        return rows

    @staticmethod
    def _first_number(group: DiffGroup, side_type: ChangeType, old_side: bool) -> int:
        for change in group.changes:
            if change.type in (ChangeType.UNCHANGED, side_type):
                number: Optional[int] = (
                    change.old_line_number if old_side else change.new_line_number
                )
                if number is not None:
                    return number
        return 1


def align_group(group: DiffGroup) -> list[SideLine]:
    """Align one hunk with a default ``AlignmentRenderer``."""
    return AlignmentRenderer().render(group)


def left_column(rows: list[SideLine]) -> list[Optional[int]]:
    """Original-side line numbers, ``None`` where a row has no left line."""
    return [row.original_line_number for row in rows]


def right_column(rows: list[SideLine]) -> list[Optional[int]]:
    """Updated-side line numbers, ``None`` where a row has no right line."""
    return [row.updated_line_number for row in rows]
