"""
Hunk grouping.

Splits a line change sequence into hunks: each run of changes widened by a
few context lines, with nearby runs merged. Unchanged stretches between
hunks become groups of their own, so the groups partition the sequence.
"""

from diff_review.models.diff import ChangeType, DiffGroup, LineChange
from diff_review.parser.lines import split_lines


def changed_sections(changes: list[LineChange], context_lines: int = 3) -> list[tuple[int, int]]:
    """
    Find the index ranges of changed sections, context included.

    Two changed runs separated by more than ``2 * context_lines`` unchanged
    lines end up in different sections. The last section runs to the end of
    the sequence unless more than ``2 * context_lines`` unchanged lines
    follow it.

    Args:
        changes: Line changes in traversal order.
        context_lines: Unchanged lines kept on each side of a change.

    Returns:
        Half-open ``(start, end)`` index ranges, in order. The whole
        sequence when nothing changed, nothing when it is empty.
    """
    count = len(changes)
    if not count:
        return []

    runs = continuous_changes(changes, 0, count)
    if not runs:
        return [(0, count)]

    sections: list[tuple[int, int]] = []
    section_start = max(0, runs[0][0] - context_lines)
    previous_end = runs[0][1]
    for run_start, run_end in runs[1:]:
        if run_start - previous_end > 2 * context_lines:
            sections.append((section_start, previous_end + context_lines))
            section_start = run_start - context_lines
        previous_end = run_end

    if count - previous_end > 2 * context_lines:
        sections.append((section_start, previous_end + context_lines))
    else:
        sections.append((section_start, count))
    return sections


def continuous_changes(changes: list[LineChange], start: int, end: int) -> list[tuple[int, int]]:
    """Index ranges of consecutive changed lines inside ``[start, end)``."""
    runs: list[tuple[int, int]] = []
    index = start
    while index < end:
        while index < end and not changes[index].is_change:
            index += 1
        if index == end:
            break
        run_end = index
        while run_end < end and changes[run_end].is_change:
            run_end += 1
        runs.append((index, run_end))
        index = run_end
    return runs


def group_changes(changes: list[LineChange], context_lines: int = 3) -> list[DiffGroup]:
    """
    Partition a line change sequence into hunks.

    Args:
        changes: Line changes in traversal order.
        context_lines: Unchanged lines kept on each side of a change.

    Returns:
        Groups covering every change exactly once, in order.
    """
    groups: list[DiffGroup] = []
    position = 0
    for start, end in changed_sections(changes, context_lines):
        if start > position:
            groups.append(DiffGroup(start=position, end=start, changes=changes[position:start]))
        groups.append(DiffGroup(start=start, end=end, changes=changes[start:end]))
        position = end
    if position < len(changes):
        groups.append(DiffGroup(start=position, end=len(changes), changes=changes[position:]))
    return groups


def apply_selected_groups(
    old_content: str,
    new_content: str,
    groups: list[DiffGroup],
    selected_ids: set[str],
) -> str:
    """
    Build content that accepts only the selected hunks.

    Lines of selected groups follow the new content; every other line keeps
    the old content.

    Args:
        old_content: Content before the change.
        new_content: Content after the change.
        groups: Partition of the line changes between the two contents.
        selected_ids: Ids of the groups to accept.

    Returns:
        The merged content.
    """
    old_lines = split_lines(old_content)
    parts: list[str] = []
    for group in groups:
        accepted = group.id in selected_ids
        for change in group.changes:
            if change.type == ChangeType.UNCHANGED:
                if not accepted and change.old_line_number <= len(old_lines):
                    parts.append(old_lines[change.old_line_number - 1])
                else:
                    parts.append(change.character_range.slice_of(new_content))
            elif change.type == ChangeType.ADDED and accepted:
                parts.append(change.character_range.slice_of(new_content))
            elif change.type == ChangeType.REMOVED and not accepted:
                parts.append(change.character_range.slice_of(old_content))
    return "".join(parts)
