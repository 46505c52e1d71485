"""
Unified diff parser using the unidiff library.

Converts the hunks of a unified diff, together with the two full file
contents, into an ordered sequence of per-line change records with character
offsets. Unchanged lines between and after hunks are backfilled from the new
content, so the result covers every line of the new content plus every
removed line of the old content.
"""

import logging
from enum import Enum
from typing import Optional

from unidiff import Hunk, PatchSet
from unidiff.constants import LINE_TYPE_NO_NEWLINE
from unidiff.errors import UnidiffParseError
from unidiff.patch import Line

from diff_review.errors import DiffParseError, MalformedHunkHeader
from diff_review.models.diff import ChangeType, CharacterRange, LineChange
from diff_review.parser.lines import LineTable

logger = logging.getLogger(__name__)

# unidiff only reads hunks that belong to a file
PLACEHOLDER_FILE_HEADERS = "--- original\n+++ updated\n"

_HUNK_BODY_PREFIXES = ("+", "-", " ", "\\")


class DiffLineKind(str, Enum):
    """Classification of one hunk line read by unidiff."""

    ADDED = "added"
    REMOVED = "removed"
    CONTEXT = "context"
    NO_NEWLINE_MARKER = "no_newline_marker"
    OTHER = "other"


def line_kind(line: Line) -> DiffLineKind:
    """
    Classify a unidiff hunk line.

    unidiff also appends blank lines that trail a complete hunk; those are
    ``OTHER``.
    """
    if line.is_added:
        return DiffLineKind.ADDED
    if line.is_removed:
        return DiffLineKind.REMOVED
    if line.is_context:
        return DiffLineKind.CONTEXT
    if line.line_type == LINE_TYPE_NO_NEWLINE:
        return DiffLineKind.NO_NEWLINE_MARKER
    return DiffLineKind.OTHER


def _diff_lines(diff_text: str) -> list[str]:
    """Split diff text on ``\\n`` only, keeping terminators."""
    pieces = diff_text.split("\n")
    lines = [piece + "\n" for piece in pieces[:-1]]
    if pieces[-1]:
        lines.append(pieces[-1])
    return lines


def split_hunks(diff_text: str) -> list[list[str]]:
    """
    Cut diff text into one list of lines per ``@@`` header.

    A body line never starts with ``@@``, so every such line opens a hunk.
    File headers and other lines before the first hunk are dropped, and so
    are lines after it that cannot belong to a hunk body.
    """
    chunks: list[list[str]] = []
    for line in _diff_lines(diff_text):
        if line.startswith("@@"):
            chunks.append([line])
        elif not chunks:
            continue
        elif line.startswith(_HUNK_BODY_PREFIXES) or not line.strip("\r\n"):
            chunks[-1].append(line)
        else:
            logger.debug("Ignoring unrecognized diff line: %r", line)
    return chunks


class UnifiedDiffParser:
    """
    Parse unified diff hunks into ``LineChange`` records.

    The parser only consumes diff text; producing it is the job of a diff
    producer. File headers are optional.
    """

    def __init__(self, strict: bool = False) -> None:
        """
        Initialize the parser.

        Args:
            strict: Raise ``MalformedHunkHeader`` on a malformed hunk header
                instead of dropping that hunk.
        """
        self.strict = strict

    def read_hunk(self, chunk: list[str]) -> Optional[Hunk]:
        """
        Read one hunk with unidiff.

        Args:
            chunk: The header line and the lines after it, from ``split_hunks``.

        Returns:
            The hunk, or None when its header is malformed and the parser is
            lenient.

        Raises:
            MalformedHunkHeader: In strict mode, if the header cannot be parsed.
            DiffParseError: If the body does not match the header's counts.
        """
        header = chunk[0].rstrip("\r\n")
        try:
            patch = PatchSet(PLACEHOLDER_FILE_HEADERS + "".join(chunk))
        except UnidiffParseError as e:
            raise DiffParseError(f"Invalid hunk {header!r}: {e}") from e

        hunks = [hunk for patched_file in patch for hunk in patched_file]
        if hunks:
            return hunks[0]
        if self.strict:
            raise MalformedHunkHeader(header)
        logger.warning(
            "Dropping hunk with malformed header %r and its %d body line(s)",
            header,
            len(chunk) - 1,
        )
        return None

    def parse(self, old_content: str, new_content: str, diff_text: str) -> list[LineChange]:
        """
        Parse diff text against the two contents it was produced from.

        Args:
            old_content: Content before the change.
            new_content: Content after the change.
            diff_text: Unified diff text (file headers optional).

        Returns:
            Line changes in diff traversal order.

        Raises:
            MalformedHunkHeader: In strict mode, if a hunk header cannot be parsed.
            DiffParseError: If a hunk body does not match its header.
        """
        old = LineTable(old_content)
        new = LineTable(new_content)
        result: list[LineChange] = []

        current_old = 1
        current_new = 1

        for chunk in split_hunks(diff_text):
            hunk = self.read_hunk(chunk)
            if hunk is None:
                continue

            # a zero count names the line before the hunk
            first_old = hunk.source_start if hunk.source_length else hunk.source_start + 1
            first_new = hunk.target_start if hunk.target_length else hunk.target_start + 1
            while current_new < first_new:
                self._emit_unchanged(result, new, current_old, current_new)
                current_old += 1
                current_new += 1

            for line in hunk:
                kind = line_kind(line)
                if kind == DiffLineKind.ADDED:
                    if new.has_line(line.target_line_no):
                        result.append(
                            self._line_change(new, None, line.target_line_no, ChangeType.ADDED)
                        )
                elif kind == DiffLineKind.REMOVED:
                    if old.has_line(line.source_line_no):
                        result.append(
                            self._line_change(old, line.source_line_no, None, ChangeType.REMOVED)
                        )
                elif kind == DiffLineKind.CONTEXT:
                    self._emit_unchanged(result, new, line.source_line_no, line.target_line_no)

            current_old = first_old + hunk.source_length
            current_new = first_new + hunk.target_length

        while new.has_line(current_new):
            self._emit_unchanged(result, new, current_old, current_new)
            current_old += 1
            current_new += 1

        return result

    @staticmethod
    def _line_change(
        table: LineTable,
        old_line: Optional[int],
        new_line: Optional[int],
        change_type: ChangeType,
    ) -> LineChange:
        number = new_line if change_type != ChangeType.REMOVED else old_line
        start, end = table.span(number)
        return LineChange(
            old_line_number=old_line,
            new_line_number=new_line,
            character_range=CharacterRange(start=start, end=end),
            content=table.content(number),
            type=change_type,
        )

    @classmethod
    def _emit_unchanged(
        cls,
        result: list[LineChange],
        new: LineTable,
        old_line: int,
        new_line: int,
    ) -> None:
        if new.has_line(new_line) and old_line >= 1:
            result.append(cls._line_change(new, old_line, new_line, ChangeType.UNCHANGED))


def parse_unified_diff(
    old_content: str,
    new_content: str,
    diff_text: str,
    strict: bool = False,
) -> list[LineChange]:
    """Parse diff text with a default ``UnifiedDiffParser``."""
    return UnifiedDiffParser(strict=strict).parse(old_content, new_content, diff_text)
