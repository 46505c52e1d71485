"""
Diff data models.

Models representing per-line changes between two versions of a file and
the hunks that group them.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class ChangeType(str, Enum):
    """Disposition of one line between two versions."""

    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"


class CharacterRange(BaseModel):
    """Half-open character interval ``[start, end)`` inside a text."""

    start: int = Field(ge=0, description="Offset of the first character")
    end: int = Field(ge=0, description="Offset one past the last character")

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _check_order(self) -> "CharacterRange":
        if self.end < self.start:
            raise ValueError(f"range end {self.end} is before start {self.start}")
        return self

    @property
    def length(self) -> int:
        """Number of characters covered."""
        return self.end - self.start

    def slice_of(self, text: str) -> str:
        """Return the part of ``text`` covered by this range."""
        return text[self.start:self.end]


class LineChange(BaseModel):
    """One line's disposition between the old and the new content."""

    old_line_number: Optional[int] = Field(
        default=None,
        ge=1,
        description="1-based line number in the old content (absent for additions)",
    )
    new_line_number: Optional[int] = Field(
        default=None,
        ge=1,
        description="1-based line number in the new content (absent for removals)",
    )
    character_range: CharacterRange = Field(
        description="Offsets of the line, terminator included, in the content it comes from",
    )
    content: str = Field(description="Line text without its line terminator")
    type: ChangeType = Field(description="Type of change")

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _check_line_numbers(self) -> "LineChange":
        has_old = self.old_line_number is not None
        has_new = self.new_line_number is not None
        expected = {
            ChangeType.UNCHANGED: (True, True),
            ChangeType.ADDED: (False, True),
            ChangeType.REMOVED: (True, False),
        }[self.type]
        if (has_old, has_new) != expected:
            raise ValueError(
                f"{self.type.value} line must have old_line_number="
                f"{'set' if expected[0] else 'None'} and new_line_number="
                f"{'set' if expected[1] else 'None'}"
            )
        return self

    @property
    def is_change(self) -> bool:
        """Whether this line was added or removed."""
        return self.type != ChangeType.UNCHANGED


class DiffGroup(BaseModel):
    """
    A hunk: a contiguous run of line changes sharing one area of the file.

    ``changes`` is the slice ``[start, end)`` of the sequence it was
    grouped from.
    """

    start: int = Field(ge=0, description="Index of the first change in the full sequence")
    end: int = Field(ge=0, description="Index one past the last change in the full sequence")
    changes: list[LineChange] = Field(
        default_factory=list,
        description="Line changes in this group, in traversal order",
    )

    class Config:
        frozen = True

    @property
    def id(self) -> str:
        """Stable identifier derived from the covered index range."""
        return f"{self.start}-{self.end}"

    @property
    def has_changes(self) -> bool:
        """Whether the group contains any added or removed line."""
        return any(change.is_change for change in self.changes)

    @property
    def added_count(self) -> int:
        """Number of added lines."""
        return sum(1 for c in self.changes if c.type == ChangeType.ADDED)

    @property
    def removed_count(self) -> int:
        """Number of removed lines."""
        return sum(1 for c in self.changes if c.type == ChangeType.REMOVED)

    @property
    def first_line_number(self) -> Optional[int]:
        """First new-side line number in the group, if any."""
        for change in self.changes:
            if change.new_line_number is not None:
                return change.new_line_number
        return None


class FileChangeDiff(BaseModel):
    """A complete file change: both contents and the line changes between them."""

    old_content: str = Field(description="Content before the change")
    new_content: str = Field(description="Content after the change")
    changes: list[LineChange] = Field(
        default_factory=list,
        description="Line changes in traversal order",
    )

    class Config:
        frozen = True

    @property
    def added_lines(self) -> int:
        """Total lines added."""
        return sum(1 for c in self.changes if c.type == ChangeType.ADDED)

    @property
    def removed_lines(self) -> int:
        """Total lines removed."""
        return sum(1 for c in self.changes if c.type == ChangeType.REMOVED)

    @property
    def has_changes(self) -> bool:
        """Whether any line was added or removed."""
        return any(c.is_change for c in self.changes)
