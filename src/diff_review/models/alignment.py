"""
Side-by-side alignment models.

Transient records rebuilt from a hunk whenever it changes; never persisted.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class SideLineType(str, Enum):
    """How a line shows up in the two-column review."""

    UNCHANGED = "unchanged"
    DELETED = "deleted"
    INSERTED = "inserted"


class SideLine(BaseModel):
    """One row of a synchronized two-column (old/new) rendering."""

    id: str = Field(description="Row identifier, unique within its hunk")
    text: str = Field(description="Line text")
    original_line_number: Optional[int] = Field(
        default=None,
        description="Line number in the left (original) column",
    )
    updated_line_number: Optional[int] = Field(
        default=None,
        description="Line number in the right (updated) column",
    )
    type: SideLineType = Field(description="Row type")

    class Config:
        frozen = True

    @property
    def on_left(self) -> bool:
        """Whether the row is visible in the original column."""
        return self.type != SideLineType.INSERTED

    @property
    def on_right(self) -> bool:
        """Whether the row is visible in the updated column."""
        return self.type != SideLineType.DELETED
