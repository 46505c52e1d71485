"""
Data models for diff review.

This package contains Pydantic models for line changes, hunks,
search/replace patches, side-by-side rows and file edit records.
"""

from diff_review.models.alignment import (
    SideLine,
    SideLineType,
)
from diff_review.models.diff import (
    ChangeType,
    CharacterRange,
    DiffGroup,
    FileChangeDiff,
    LineChange,
)
from diff_review.models.patch import (
    PartialApplication,
    SearchReplace,
)
from diff_review.models.result import DiffResult

__all__ = [
    # Diff models
    "ChangeType",
    "CharacterRange",
    "DiffGroup",
    "FileChangeDiff",
    "LineChange",
    # Patch models
    "PartialApplication",
    "SearchReplace",
    # Alignment models
    "SideLine",
    "SideLineType",
    # Edit records
    "DiffResult",
]
