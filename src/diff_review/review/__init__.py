"""
Review package for diff review.

This package contains modules for:
- Grouping line changes into hunks
- Side-by-side alignment of a hunk
- Edit tool payloads
- The review processor that ties parsing, patching and diffing together
"""

from diff_review.review.alignment import AlignmentRenderer, align_group
from diff_review.review.edits import (
    Edit,
    FileContent,
    FileEdit,
    diff_result_for_edit,
    diff_result_for_write,
)
from diff_review.review.grouping import (
    apply_selected_groups,
    changed_sections,
    group_changes,
)
from diff_review.review.processor import DiffReviewProcessor, EditReview, ReviewState

__all__ = [
    "AlignmentRenderer",
    "DiffReviewProcessor",
    "Edit",
    "EditReview",
    "FileContent",
    "FileEdit",
    "ReviewState",
    "align_group",
    "apply_selected_groups",
    "changed_sections",
    "diff_result_for_edit",
    "diff_result_for_write",
    "group_changes",
]
