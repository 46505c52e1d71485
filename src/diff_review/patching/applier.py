"""
Patch applier.

Applies ordered search/replace pairs to content. Matching is exact substring
matching only; whitespace normalization, if wanted, is the caller's job.

Pairs are applied left to right, each against the content produced by the
pairs before it, and there is no rollback of earlier pairs when a later one
fails. Because the input string is never mutated, a failed ``apply`` leaves
the caller's content untouched; callers that want the partially patched
content ask for it with ``apply_partial``, and callers that want to know
every failure up front use ``validate``.
"""

import logging
from typing import Iterable

from diff_review.errors import (
    AmbiguousSearchPattern,
    PatchApplyError,
    SearchPatternNotFound,
)
from diff_review.models.patch import PartialApplication, SearchReplace

logger = logging.getLogger(__name__)


class PatchApplier:
    """Apply ``SearchReplace`` sequences to text."""

    def __init__(self, require_unique: bool = False) -> None:
        """
        Initialize the applier.

        Args:
            require_unique: Reject a search text that occurs more than once
                instead of replacing its first occurrence.
        """
        self.require_unique = require_unique

    def apply_one(self, change: SearchReplace, content: str) -> str:
        """
        Apply a single operation.

        Raises:
            SearchPatternNotFound: If the search text is not in ``content``.
            AmbiguousSearchPattern: If unique matches are required and the
                search text occurs more than once.
        """
        if not change.search:
            # An empty search only matches an empty document.
            if content:
                raise SearchPatternNotFound(change.search)
            return change.replace

        occurrences = content.count(change.search)
        if occurrences == 0:
            logger.error("Search pattern not found: %r", change.search)
            raise SearchPatternNotFound(change.search)

        if change.replace_all:
            return content.replace(change.search, change.replace)

        if occurrences > 1:
            if self.require_unique:
                raise AmbiguousSearchPattern(change.search, occurrences)
            logger.warning(
                "Search pattern is not unique (%d occurrences), replacing the first: %r",
                occurrences,
                change.search,
            )
        return content.replace(change.search, change.replace, 1)

    def apply(self, changes: Iterable[SearchReplace], content: str) -> str:
        """
        Apply operations in order.

        Args:
            changes: Operations to apply.
            content: Content to patch.

        Returns:
            The patched content.

        Raises:
            SearchPatternNotFound: If any search text cannot be located.
            AmbiguousSearchPattern: If unique matches are required and a
                search text occurs more than once.
        """
        result = content
        for change in changes:
            result = self.apply_one(change, result)
        return result

    def apply_partial(self, changes: Iterable[SearchReplace], content: str) -> PartialApplication:
        """
        Apply operations in order, stopping at the first failure.

        Returns:
            The content after the operations that succeeded, how many were
            applied, and the failure that stopped application, if any.
        """
        result = content
        applied = 0
        for change in changes:
            try:
                result = self.apply_one(change, result)
            except PatchApplyError as e:
                return PartialApplication(
                    content=result,
                    applied=applied,
                    error=str(e),
                    failed_search=change.search,
                )
            applied += 1
        return PartialApplication(content=result, applied=applied)

    def validate(self, changes: Iterable[SearchReplace], content: str) -> list[PatchApplyError]:
        """
        Replay operations on a scratch copy and collect every failure.

        A failing operation is skipped so the ones after it are still
        checked against the content they would see.
        """
        errors: list[PatchApplyError] = []
        result = content
        for change in changes:
            try:
                result = self.apply_one(change, result)
            except PatchApplyError as e:
                errors.append(e)
        return errors


def apply_patch(changes: Iterable[SearchReplace], content: str) -> str:
    """Apply operations with a default ``PatchApplier``."""
    return PatchApplier().apply(changes, content)
