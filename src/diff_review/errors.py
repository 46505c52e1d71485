"""
Error taxonomy for diff review.

Every failure surfaces as one exception carrying a single descriptive
message. Callers catch ``DiffReviewError`` to handle all of them at once.
"""

from typing import Optional


class DiffReviewError(Exception):
    """Base class for all diff review errors."""
    pass


class DiffProducerFailed(DiffReviewError):
    """The external diff tool returned an unexpected status."""

    def __init__(self, message: str, returncode: Optional[int] = None) -> None:
        super().__init__(f"Diff producer failed: {message}")
        self.error_output = message
        self.returncode = returncode


class DiffParseError(DiffReviewError):
    """Error during unified diff parsing."""
    pass


class MalformedHunkHeader(DiffParseError):
    """A line starting with ``@@`` is not a valid hunk header."""

    def __init__(self, header: str) -> None:
        super().__init__(f"Malformed hunk header: {header!r}")
        self.header = header


class MalformedPatch(DiffReviewError):
    """Patch text has a block that is not closed or is missing a section."""
    pass


class NotAPatch(MalformedPatch):
    """Patch text does not contain any search/replace block."""

    def __init__(self, content: str) -> None:
        preview = content if len(content) <= 80 else content[:77] + "..."
        super().__init__(
            f"The patch is not correctly formatted. Could not parse {preview!r}"
        )
        self.content = content


class PatchApplyError(DiffReviewError):
    """Error while applying search/replace pairs to content."""
    pass


class SearchPatternNotFound(PatchApplyError):
    """The search text of a patch operation is not present in the content."""

    def __init__(self, pattern: str) -> None:
        super().__init__(f"Search pattern not found: {pattern}")
        self.pattern = pattern


class AmbiguousSearchPattern(PatchApplyError):
    """The search text occurs more than once and unique matches are required."""

    def __init__(self, pattern: str, occurrences: int) -> None:
        super().__init__(
            f"Search pattern is not unique ({occurrences} occurrences): {pattern}"
        )
        self.pattern = pattern
        self.occurrences = occurrences
