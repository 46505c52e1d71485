"""
In-process diff producer built on difflib.
"""

import difflib

from diff_review.parser.lines import split_lines, strip_line_ending
from diff_review.producer.base import BaseDiffProducer, register_producer, strip_file_headers


@register_producer("difflib")
class DifflibDiffProducer(BaseDiffProducer):
    """
    Produce unified diffs with ``difflib.unified_diff``.

    Lines are compared without their terminators, so a missing newline at
    the end of a file does not show up as a change.
    """

    def __init__(self, context_lines: int = 3) -> None:
        """
        Initialize the producer.

        Args:
            context_lines: Unchanged lines shown around each change.
        """
        self.context_lines = context_lines

    def produce(self, old_content: str, new_content: str) -> str:
        """Produce the unified diff body between two contents."""
        old_lines = [strip_line_ending(line) for line in split_lines(old_content)]
        new_lines = [strip_line_ending(line) for line in split_lines(new_content)]
        diff = difflib.unified_diff(
            old_lines,
            new_lines,
            fromfile="original",
            tofile="updated",
            n=self.context_lines,
            lineterm="",
        )
        return strip_file_headers("\n".join(diff))
