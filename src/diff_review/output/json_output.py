"""
JSON output formatter.
"""

import json

from diff_review.models.result import DiffResult
from diff_review.output.formatters import (
    BaseFormatter,
    register_formatter,
    result_summary,
    review_to_dict,
)
from diff_review.review.processor import ReviewState


@register_formatter("json")
class JsonFormatter(BaseFormatter):
    """
    Format output as JSON.
    """

    def __init__(self, include_unchanged: bool = False, indent: int = 2) -> None:
        """
        Initialize the JSON formatter.

        Args:
            include_unchanged: Also render groups without any change.
            indent: JSON indentation level.
        """
        super().__init__(include_unchanged)
        self.indent = indent

    def format(self, state: ReviewState) -> str:
        """Format a review as JSON."""
        data = review_to_dict(state, self.include_unchanged)
        return json.dumps(data, indent=self.indent, default=str)

    def format_results(self, results: list[DiffResult]) -> str:
        """Format stored records as JSON."""
        data = {
            "total": len(results),
            "results": [result_summary(result) for result in results],
        }
        return json.dumps(data, indent=self.indent, default=str)
