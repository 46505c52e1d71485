"""
YAML output formatter.
"""

import yaml

from diff_review.models.result import DiffResult
from diff_review.output.formatters import (
    BaseFormatter,
    register_formatter,
    result_summary,
    review_to_dict,
)
from diff_review.review.processor import ReviewState


@register_formatter("yaml")
class YamlFormatter(BaseFormatter):
    """
    Format output as YAML.
    """

    def format(self, state: ReviewState) -> str:
        """Format a review as YAML."""
        data = review_to_dict(state, self.include_unchanged)
        return yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)

    def format_results(self, results: list[DiffResult]) -> str:
        """Format stored records as YAML."""
        data = {
            "total": len(results),
            "results": [result_summary(result) for result in results],
        }
        return yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
