"""
Output package for diff review.

This package contains formatters for displaying reviews and stored edits
in various formats (text, JSON, YAML, Markdown).
"""

from diff_review.output.formatters import (
    BaseFormatter,
    get_formatter,
)
from diff_review.output.json_output import JsonFormatter
from diff_review.output.markdown_output import MarkdownFormatter
from diff_review.output.text_output import TextFormatter
from diff_review.output.yaml_output import YamlFormatter

__all__ = [
    "BaseFormatter",
    "JsonFormatter",
    "MarkdownFormatter",
    "TextFormatter",
    "YamlFormatter",
    "get_formatter",
]
