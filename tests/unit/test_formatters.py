"""
Unit tests for output formatters.
"""

import json

import pytest
import yaml

from diff_review.models.result import DiffResult
from diff_review.output.formatters import get_formatter
from diff_review.output.json_output import JsonFormatter
from diff_review.output.markdown_output import MarkdownFormatter
from diff_review.output.text_output import TextFormatter
from diff_review.output.yaml_output import YamlFormatter
from diff_review.review.processor import DiffReviewProcessor, ReviewState


@pytest.fixture
def state(greeting_result: DiffResult) -> ReviewState:
    """The review of the greeting patch."""
    return DiffReviewProcessor().process(greeting_result)


@pytest.fixture
def unchanged_state() -> ReviewState:
    """The review of a record without changes."""
    result = DiffResult.for_file("same.txt", original="a\n", updated="a\n")
    return DiffReviewProcessor().process(result)


class TestGetFormatter:
    """Tests for the formatter registry."""

    @pytest.mark.parametrize(
        ("name", "cls"),
        [
            ("text", TextFormatter),
            ("json", JsonFormatter),
            ("yaml", YamlFormatter),
            ("markdown", MarkdownFormatter),
        ],
    )
    def test_known_formatters(self, name: str, cls: type) -> None:
        """Test getting each registered formatter."""
        assert isinstance(get_formatter(name), cls)

    def test_options_passed(self) -> None:
        """Test that options reach the formatter."""
        formatter = get_formatter("text", colorize=False, include_unchanged=True)

        assert formatter.colorize is False
        assert formatter.include_unchanged is True

    def test_unknown_formatter(self) -> None:
        """Test that an unknown name raises ValueError."""
        with pytest.raises(ValueError, match="Unknown formatter"):
            get_formatter("html")


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_format(self, state: ReviewState) -> None:
        """Test the JSON rendering of a review."""
        data = json.loads(JsonFormatter().format(state))

        assert data["file_path"] == "docs/greeting.txt"
        assert data["summary"] == {"edits": 2, "added_lines": 2, "removed_lines": 2, "hunks": 1}
        [hunk] = data["hunks"]
        assert hunk["id"] == "0-5"
        assert [line["type"] for line in hunk["lines"]] == [
            "deleted", "inserted", "unchanged", "deleted", "inserted",
        ]
        assert hunk["lines"][1]["updated_line"] == 1
        assert hunk["lines"][1]["original_line"] is None

    def test_format_results(self, greeting_result: DiffResult) -> None:
        """Test the JSON rendering of stored records."""
        data = json.loads(JsonFormatter().format_results([greeting_result]))

        assert data["total"] == 1
        assert data["results"][0]["file_name"] == "greeting.txt"
        assert data["results"][0]["has_patch"] is True


class TestYamlFormatter:
    """Tests for YamlFormatter."""

    def test_format(self, state: ReviewState) -> None:
        """Test the YAML rendering of a review."""
        data = yaml.safe_load(YamlFormatter().format(state))

        assert data["summary"]["hunks"] == 1
        assert data["edits"][0]["search"] == "Hello, world!"

    def test_include_unchanged(self, unchanged_state: ReviewState) -> None:
        """Test rendering groups without changes."""
        assert yaml.safe_load(YamlFormatter().format(unchanged_state))["hunks"] == []
        data = yaml.safe_load(YamlFormatter(include_unchanged=True).format(unchanged_state))
        assert [hunk["id"] for hunk in data["hunks"]] == ["0-1"]


class TestMarkdownFormatter:
    """Tests for MarkdownFormatter."""

    def test_format(self, state: ReviewState) -> None:
        """Test the Markdown rendering of a review."""
        output = MarkdownFormatter().format(state)

        assert "# Review: `greeting.txt`" in output
        assert "- **Added Lines:** 2" in output
        assert "```diff" in output
        assert "-Hello, world!" in output
        assert "+Hello, universe!" in output
        assert " What a wonderful world!" in output

    def test_no_changes(self, unchanged_state: ReviewState) -> None:
        """Test the Markdown rendering of an unchanged record."""
        assert "_No changes._" in MarkdownFormatter().format(unchanged_state)

    def test_format_results(self, greeting_result: DiffResult) -> None:
        """Test the Markdown table of stored records."""
        output = MarkdownFormatter().format_results([greeting_result])

        assert "| greeting.txt | `docs/greeting.txt` | yes |" in output
        assert "**Total:** 1 edits" in output


class TestTextFormatter:
    """Tests for TextFormatter."""

    def test_format(self, state: ReviewState) -> None:
        """Test the side-by-side text rendering."""
        output = TextFormatter(colorize=False).format(state)

        assert "Diff Review" in output
        assert "Hunk 0-5" in output
        assert "Hello, universe!" in output
        assert "Added Lines: 2" in output

    def test_no_changes(self, unchanged_state: ReviewState) -> None:
        """Test the text rendering of an unchanged record."""
        assert "No changes." in TextFormatter(colorize=False).format(unchanged_state)

    def test_markup_in_content_is_escaped(self) -> None:
        """Test that square brackets in file content are printed as is."""
        result = DiffResult.for_file("a.py", original="x = [1]\n", updated="x = [red]\n")
        state = DiffReviewProcessor().process(result)

        assert "x = [red]" in TextFormatter(colorize=False).format(state)

    def test_format_results_empty(self) -> None:
        """Test the text rendering of an empty store."""
        assert "No stored edits." in TextFormatter(colorize=False).format_results([])
