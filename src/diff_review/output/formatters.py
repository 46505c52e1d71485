"""
Base formatter and formatter registry.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from diff_review.models.result import DiffResult
    from diff_review.review.processor import ReviewState


class BaseFormatter(ABC):
    """
    Abstract base class for output formatters.

    Subclasses must implement format() and format_results() methods.
    """

    def __init__(self, include_unchanged: bool = False) -> None:
        """
        Initialize the formatter.

        Args:
            include_unchanged: Also render groups without any change.
        """
        self.include_unchanged = include_unchanged

    @abstractmethod
    def format(self, state: "ReviewState") -> str:
        """
        Format a review.

        Args:
            state: The review state to format.

        Returns:
            Formatted string representation.
        """
        pass

    @abstractmethod
    def format_results(self, results: list["DiffResult"]) -> str:
        """
        Format a list of stored edit records.

        Args:
            results: Records to format.

        Returns:
            Formatted string representation.
        """
        pass


def review_to_dict(state: "ReviewState", include_unchanged: bool = False) -> dict[str, Any]:
    """Convert a review state to plain data for the structured formatters."""
    result = state.result
    return {
        "file_path": result.file_path,
        "file_name": result.file_name,
        "summary": {
            "edits": len(state.edits),
            "added_lines": state.file_change.added_lines,
            "removed_lines": state.file_change.removed_lines,
            "hunks": len(state.changed_groups),
        },
        "edits": [
            {
                "id": review.edit.id,
                "description": review.edit.description,
                "search": review.edit.search,
                "replace": review.edit.replace,
                "hunks": [group.id for group in review.groups],
            }
            for review in state.edits
        ],
        "hunks": [
            {
                "id": group.id,
                "added": group.added_count,
                "removed": group.removed_count,
                "lines": [
                    {
                        "id": row.id,
                        "type": row.type.value,
                        "original_line": row.original_line_number,
                        "updated_line": row.updated_line_number,
                        "text": row.text,
                    }
                    for row in rows
                ],
            }
            for group, rows in state.aligned(include_unchanged)
        ],
    }


def result_summary(result: "DiffResult") -> dict[str, Any]:
    """Convert a stored edit record to a short summary."""
    return {
        "file_path": result.file_path,
        "file_name": result.file_name,
        "has_patch": bool(result.diff),
        "original_length": len(result.original),
        "updated_length": len(result.updated),
    }


# Formatter registry
_FORMATTERS: dict[str, type[BaseFormatter]] = {}


def register_formatter(name: str) -> Callable[[type[BaseFormatter]], type[BaseFormatter]]:
    """
    Decorator to register a formatter.

    Args:
        name: The name to register the formatter under.

    Returns:
        Decorator function.
    """
    def decorator(cls: type[BaseFormatter]) -> type[BaseFormatter]:
        _FORMATTERS[name] = cls
        return cls
    return decorator


def get_formatter(name: str, **options: Any) -> BaseFormatter:
    """
    Get a formatter instance by name.

    Args:
        name: The formatter name (e.g., "text", "json", "yaml").
        **options: Keyword arguments passed to the formatter's constructor.

    Returns:
        An instance of the requested formatter.

    Raises:
        ValueError: If the formatter name is not recognized.
    """
    # Import formatters to ensure they're registered
    from diff_review.output import (  # noqa: F401
        json_output,
        markdown_output,
        text_output,
        yaml_output,
    )

    if name not in _FORMATTERS:
        available = ", ".join(_FORMATTERS.keys())
        raise ValueError(f"Unknown formatter: {name}. Available: {available}")

    return _FORMATTERS[name](**options)
