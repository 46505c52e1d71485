"""
Base diff producer and producer registry.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable


class BaseDiffProducer(ABC):
    """
    Abstract base class for unified diff producers.

    Subclasses must implement produce().
    """

    @abstractmethod
    def produce(self, old_content: str, new_content: str) -> str:
        """
        Produce the unified diff body between two contents.

        Args:
            old_content: Content before the change.
            new_content: Content after the change.

        Returns:
            Diff text from the first hunk header on; empty when the
            contents have no differences.

        Raises:
            DiffProducerFailed: If the underlying tool fails.
        """
        pass


def strip_file_headers(diff_text: str) -> str:
    """Drop every line before the first hunk header."""
    lines = diff_text.split("\n")
    for index, line in enumerate(lines):
        if line.startswith("@@"):
            return "\n".join(lines[index:])
    return ""


# Producer registry
_PRODUCERS: dict[str, type[BaseDiffProducer]] = {}


def register_producer(name: str) -> Callable[[type[BaseDiffProducer]], type[BaseDiffProducer]]:
    """
    Decorator to register a diff producer.

    Args:
        name: The name to register the producer under.

    Returns:
        Decorator function.
    """
    def decorator(cls: type[BaseDiffProducer]) -> type[BaseDiffProducer]:
        _PRODUCERS[name] = cls
        return cls
    return decorator


def get_producer(name: str, **options: Any) -> BaseDiffProducer:
    """
    Get a diff producer instance by name.

    Args:
        name: The producer name ("difflib" or "git").
        **options: Keyword arguments passed to the producer's constructor.

    Returns:
        An instance of the requested producer.

    Raises:
        ValueError: If the producer name is not recognized.
    """
    # Import producers to ensure they're registered
    from diff_review.producer import difflib_producer, git_producer  # noqa: F401

    if name not in _PRODUCERS:
        available = ", ".join(sorted(_PRODUCERS))
        raise ValueError(f"Unknown diff producer: {name}. Available: {available}")

    return _PRODUCERS[name](**options)
