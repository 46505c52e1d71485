"""
Pytest configuration and shared fixtures.
"""

from pathlib import Path

import pytest

from diff_review.models.result import DiffResult


@pytest.fixture
def greeting_content() -> str:
    """A small text with no trailing newline."""
    return "Hello, world!\nWhat a wonderful world!\nSo lucky to be here!"


@pytest.fixture
def numbered_content() -> str:
    """Twenty numbered lines, newline terminated."""
    return "".join(f"line {n}\n" for n in range(1, 21))


@pytest.fixture
def numbered_content_edited(numbered_content: str) -> str:
    """``numbered_content`` with line 2 and line 18 rewritten."""
    return (
        numbered_content
        .replace("line 2\n", "LINE TWO\n")
        .replace("line 18\n", "LINE EIGHTEEN\n")
    )


@pytest.fixture
def simple_patch() -> str:
    """A two-block patch in the delimiter grammar."""
    return """Here are the edits:

<<<<<<< SEARCH
Hello, world!
=======
Hello, universe!
>>>>>>> REPLACE

<<<<<<< SEARCH
So lucky to be here!
=======
So grateful to be here!
>>>>>>> REPLACE
"""


@pytest.fixture
def tagged_patch() -> str:
    """A one-block patch in the tag grammar."""
    return """<DIFF id="edit-1">
<SEARCH>
What a wonderful world!
</SEARCH>
<REPLACE>
What a marvellous world!
</REPLACE>
<DESCRIPTION>Use a stronger adjective</DESCRIPTION>
</DIFF>"""


@pytest.fixture
def greeting_result(greeting_content: str, simple_patch: str) -> DiffResult:
    """An edit record for ``greeting_content`` carrying ``simple_patch``."""
    return DiffResult.for_file(
        file_path="docs/greeting.txt",
        original=greeting_content,
        diff=simple_patch,
    )


@pytest.fixture
def text_files(tmp_path: Path) -> tuple[Path, Path]:
    """Two versions of a small file on disk."""
    old = tmp_path / "old.txt"
    new = tmp_path / "new.txt"
    old.write_text("alpha\nbeta\ngamma\n", encoding="utf-8")
    new.write_text("alpha\nBETA\ngamma\ndelta\n", encoding="utf-8")
    return old, new
