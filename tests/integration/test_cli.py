"""
Integration tests for the CLI.
"""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from diff_review.cli import cli
from diff_review.errors import DiffProducerFailed
from diff_review.models.result import DiffResult

TWO_EDIT_PATCH = """<<<<<<< SEARCH
line 2
line 3
=======
LINE TWO
line 3
>>>>>>> REPLACE
<<<<<<< SEARCH
line 18
=======
LINE EIGHTEEN
>>>>>>> REPLACE
"""


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def numbered_file(tmp_path: Path, numbered_content: str) -> Path:
    """The numbered content on disk."""
    path = tmp_path / "numbers.txt"
    path.write_text(numbered_content, encoding="utf-8")
    return path


@pytest.fixture
def patch_file(tmp_path: Path) -> Path:
    """A two-edit patch for the numbered content."""
    path = tmp_path / "edits.patch"
    path.write_text(TWO_EDIT_PATCH, encoding="utf-8")
    return path


@pytest.fixture
def record_file(tmp_path: Path, numbered_content: str) -> Path:
    """A stored edit record carrying the two-edit patch."""
    result = DiffResult.for_file("numbers.txt", original=numbered_content, diff=TWO_EDIT_PATCH)
    path = tmp_path / "record.json"
    path.write_text(json.dumps(result.to_record()), encoding="utf-8")
    return path


class TestCLI:
    """Integration tests for the CLI."""

    def test_version(self, runner: CliRunner) -> None:
        """Test the version option."""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "diff-review" in result.output

    def test_help(self, runner: CliRunner) -> None:
        """Test the help option."""
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Diff Review" in result.output
        for command in ("diff", "apply", "review", "store"):
            assert command in result.output

    def test_apply_help(self, runner: CliRunner) -> None:
        """Test the apply command help."""
        result = runner.invoke(cli, ["apply", "--help"])
        assert result.exit_code == 0
        assert "--write" in result.output
        assert "--check" in result.output
        assert "--partial" in result.output

    def test_invalid_config(self, runner: CliRunner, tmp_path: Path, text_files) -> None:
        """Test that an invalid configuration file aborts."""
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("unknown_section: 1\n", encoding="utf-8")
        old, new = text_files

        result = runner.invoke(cli, ["--config", str(config_file), "diff", str(old), str(new)])

        assert result.exit_code != 0
        assert "Error:" in result.output


class TestDiffCommand:
    """Tests for the diff command."""

    def test_json(self, runner: CliRunner, text_files) -> None:
        """Test comparing two files with JSON output."""
        old, new = text_files

        result = runner.invoke(cli, ["diff", str(old), str(new), "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["summary"]["added_lines"] == 2
        assert data["summary"]["removed_lines"] == 1

    def test_markdown(self, runner: CliRunner, text_files) -> None:
        """Test comparing two files with Markdown output."""
        old, new = text_files

        result = runner.invoke(cli, ["diff", str(old), str(new), "-f", "markdown"])

        assert result.exit_code == 0
        assert "```diff" in result.output
        assert "+BETA" in result.output

    def test_text(self, runner: CliRunner, text_files) -> None:
        """Test comparing two files with the default text output."""
        old, new = text_files

        result = runner.invoke(cli, ["diff", str(old), str(new)])

        assert result.exit_code == 0
        assert "BETA" in result.output

    def test_output_file(self, runner: CliRunner, text_files, tmp_path: Path) -> None:
        """Test writing the output to a file."""
        old, new = text_files
        output = tmp_path / "review.json"

        result = runner.invoke(cli, ["diff", str(old), str(new), "-f", "json", "-o", str(output)])

        assert result.exit_code == 0
        assert json.loads(output.read_text(encoding="utf-8"))["summary"]["hunks"] == 1

    @patch("subprocess.run")
    def test_git_failure(self, mock_run: MagicMock, runner: CliRunner, text_files) -> None:
        """Test that a failing git producer aborts with its error text."""
        mock_run.return_value = MagicMock(returncode=2, stdout="", stderr="fatal: broken")
        old, new = text_files

        result = runner.invoke(cli, ["diff", str(old), str(new), "--producer", "git"])

        assert result.exit_code != 0
        assert "fatal: broken" in result.output


class TestApplyCommand:
    """Tests for the apply command."""

    def test_preview_leaves_target(
        self, runner: CliRunner, patch_file: Path, numbered_file: Path, numbered_content: str
    ) -> None:
        """Test that applying without --write only shows the review."""
        result = runner.invoke(cli, ["apply", str(patch_file), str(numbered_file), "-f", "json"])

        assert result.exit_code == 0
        assert json.loads(result.output)["summary"]["edits"] == 2
        assert numbered_file.read_text(encoding="utf-8") == numbered_content

    def test_write(
        self,
        runner: CliRunner,
        patch_file: Path,
        numbered_file: Path,
        numbered_content_edited: str,
    ) -> None:
        """Test writing the patched content back."""
        result = runner.invoke(cli, ["apply", str(patch_file), str(numbered_file), "--write"])

        assert result.exit_code == 0
        assert "Patched" in result.output
        assert numbered_file.read_text(encoding="utf-8") == numbered_content_edited

    def test_check_ok(self, runner: CliRunner, patch_file: Path, numbered_file: Path) -> None:
        """Test checking a patch that applies."""
        result = runner.invoke(cli, ["apply", str(patch_file), str(numbered_file), "--check"])

        assert result.exit_code == 0
        assert "All 2 edits apply cleanly" in result.output

    def test_check_failure(self, runner: CliRunner, patch_file: Path, tmp_path: Path) -> None:
        """Test checking a patch against content that lacks the search texts."""
        target = tmp_path / "other.txt"
        target.write_text("nothing to see\n", encoding="utf-8")

        result = runner.invoke(cli, ["apply", str(patch_file), str(target), "--check"])

        assert result.exit_code == 1
        assert "2 of 2 edits cannot be applied" in result.output

    def test_failure_aborts(
        self, runner: CliRunner, patch_file: Path, tmp_path: Path
    ) -> None:
        """Test that a missing search text aborts and writes nothing."""
        target = tmp_path / "other.txt"
        target.write_text("line 2\nline 3\n", encoding="utf-8")

        result = runner.invoke(cli, ["apply", str(patch_file), str(target), "--write"])

        assert result.exit_code != 0
        assert "Search pattern not found" in result.output
        assert target.read_text(encoding="utf-8") == "line 2\nline 3\n"

    @patch(
        "diff_review.review.processor.DiffReviewProcessor.process",
        side_effect=DiffProducerFailed("fatal: broken", returncode=2),
    )
    def test_review_failure_writes_nothing(
        self,
        mock_process: MagicMock,
        runner: CliRunner,
        patch_file: Path,
        numbered_file: Path,
        numbered_content: str,
    ) -> None:
        """Test that a failing review leaves TARGET untouched."""
        result = runner.invoke(cli, ["apply", str(patch_file), str(numbered_file), "--write"])

        assert result.exit_code != 0
        assert "fatal: broken" in result.output
        assert "Patched" not in result.output
        assert numbered_file.read_text(encoding="utf-8") == numbered_content

    def test_reverse(
        self,
        runner: CliRunner,
        patch_file: Path,
        tmp_path: Path,
        numbered_content: str,
        numbered_content_edited: str,
    ) -> None:
        """Test undoing a patch that was already applied."""
        target = tmp_path / "edited.txt"
        target.write_text(numbered_content_edited, encoding="utf-8")

        result = runner.invoke(
            cli, ["apply", str(patch_file), str(target), "--reverse", "--write"]
        )

        assert result.exit_code == 0
        assert target.read_text(encoding="utf-8") == numbered_content

    def test_markup_in_bodies(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test search text that looks like tag grammar markup."""
        patch_path = tmp_path / "markup.patch"
        patch_path.write_text(
            "<<<<<<< SEARCH\na = '</SEARCH>'\n=======\na = '</DIFF>'\n>>>>>>> REPLACE\n",
            encoding="utf-8",
        )
        target = tmp_path / "markup.py"
        target.write_text("a = '</SEARCH>'\nb = 2\n", encoding="utf-8")

        result = runner.invoke(
            cli, ["apply", str(patch_path), str(target), "--write", "-f", "json"]
        )

        assert result.exit_code == 0
        assert target.read_text(encoding="utf-8") == "a = '</DIFF>'\nb = 2\n"

    def test_partial(self, runner: CliRunner, patch_file: Path, tmp_path: Path) -> None:
        """Test keeping the edits before the first failure."""
        target = tmp_path / "other.txt"
        target.write_text("line 2\nline 3\n", encoding="utf-8")

        result = runner.invoke(
            cli, ["apply", str(patch_file), str(target), "--partial", "--write"]
        )

        assert result.exit_code == 0
        assert "Applied 1 of 2 edits" in result.output
        assert target.read_text(encoding="utf-8") == "LINE TWO\nline 3\n"

    def test_new_file(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test creating a file from an empty search block."""
        patch_path = tmp_path / "create.patch"
        patch_path.write_text(
            "<<<<<<< SEARCH\n=======\n// New content\n>>>>>>> REPLACE\n", encoding="utf-8"
        )
        target = tmp_path / "created.js"

        result = runner.invoke(cli, ["apply", str(patch_path), str(target), "--write"])

        assert result.exit_code == 0
        assert target.read_text(encoding="utf-8") == "// New content"

    def test_not_a_patch(self, runner: CliRunner, numbered_file: Path, tmp_path: Path) -> None:
        """Test that prose is rejected."""
        patch_path = tmp_path / "prose.txt"
        patch_path.write_text("Please change line 2.\n", encoding="utf-8")

        result = runner.invoke(cli, ["apply", str(patch_path), str(numbered_file)])

        assert result.exit_code != 0
        assert "not correctly formatted" in result.output


class TestReviewCommand:
    """Tests for the review command."""

    def test_record(self, runner: CliRunner, record_file: Path) -> None:
        """Test reviewing a stored record."""
        result = runner.invoke(cli, ["review", str(record_file), "-f", "json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["file_name"] == "numbers.txt"
        assert [hunk["id"] for hunk in data["hunks"]] == ["0-6", "15-22"]

    def test_accept_one_hunk(
        self, runner: CliRunner, record_file: Path, numbered_content: str
    ) -> None:
        """Test printing the content with only one hunk accepted."""
        result = runner.invoke(cli, ["review", str(record_file), "--accept", "0-6"])

        assert result.exit_code == 0
        assert result.output == numbered_content.replace("line 2\n", "LINE TWO\n")

    def test_accept_unknown_hunk(self, runner: CliRunner, record_file: Path) -> None:
        """Test that an unknown hunk id is rejected."""
        result = runner.invoke(cli, ["review", str(record_file), "--accept", "1-2"])

        assert result.exit_code != 0
        assert "Unknown hunk id" in result.output

    def test_edit_tool_payload(
        self, runner: CliRunner, numbered_file: Path, tmp_path: Path
    ) -> None:
        """Test reviewing an Edit tool payload against the file on disk."""
        payload = tmp_path / "edit.json"
        payload.write_text(json.dumps({
            "file_path": str(numbered_file),
            "old_string": "line 5\n",
            "new_string": "line five\n",
        }), encoding="utf-8")

        result = runner.invoke(cli, ["review", str(payload), "--tool", "edit", "-f", "json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["summary"]["edits"] == 1
        assert data["summary"]["added_lines"] == 1

    def test_write_tool_payload_new_file(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test reviewing a Write tool payload for a file that does not exist."""
        payload = tmp_path / "write.json"
        payload.write_text(json.dumps({
            "file_path": str(tmp_path / "brand_new.py"),
            "content": "print('hi')\n",
        }), encoding="utf-8")

        result = runner.invoke(cli, ["review", str(payload), "--tool", "write", "-f", "json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["summary"]["added_lines"] == 1
        assert data["summary"]["removed_lines"] == 0


class TestStoreCommands:
    """Tests for the store command group."""

    def test_save_list_show_remove(
        self, runner: CliRunner, record_file: Path, tmp_path: Path
    ) -> None:
        """Test the life cycle of a stored record."""
        store_path = tmp_path / "store.json"

        saved = runner.invoke(cli, ["review", str(record_file), "--save", str(store_path)])
        assert saved.exit_code == 0
        assert "Saved to:" in saved.output

        listed = runner.invoke(cli, ["store", "--path", str(store_path), "list", "-f", "json"])
        assert listed.exit_code == 0
        assert json.loads(listed.output)["results"][0]["file_path"] == "numbers.txt"

        shown = runner.invoke(
            cli, ["store", "--path", str(store_path), "show", "numbers.txt", "-f", "json"]
        )
        assert shown.exit_code == 0
        assert json.loads(shown.output)["summary"]["edits"] == 2

        removed = runner.invoke(cli, ["store", "--path", str(store_path), "remove", "numbers.txt"])
        assert removed.exit_code == 0
        assert "Removed" in removed.output

    def test_show_missing(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test showing a record that was never stored."""
        store_path = tmp_path / "store.json"

        result = runner.invoke(cli, ["store", "--path", str(store_path), "show", "nope.txt"])

        assert result.exit_code != 0
        assert "No stored edit for nope.txt" in result.output

    def test_list_empty(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test listing an empty store."""
        store_path = tmp_path / "store.json"

        result = runner.invoke(cli, ["store", "--path", str(store_path), "list"])

        assert result.exit_code == 0
        assert "No stored edits." in result.output

    def test_clear(self, runner: CliRunner, record_file: Path, tmp_path: Path) -> None:
        """Test clearing the store."""
        store_path = tmp_path / "store.json"
        runner.invoke(cli, ["review", str(record_file), "--save", str(store_path)])

        result = runner.invoke(cli, ["store", "--path", str(store_path), "clear"])

        assert result.exit_code == 0
        assert json.loads(store_path.read_text(encoding="utf-8")) == {}
