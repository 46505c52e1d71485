"""
Diff producer that shells out to ``git diff --no-index``.

Both contents go through the empty-line tokenizer before being written to
temporary files, and the tool's output is decoded back.
"""

import logging
import subprocess
import tempfile
from pathlib import Path

from diff_review.errors import DiffProducerFailed
from diff_review.parser.empty_lines import decode_diff, encode
from diff_review.producer.base import BaseDiffProducer, register_producer, strip_file_headers

logger = logging.getLogger(__name__)

# git diff exits with 0 for no differences and 1 when differences are found
_SUCCESS_CODES = (0, 1)


@register_producer("git")
class GitDiffProducer(BaseDiffProducer):
    """
    Produce unified diffs with git.

    Works outside of any repository thanks to ``--no-index``.
    """

    def __init__(
        self,
        context_lines: int = 3,
        git_executable: str = "git",
        timeout: int = 30,
    ) -> None:
        """
        Initialize the git producer.

        Args:
            context_lines: Unchanged lines shown around each change.
            git_executable: Name or path of the git binary.
            timeout: Timeout in seconds for one git invocation.
        """
        self.context_lines = context_lines
        self.git_executable = git_executable
        self.timeout = timeout

    def build_command(self, old_path: Path, new_path: Path) -> list[str]:
        """Build the git command line for two files."""
        return [
            self.git_executable,
            "diff",
            "--no-index",
            "--no-color",
            f"-U{self.context_lines}",
            str(old_path),
            str(new_path),
        ]

    def produce(self, old_content: str, new_content: str) -> str:
        """
        Produce the unified diff body between two contents.

        Raises:
            DiffProducerFailed: If git is missing, times out, or exits with
                a status other than 0 or 1.
        """
        with tempfile.TemporaryDirectory(prefix="diff-review-") as tmp_dir:
            old_path = Path(tmp_dir) / "before.txt"
            new_path = Path(tmp_dir) / "after.txt"
            old_path.write_text(encode(old_content), encoding="utf-8", newline="")
            new_path.write_text(encode(new_content), encoding="utf-8", newline="")

            cmd = self.build_command(old_path, new_path)
            logger.debug("Running %s", " ".join(cmd))
            try:
                result = subprocess.run(
                    cmd,
                    capture_output=True,
                    text=True,
                    encoding="utf-8",
                    timeout=self.timeout,
                )
            except FileNotFoundError as e:
                raise DiffProducerFailed(f"git executable not found: {self.git_executable}") from e
            except subprocess.TimeoutExpired as e:
                raise DiffProducerFailed(f"git diff timed out after {self.timeout}s") from e

        if result.returncode not in _SUCCESS_CODES:
            error_output = (result.stderr or "").strip() or "Unknown error"
            raise DiffProducerFailed(error_output, returncode=result.returncode)

        return decode_diff(strip_file_headers(result.stdout or ""))
