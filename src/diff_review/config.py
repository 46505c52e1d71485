"""
Settings for diff producers, hunk grouping, patching and output.

Every section has defaults, so an empty or missing file is a valid
configuration. Unknown keys are rejected.
"""

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

CONFIG_FILE_NAMES = (".diff-review.yaml", ".diff-review.yml")


class DiffConfig(BaseModel):
    """Configuration for producing and parsing unified diffs."""

    producer: Literal["difflib", "git"] = Field(
        default="difflib",
        description="Diff producer used to compare two contents.",
    )
    context_lines: int = Field(
        default=3,
        ge=0,
        description="Unchanged lines the producer emits around each change.",
    )
    git_executable: str = Field(
        default="git",
        description="Name or path of the git binary for the git producer.",
    )
    timeout: int = Field(
        default=30,
        gt=0,
        description="Timeout in seconds for one external diff invocation.",
    )
    strict_hunk_headers: bool = Field(
        default=False,
        description="Fail on a malformed hunk header instead of skipping it.",
    )


class ReviewConfig(BaseModel):
    """Configuration for grouping changes into hunks."""

    context_lines: int = Field(
        default=3,
        ge=0,
        description="Unchanged lines kept on each side of a change in a hunk.",
    )


class PatchConfig(BaseModel):
    """Configuration for applying search/replace patches."""

    require_unique_match: bool = Field(
        default=False,
        description="Reject search text that occurs more than once.",
    )


class OutputConfig(BaseModel):
    """Rendering options for review output."""

    colorize: bool = Field(
        default=True,
        description="Use colors in terminal output.",
    )
    show_unchanged_groups: bool = Field(
        default=False,
        description="Also render groups that contain no change.",
    )
    verbose: bool = Field(
        default=False,
        description="Log debug details while processing.",
    )


class Config(BaseModel):
    """Root configuration model for diff review."""

    diff: DiffConfig = Field(default_factory=DiffConfig)
    review: ReviewConfig = Field(default_factory=ReviewConfig)
    patch: PatchConfig = Field(default_factory=PatchConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    class Config:
        """Pydantic model configuration."""

        extra = "forbid"


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Read a `.diff-review.yaml` file into a Config.

    Args:
        config_path: YAML file to read. Defaults are used when None.

    Returns:
        The validated configuration.

    Raises:
        FileNotFoundError: If config_path does not exist.
        ValueError: If the file is not valid YAML or has unknown or
            badly typed settings.
    """
    if config_path is None:
        return Config()

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in configuration file: {e}") from e

    try:
        return Config.model_validate(data or {})
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {config_path}: {e}") from e


def find_config_file(start_path: Path) -> Optional[Path]:
    """
    Find the nearest configuration file at or above start_path.

    `.diff-review.yaml` wins over `.diff-review.yml` in the same directory.
    """
    directory = start_path.resolve()
    for candidate_dir in (directory, *directory.parents):
        for name in CONFIG_FILE_NAMES:
            candidate = candidate_dir / name
            if candidate.is_file():
                return candidate
    return None
