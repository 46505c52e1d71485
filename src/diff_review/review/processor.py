"""
Review processor.

Ties the pieces together for one proposed file edit: parse its patch, apply
the edits in order, diff every step and group the changes into hunks ready
for side-by-side review.
"""

import logging
from typing import Optional

from pydantic import BaseModel, Field

from diff_review.config import Config
from diff_review.models.alignment import SideLine
from diff_review.models.diff import DiffGroup, FileChangeDiff
from diff_review.models.patch import SearchReplace
from diff_review.models.result import DiffResult
from diff_review.parser.diff_parser import UnifiedDiffParser
from diff_review.parser.patch_parser import PatchParser
from diff_review.patching.applier import PatchApplier
from diff_review.producer.base import BaseDiffProducer, get_producer
from diff_review.review.alignment import AlignmentRenderer
from diff_review.review.grouping import group_changes

logger = logging.getLogger(__name__)


class EditReview(BaseModel):
    """One search/replace edit and the hunks it produces."""

    edit: SearchReplace = Field(description="The edit")
    file_change: FileChangeDiff = Field(
        description="Content before and after this edit, with its line changes",
    )
    groups: list[DiffGroup] = Field(
        default_factory=list,
        description="Hunks of this edit that contain changes",
    )

    class Config:
        frozen = True


class ReviewState(BaseModel):
    """Everything needed to review one ``DiffResult``."""

    result: DiffResult = Field(description="The edit record, with updated content filled in")
    edits: list[EditReview] = Field(
        default_factory=list,
        description="Per-edit reviews, in application order",
    )
    file_change: FileChangeDiff = Field(description="Whole-file change set")
    groups: list[DiffGroup] = Field(
        default_factory=list,
        description="Partition of the whole-file change set into hunks",
    )

    class Config:
        frozen = True

    @property
    def changed_groups(self) -> list[DiffGroup]:
        """Groups that contain at least one change."""
        return [group for group in self.groups if group.has_changes]

    def aligned(self, include_unchanged: bool = False) -> list[tuple[DiffGroup, list[SideLine]]]:
        """Side-by-side rows for each group."""
        renderer = AlignmentRenderer()
        groups = self.groups if include_unchanged else self.changed_groups
        return [(group, renderer.render(group)) for group in groups]


class DiffReviewProcessor:
    """
    Build review states for proposed file edits.

    All steps are pure except the diff producer, which may run an external
    tool.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        producer: Optional[BaseDiffProducer] = None,
    ) -> None:
        """
        Initialize the processor.

        Args:
            config: Configuration. Defaults are used when omitted.
            producer: Diff producer. Built from ``config.diff`` when omitted.
        """
        self.config = config or Config()
        self.producer = producer or self._build_producer()
        self.diff_parser = UnifiedDiffParser(strict=self.config.diff.strict_hunk_headers)
        self.patch_parser = PatchParser()
        self.applier = PatchApplier(require_unique=self.config.patch.require_unique_match)

    def _build_producer(self) -> BaseDiffProducer:
        diff_config = self.config.diff
        if diff_config.producer == "git":
            return get_producer(
                "git",
                context_lines=diff_config.context_lines,
                git_executable=diff_config.git_executable,
                timeout=diff_config.timeout,
            )
        return get_producer("difflib", context_lines=diff_config.context_lines)

    def compute_changes(self, old_content: str, new_content: str) -> FileChangeDiff:
        """
        Diff two contents into line changes.

        Raises:
            DiffProducerFailed: If the diff producer fails.
            MalformedHunkHeader: In strict mode, for a malformed hunk header.
        """
        diff_text = self.producer.produce(old_content, new_content)
        changes = self.diff_parser.parse(old_content, new_content, diff_text)
        return FileChangeDiff(old_content=old_content, new_content=new_content, changes=changes)

    def group(self, file_change: FileChangeDiff) -> list[DiffGroup]:
        """Partition a change set into hunks."""
        return group_changes(file_change.changes, self.config.review.context_lines)

    def process(self, result: DiffResult) -> ReviewState:
        """
        Build the review state of one edit record.

        The record's parsed ``edits`` are applied when present; otherwise its
        patch text is parsed. Without either, the record's ``original`` and
        ``updated`` contents are compared directly.

        Args:
            result: The edit record.

        Returns:
            A new review state; ``result`` itself is never modified.

        Raises:
            MalformedPatch: If the record's patch text cannot be parsed.
            PatchApplyError: If an edit cannot be applied.
            DiffProducerFailed: If the diff producer fails.
        """
        if not result.edits and not result.diff:
            file_change = self.compute_changes(result.original, result.updated)
            processed = result.model_copy(update={
                "storage": result.storage if result.storage is not None else result.original,
            })
            return ReviewState(
                result=processed,
                file_change=file_change,
                groups=self.group(file_change),
            )

        edits = result.edits or self.patch_parser.parse(result.diff)
        reviews: list[EditReview] = []
        content = result.original
        for edit in edits:
            updated = self.applier.apply_one(edit, content)
            if updated == content:
                logger.warning("Edit leaves %s unchanged", result.file_path or "content")
            step = self.compute_changes(content, updated)
            reviews.append(EditReview(
                edit=edit,
                file_change=step,
                groups=[group for group in self.group(step) if group.has_changes],
            ))
            content = updated

        file_change = self.compute_changes(result.original, content)
        processed = result.model_copy(update={
            "updated": content,
            "storage": result.storage if result.storage is not None else result.original,
        })
        logger.info(
            "Reviewed %d edit(s) for %s: +%d -%d",
            len(edits),
            result.file_path or "content",
            file_change.added_lines,
            file_change.removed_lines,
        )
        return ReviewState(
            result=processed,
            edits=reviews,
            file_change=file_change,
            groups=self.group(file_change),
        )
