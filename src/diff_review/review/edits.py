"""
Edit tool payloads.

Models for the JSON payloads of the Edit, MultiEdit and Write tools, and the
helpers that turn them into ``DiffResult`` records ready for review.
"""

import logging
import uuid
from typing import Optional

from pydantic import BaseModel, Field

from diff_review.models.patch import SearchReplace
from diff_review.models.result import DiffResult

logger = logging.getLogger(__name__)


class Edit(BaseModel):
    """One string replacement requested by the Edit or MultiEdit tool."""

    old_string: str = Field(description="Exact text to replace")
    new_string: str = Field(description="Replacement text")
    replace_all: bool = Field(default=False, description="Replace every occurrence")
    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()).upper(),
        description="Identifier carried into the tag grammar",
    )

    class Config:
        frozen = True

    def to_search_replace(self) -> SearchReplace:
        """Convert to a patch operation."""
        return SearchReplace(
            search=self.old_string,
            replace=self.new_string,
            id=self.id,
            replace_all=self.replace_all,
        )


class FileEdit(BaseModel):
    """
    Payload of the Edit and MultiEdit tools.

    MultiEdit sends ``edits``; Edit sends a single ``old_string`` /
    ``new_string`` pair at the top level.
    """

    file_path: str = Field(description="Path of the file to edit")
    edits: Optional[list[Edit]] = Field(default=None, description="MultiEdit operations")
    old_string: Optional[str] = Field(default=None, description="Edit tool search text")
    new_string: Optional[str] = Field(default=None, description="Edit tool replacement text")
    replace_all: Optional[bool] = Field(default=None, description="Edit tool replace-all flag")

    class Config:
        frozen = True

    @property
    def all_edits(self) -> list[Edit]:
        """Every edit in the payload, whichever form it came in."""
        if self.edits is not None:
            return list(self.edits)
        if self.old_string is not None and self.new_string is not None:
            return [Edit(
                old_string=self.old_string,
                new_string=self.new_string,
                replace_all=bool(self.replace_all),
            )]
        return []


class FileContent(BaseModel):
    """Payload of the Write tool."""

    file_path: str = Field(description="Path of the file to write")
    content: str = Field(description="Full new content of the file")

    class Config:
        frozen = True


def diff_result_for_edit(file_edit: FileEdit, current_content: str) -> DiffResult:
    """
    Build the record of an Edit or MultiEdit proposal.

    Args:
        file_edit: The tool payload.
        current_content: Content of the file on disk.

    Returns:
        A record whose patch holds every edit; ``updated`` is left empty for
        the review processor to fill.
    """
    operations = [edit.to_search_replace() for edit in file_edit.all_edits]
    if not operations:
        logger.warning("Edit payload for %s has no edits", file_edit.file_path)
    return DiffResult.for_file(
        file_path=file_edit.file_path,
        original=current_content,
        diff="\n".join(operation.to_tagged() for operation in operations),
        storage=current_content,
        edits=operations,
    )


def diff_result_for_write(
    file_content: FileContent,
    current_content: Optional[str] = None,
) -> DiffResult:
    """
    Build the record of a Write proposal.

    Args:
        file_content: The tool payload.
        current_content: Content of the file on disk, or None when the file
            does not exist yet.

    Returns:
        For an existing file, a record replacing the whole content. For a new
        file, a record whose single edit has an empty search text, so the
        review shows only additions.
    """
    edit_id = str(uuid.uuid4()).upper()
    if current_content is None:
        change = SearchReplace(search="", replace=file_content.content, id=edit_id)
        return DiffResult.for_file(
            file_path=file_content.file_path,
            original="",
            updated=file_content.content,
            diff=change.to_tagged(),
            storage=file_content.content,
            edits=[change],
        )

    change = SearchReplace(search=current_content, replace=file_content.content, id=edit_id)
    return DiffResult.for_file(
        file_path=file_content.file_path,
        original=current_content,
        diff=change.to_tagged(),
        storage=file_content.content,
        edits=[change],
    )
