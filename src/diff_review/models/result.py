"""
DiffResult model.

A named, path-addressed record of one file's proposed transformation. A new
edit produces a new record; records serialize to JSON field for field using
camelCase keys. Parsed edits are kept in memory only; the patch text is what
gets persisted.
"""

from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from diff_review.models.patch import SearchReplace


class DiffResult(BaseModel):
    """One file edit proposal."""

    file_path: str = Field(alias="filePath", description="Path of the edited file")
    file_name: str = Field(alias="fileName", description="Display name of the file")
    original: str = Field(description="Content before the edit")
    updated: str = Field(description="Content after the edit (may be filled by review)")
    diff: Optional[str] = Field(
        default=None,
        description="Patch text describing the edit (delimiter or tag grammar)",
    )
    edits: Optional[list[SearchReplace]] = Field(
        default=None,
        exclude=True,
        description="Parsed operations of the patch, used instead of parsing ``diff``",
    )
    storage: Optional[str] = Field(
        default=None,
        description="Content to persist when the edit is accepted",
    )
    is_initial: bool = Field(
        default=False,
        alias="isInitial",
        description="Marks the empty placeholder record",
    )

    class Config:
        frozen = True
        populate_by_name = True

    @classmethod
    def for_file(
        cls,
        file_path: str,
        original: str,
        updated: str = "",
        diff: Optional[str] = None,
        storage: Optional[str] = None,
        edits: Optional[list[SearchReplace]] = None,
    ) -> "DiffResult":
        """Build a record whose display name is the file's base name."""
        return cls(
            file_path=file_path,
            file_name=Path(file_path).name,
            original=original,
            updated=updated,
            diff=diff,
            storage=storage,
            edits=edits,
        )

    @property
    def file_extension(self) -> Optional[str]:
        """File extension without the dot, if any."""
        suffix = Path(self.file_path).suffix
        return suffix[1:] if suffix else None

    def to_record(self) -> dict[str, Any]:
        """Serialize with the persisted (camelCase) field names."""
        return self.model_dump(by_alias=True)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "DiffResult":
        """Deserialize a persisted record."""
        return cls.model_validate(record)
