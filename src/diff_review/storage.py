"""
Persistent store of ``DiffResult`` records.

Records live in one JSON file keyed by file path, so there is at most one
pending edit per file.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from diff_review.models.result import DiffResult

logger = logging.getLogger(__name__)


class DiffResultStore:
    """JSON-file backed mapping of file path to ``DiffResult``."""

    def __init__(self, path: Path) -> None:
        """
        Initialize the store.

        Args:
            path: Location of the JSON file. Created on first save.
        """
        self.path = Path(path)

    def _load(self) -> dict[str, dict]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in store file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Store file {self.path} does not contain a JSON object")
        return data

    def _dump(self, records: dict[str, dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(records, indent=2, sort_keys=True), encoding="utf-8")

    def save(self, result: DiffResult) -> None:
        """Insert or replace the record of ``result.file_path``."""
        records = self._load()
        records[result.file_path] = result.to_record()
        self._dump(records)
        logger.debug("Saved diff result for %s", result.file_path)

    def get(self, file_path: str) -> Optional[DiffResult]:
        """Return the record of a file, or None."""
        record = self._load().get(file_path)
        return DiffResult.from_record(record) if record is not None else None

    def all(self) -> list[DiffResult]:
        """Return every record, ordered by file path."""
        records = self._load()
        return [DiffResult.from_record(records[key]) for key in sorted(records)]

    def remove(self, file_path: str) -> bool:
        """Remove the record of a file. Returns whether one existed."""
        records = self._load()
        if records.pop(file_path, None) is None:
            return False
        self._dump(records)
        return True

    def clear(self) -> None:
        """Remove every record."""
        self._dump({})
