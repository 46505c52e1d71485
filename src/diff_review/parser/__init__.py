"""
Parser package for diff review.

This package contains modules for:
- Line splitting with offset tables
- Empty-line tokenizing around external diff tools
- Unified diff parsing into line changes
- Search/replace patch parsing (delimiter and tag grammars)
"""

from diff_review.parser.diff_parser import UnifiedDiffParser, parse_unified_diff
from diff_review.parser.patch_parser import PatchParser, is_patch, parse_patch

__all__ = [
    "PatchParser",
    "UnifiedDiffParser",
    "is_patch",
    "parse_patch",
    "parse_unified_diff",
]
