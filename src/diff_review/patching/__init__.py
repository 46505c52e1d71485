"""
Patching package for diff review.
"""

from diff_review.patching.applier import PatchApplier, apply_patch

__all__ = [
    "PatchApplier",
    "apply_patch",
]
