"""
Diff Review

Turns textual change descriptions into structured, line-addressable change
sets. It parses unified diffs against the full file contents, applies
search/replace patches, groups changes into hunks and aligns each hunk for
side-by-side review.
"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("diff-review")
except PackageNotFoundError:
    __version__ = "0.1.0"

# Public API exports
__all__ = [
    "__version__",
]
