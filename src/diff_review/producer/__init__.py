"""
Diff producer package for diff review.

Producers turn two contents into unified diff text: in process with
difflib, or by invoking git.
"""

from diff_review.producer.base import (
    BaseDiffProducer,
    get_producer,
    register_producer,
)
from diff_review.producer.difflib_producer import DifflibDiffProducer
from diff_review.producer.git_producer import GitDiffProducer

__all__ = [
    "BaseDiffProducer",
    "DifflibDiffProducer",
    "GitDiffProducer",
    "get_producer",
    "register_producer",
]
