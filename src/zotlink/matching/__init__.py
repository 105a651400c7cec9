"""Filename normalization and similarity matching."""

from zotlink.matching.matcher import find_match, match_kind
from zotlink.matching.normalizer import normalize

__all__ = [
    "normalize",
    "match_kind",
    "find_match",
]
