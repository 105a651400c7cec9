"""Filename normalization.

Reduces a note or PDF filename to a lowercase, letters-only token so that
``Smith-MachineLearningBasics2020`` and ``Smith - Machine Learning Basics``
compare equal. The steps run in a fixed order; each one works on the output
of the previous step.
"""
import re

MAX_TOKEN_LENGTH = 80

_ET_AL = "et al."
# Author segment: everything up to the first dash, plus any dashes right after it
_AUTHOR_PREFIX = re.compile(r"^[^-]*-+")
# Any 4-digit run starting with 1 or 2, not only plausible years
_YEAR_LIKE = re.compile(r"[12][0-9]{3}")
_NON_LETTER = re.compile(r"[^a-zA-Z]")


def strip_author_segment(name: str) -> str:
    """Remove the leading author segment; names without a dash are unchanged."""
    if "-" not in name:
        return name
    return _AUTHOR_PREFIX.sub("", name, count=1)


def normalize(name: str) -> str:
    """Return the canonical comparison token for a filename (without extension).

    Steps:
        1. lowercase
        2. drop every literal ``et al.`` (the period is required)
        3. drop the author segment up to and including the first dash run
        4. drop every 4-digit run in 1000-2999
        5. drop every character that is not an ASCII letter
        6. keep the first 80 characters

    Examples:
        >>> normalize("Smith - Machine Learning Basics")
        'machinelearningbasics'
        >>> normalize("Smith-MachineLearningBasics2020")
        'machinelearningbasics'
    """
    token = name.lower()
    token = token.replace(_ET_AL, "")
    token = strip_author_segment(token)
    token = _YEAR_LIKE.sub("", token)
    token = _NON_LETTER.sub("", token)
    return token[:MAX_TOKEN_LENGTH]
