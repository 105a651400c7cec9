"""Token matching between notes and PDFs."""
import logging
from typing import Iterable, Optional, Tuple

from zotlink.models.schema import MatchKind, PdfRecord

logger = logging.getLogger(__name__)

# Shorter token must be at least this percentage of the longer one
MIN_LENGTH_RATIO = 60
# Positional similarity (percent) needed for a fuzzy match
MIN_SIMILARITY = 90


def positional_similarity(a: str, b: str) -> int:
    """Percentage of index-aligned characters that are equal.

    Characters are compared at the same index only, so one inserted
    character near the start shifts everything after it out of alignment.
    This is not an edit distance.
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 100
    matches = sum(1 for x, y in zip(a, b) if x == y)
    return matches * 100 // longest


def passes_length_gate(shorter: str, longer: str) -> bool:
    """True unless the shorter token is under 60% of the longer one."""
    # ceil(len(longer) * 0.6) in integer arithmetic
    minimum = -(-len(longer) * MIN_LENGTH_RATIO // 100)
    return len(shorter) >= minimum


def match_kind(a: str, b: str) -> MatchKind:
    """Classify how two normalized tokens relate.

    Args:
        a: Normalized token (usually the note).
        b: Normalized token (usually the PDF).

    Returns:
        ``EXACT`` for equal tokens; ``FUZZY`` when the shorter token passes the
        length gate and is either a substring of the longer one or at least
        90% positionally similar; ``NONE`` otherwise.
    """
    if a == b:
        return MatchKind.EXACT

    shorter, longer = (a, b) if len(a) <= len(b) else (b, a)
    if not passes_length_gate(shorter, longer):
        return MatchKind.NONE

    if shorter in longer:
        return MatchKind.FUZZY

    if positional_similarity(a, b) >= MIN_SIMILARITY:
        return MatchKind.FUZZY
    return MatchKind.NONE


def find_match(
    token: str, pdfs: Iterable[PdfRecord]
) -> Tuple[Optional[PdfRecord], MatchKind]:
    """Return the first PDF whose token matches, in iteration order.

    The iterable is consumed lazily and abandoned at the first ``EXACT`` or
    ``FUZZY`` hit, so later PDFs are never normalized or compared.
    """
    for pdf in pdfs:
        kind = match_kind(token, pdf.token)
        if kind != MatchKind.NONE:
            logger.debug(f"{kind.value} match: {token!r} ~ {pdf.token!r} ({pdf.item_id})")
            return pdf, kind
    return None, MatchKind.NONE
