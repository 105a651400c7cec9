"""Shared helpers for zotlink tests."""

LINK_PREFIX = "[Open in Zotero](zotero://open-pdf/library/items/"


def note_lines(count: int) -> list:
    """Body lines L1..Ln for a note."""
    return [f"L{i}" for i in range(1, count + 1)]


def zotero_link(item_id: str) -> str:
    return f"{LINK_PREFIX}{item_id})"
