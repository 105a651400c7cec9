"""Service layer for zotlink."""
