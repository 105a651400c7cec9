"""Data models for zotlink."""
