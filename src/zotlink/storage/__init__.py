"""Filesystem access for notes and the Zotero storage directory."""

from zotlink.storage.note_linker import NoteLinker
from zotlink.storage.note_scanner import NoteScanner
from zotlink.storage.pdf_library import PdfLibrary

__all__ = [
    "NoteLinker",
    "NoteScanner",
    "PdfLibrary",
]
