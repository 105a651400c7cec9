"""
zotlink - link knowledge-base notes to Zotero PDF attachments.

Matches note filenames against the PDF filenames kept in a Zotero storage
directory and inserts an ``[Open in Zotero](zotero://...)`` deep link as the
sixth line of every matched note.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("zotlink")
except PackageNotFoundError:
    __version__ = "0.3.0"
