"""Link detection and insertion for note files.

A note counts as linked when its link line (line 6 by default) exists and
contains the marker, or, for notes shorter than that, when the last line
starts with a generated link. Insertion puts the link on that line and
pushes the rest of the note down by one; nothing else in the file changes.
"""
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import List

from zotlink.config import LINK_TEMPLATE
from zotlink.exceptions import ErrorCode, PathSafetyError, StorageError

logger = logging.getLogger(__name__)


def split_lines(text: str) -> List[str]:
    """Split on ``\\n`` only, keeping line endings; a final partial line is kept."""
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def insert_line(text: str, line: str, line_number: int) -> str:
    """Insert ``line`` so that it becomes line ``line_number`` of ``text``.

    Lines before the insertion point are kept verbatim. If the text has fewer
    lines than that, the line is appended after the existing content without
    blank-line padding. The line ending of the first line is reused.

    Examples:
        >>> insert_line("a\\nb\\n", "LINK", 2)
        'a\\nLINK\\nb\\n'
        >>> insert_line("a", "LINK", 6)
        'a\\nLINK\\n'
    """
    lines = split_lines(text)
    newline = "\r\n" if lines and lines[0].endswith("\r\n") else "\n"

    head = lines[: line_number - 1]
    tail = lines[line_number - 1:]
    if head and not head[-1].endswith("\n"):
        head[-1] += newline
    return "".join(head) + line + newline + "".join(tail)


class NoteLinker:
    """Reads and rewrites notes below a notes root.

    Args:
        notes_root: Only files resolving inside this directory are written.
        link_marker: Substring that identifies an existing link.
        link_line: 1-based line number holding the link.
        link_prefix: Start of a generated link line, used for short notes.
    """

    def __init__(
        self,
        notes_root: Path,
        link_marker: str = "zotero",
        link_line: int = 6,
        link_prefix: str = LINK_TEMPLATE.split("{item_id}")[0],
    ) -> None:
        self.notes_root = Path(notes_root).resolve()
        self.link_marker = link_marker
        self.link_line = link_line
        self.link_prefix = link_prefix

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def read_note(self, path: Path) -> str:
        """Read a note as text, keeping its original line endings."""
        try:
            with open(path, "r", encoding="utf-8", newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(
                f"Cannot read note: {e}",
                operation="read",
                path=str(path),
                code=ErrorCode.STORAGE_READ_FAILED,
                original_error=e,
            ) from e

    def has_link(self, path: Path) -> bool:
        """True if the link line exists and contains the marker.

        A note shorter than the link line had its link appended as the last
        line, so there the last line must start with ``link_prefix``.
        """
        lines = split_lines(self.read_note(path))
        if len(lines) >= self.link_line:
            return self.link_marker in lines[self.link_line - 1]
        return bool(lines) and lines[-1].startswith(self.link_prefix)

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def ensure_within_root(self, path: Path) -> Path:
        """Return the resolved path, or raise PathSafetyError if it escapes the root."""
        resolved = Path(path).resolve()
        if not resolved.is_relative_to(self.notes_root):
            raise PathSafetyError(str(path), str(self.notes_root))
        return resolved

    def insert_link(self, path: Path, link: str, dry_run: bool = False) -> bool:
        """Insert ``link`` as the link line of the note at ``path``.

        The safety check runs in dry-run mode as well, so a preview reports
        the same failures a real run would.

        Returns:
            True if the file was rewritten, False in dry-run mode.

        Raises:
            PathSafetyError: If the note resolves outside the notes root.
            StorageError: If the note cannot be read or replaced. The original
                file is left untouched in that case.
        """
        target = self.ensure_within_root(path)
        if dry_run:
            logger.debug(f"Dry run: would link {path}")
            return False

        updated = insert_line(self.read_note(target), link, self.link_line)

        # Write next to the note so the final replace stays on one filesystem
        temp_name = None
        try:
            fd, temp_name = tempfile.mkstemp(
                prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(updated)
            shutil.copymode(target, temp_name)
            os.replace(temp_name, target)
        except OSError as e:
            if temp_name is not None:
                try:
                    os.unlink(temp_name)
                except OSError:
                    logger.debug(f"Temp file already gone: {temp_name}")
            raise StorageError(
                f"Cannot rewrite note: {e}",
                operation="insert_link",
                path=str(path),
                code=ErrorCode.STORAGE_WRITE_FAILED,
                original_error=e,
            ) from e

        logger.info(f"Linked {target}")
        return True
