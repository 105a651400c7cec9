"""Note discovery below the notes root."""
import logging
from pathlib import Path
from typing import Iterator

from zotlink.matching.normalizer import normalize
from zotlink.models.schema import NoteRecord

logger = logging.getLogger(__name__)


class NoteScanner:
    """Recursively yields a NoteRecord for every note file, in path order.

    Args:
        root: Notes root directory.
        note_suffix: File extension identifying notes.
        skip_hidden: Ignore files inside dot-directories (``.obsidian/``, ``.trash/``).
    """

    def __init__(self, root: Path, note_suffix: str = ".md", skip_hidden: bool = False) -> None:
        self.root = Path(root)
        self.note_suffix = note_suffix
        self.skip_hidden = skip_hidden

    def __iter__(self) -> Iterator[NoteRecord]:
        for note_path in sorted(self.root.rglob(f"*{self.note_suffix}")):
            if not note_path.is_file():
                continue
            if self.skip_hidden and any(
                part.startswith(".") for part in note_path.relative_to(self.root).parts
            ):
                logger.debug(f"Skipping hidden note {note_path}")
                continue
            name = note_path.name[: -len(self.note_suffix)]
            yield NoteRecord(path=note_path, name=name, token=normalize(name))
