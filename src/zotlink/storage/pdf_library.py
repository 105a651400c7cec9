"""Read-only view of a Zotero storage directory.

Zotero keeps each attachment in ``<storage>/<item-key>/<file>.pdf``; the
item key (the directory name) is what the ``zotero://`` link points at.
"""
import logging
from pathlib import Path
from typing import Iterator, List, Optional

from pydantic import ValidationError

from zotlink.matching.normalizer import normalize
from zotlink.models.schema import PdfRecord

logger = logging.getLogger(__name__)


class PdfLibrary:
    """Enumerates PDF records below a storage root.

    Items are visited in name order, then the PDFs inside each item in name
    order. With ``cache_tokens`` the corpus is walked and normalized once and
    the same records are replayed for every note; without it the directory
    tree is walked again on each call. Both produce the same sequence for an
    unchanged tree.

    Args:
        root: Zotero storage directory.
        pdf_suffix: File extension identifying attachments.
        cache_tokens: Keep the normalized corpus for the whole run.
    """

    def __init__(
        self,
        root: Path,
        pdf_suffix: str = ".pdf",
        cache_tokens: bool = True,
    ) -> None:
        self.root = Path(root)
        self.pdf_suffix = pdf_suffix
        self.cache_tokens = cache_tokens
        self._cache: Optional[List[PdfRecord]] = None

    def __iter__(self) -> Iterator[PdfRecord]:
        if not self.cache_tokens:
            return self._walk()
        if self._cache is None:
            self._cache = list(self._walk())
            logger.info(f"Indexed {len(self._cache)} PDFs from {self.root}")
        return iter(self._cache)

    def invalidate(self) -> None:
        """Drop the cached corpus so the next iteration re-reads the tree."""
        self._cache = None

    def _item_dirs(self) -> List[Path]:
        return sorted(p for p in self.root.iterdir() if p.is_dir())

    def _walk(self) -> Iterator[PdfRecord]:
        for item_dir in self._item_dirs():
            try:
                pdf_files = sorted(
                    p for p in item_dir.glob(f"*{self.pdf_suffix}") if p.is_file()
                )
            except OSError as e:
                logger.warning(f"Cannot list storage item {item_dir.name}: {e}")
                continue
            for pdf_path in pdf_files:
                name = pdf_path.name[: -len(self.pdf_suffix)]
                try:
                    record = PdfRecord(
                        item_id=item_dir.name,
                        path=pdf_path,
                        name=name,
                        token=normalize(name),
                    )
                except ValidationError as e:
                    logger.warning(f"Skipping PDF {pdf_path}: {e.errors()[0]['msg']}")
                    continue
                yield record
