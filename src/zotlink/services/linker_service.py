"""Service layer that links notes to Zotero PDFs."""

import logging
from pathlib import Path
from typing import Callable, Iterable, Optional

from zotlink.config import LinkerConfig, load_config
from zotlink.exceptions import PathSafetyError, StorageError
from zotlink.matching.matcher import find_match
from zotlink.models.schema import (
    MatchKind,
    MatchResult,
    NoteRecord,
    Outcome,
    PdfRecord,
    ScanReport,
)
from zotlink.observability import timed_operation
from zotlink.storage.note_linker import NoteLinker
from zotlink.storage.note_scanner import NoteScanner
from zotlink.storage.pdf_library import PdfLibrary

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[NoteRecord], None]


class LinkerService:
    """Runs one pass over a notes tree against a Zotero storage directory.

    Notes are handled one at a time in path order. Each note ends in exactly
    one bucket of the returned ScanReport; a note that cannot be read or
    written safely is recorded as failed and the run moves on.
    """

    def __init__(
        self,
        storage_path: Path,
        notes_path: Path,
        dry_run: bool = False,
        settings: Optional[LinkerConfig] = None,
        library: Optional[Iterable[PdfRecord]] = None,
    ) -> None:
        self.settings = settings or load_config()
        self.storage_path = Path(storage_path)
        self.notes_path = Path(notes_path)
        self.dry_run = dry_run
        self.library = library if library is not None else PdfLibrary(
            self.storage_path,
            pdf_suffix=self.settings.pdf_suffix,
            cache_tokens=self.settings.cache_pdf_tokens,
        )
        self.scanner = NoteScanner(
            self.notes_path,
            note_suffix=self.settings.note_suffix,
            skip_hidden=self.settings.skip_hidden,
        )
        self.linker = NoteLinker(
            self.notes_path,
            link_marker=self.settings.link_marker,
            link_line=self.settings.link_line,
            link_prefix=self.settings.link_prefix,
        )

    def match_note(self, note: NoteRecord) -> MatchResult:
        """Search the PDF corpus for the note; first match in order wins."""
        pdf, kind = find_match(note.token, self.library)
        return MatchResult(note=note, pdf=pdf, kind=kind)

    def process_note(self, note: NoteRecord, report: ScanReport) -> NoteRecord:
        """Move a single note to its terminal state and record it."""
        try:
            note.has_link = self.linker.has_link(note.path)
        except StorageError as e:
            logger.warning(f"Skipping unreadable note {note.path}: {e}")
            note.outcome = Outcome.FAILED
            report.record(note, reason=e.message)
            return note

        if note.has_link:
            note.outcome = Outcome.SKIPPED
            report.record(note)
            return note

        result = self.match_note(note)
        if not result.matched:
            note.outcome = Outcome.UNMATCHED
            report.record(note)
            return note

        link = self.settings.format_link(result.pdf.item_id)
        try:
            self.linker.insert_link(note.path, link, dry_run=self.dry_run)
        except (PathSafetyError, StorageError) as e:
            logger.error(f"Error: {e.message}")
            note.outcome = Outcome.FAILED
            report.record(note, pdf=result.pdf, reason=e.message)
            return note

        if not self.dry_run:
            note.has_link = True
        note.outcome = (
            Outcome.MATCHED if result.kind == MatchKind.EXACT else Outcome.FUZZY_MATCHED
        )
        report.record(note, pdf=result.pdf)
        if note.outcome == Outcome.FUZZY_MATCHED:
            logger.info(f"Fuzzy match: {note.name} -> {result.pdf.name}")
        return note

    def run(self, progress: Optional[ProgressCallback] = None) -> ScanReport:
        """Process every note and return the categorized results.

        Args:
            progress: Called once per note after it reaches a terminal state.
        """
        report = ScanReport(dry_run=self.dry_run)
        with timed_operation(
            "link_notes",
            storage=self.storage_path,
            notes=self.notes_path,
            dry_run=self.dry_run,
        ) as op:
            for note in self.scanner:
                self.process_note(note, report)
                if progress is not None:
                    progress(note)
            op["total"] = report.total
            op["matched"] = report.matched_count
            op["failed"] = report.failed_count

        logger.info(
            f"Processed {report.total} notes: {report.matched_count} matched, "
            f"{report.skipped_count} skipped, {report.unmatched_count} unmatched, "
            f"{report.failed_count} failed"
        )
        return report
