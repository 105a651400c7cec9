"""Data models for zotlink."""

from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator


class MatchKind(str, Enum):
    """How a note token relates to a PDF token."""

    EXACT = "exact"  # Tokens are identical
    FUZZY = "fuzzy"  # Substring or positional similarity >= 90%
    NONE = "none"  # No relation


class Outcome(str, Enum):
    """Per-note state. Everything except UNSCANNED is terminal."""

    UNSCANNED = "unscanned"
    SKIPPED = "skipped"  # Already carries a link on the link line
    MATCHED = "matched"
    FUZZY_MATCHED = "fuzzy_matched"
    UNMATCHED = "unmatched"
    FAILED = "failed"  # Matched, but the note could not be rewritten safely


class NoteRecord(BaseModel):
    """A Markdown note discovered under the notes root."""

    path: Path = Field(..., description="Location of the note file")
    name: str = Field(..., description="Filename without extension")
    token: str = Field(default="", description="Normalized filename")
    has_link: bool = Field(default=False, description="Link line already present")
    outcome: Outcome = Field(default=Outcome.UNSCANNED)

    model_config = {"validate_assignment": True, "extra": "forbid"}


class PdfRecord(BaseModel):
    """A PDF attachment inside a Zotero storage item directory."""

    item_id: str = Field(..., description="Name of the parent storage directory")
    path: Path = Field(..., description="Location of the PDF file")
    name: str = Field(..., description="Filename without extension")
    token: str = Field(default="", description="Normalized filename")

    model_config = {"extra": "forbid", "frozen": True}

    @field_validator("item_id")
    @classmethod
    def validate_item_id(cls, v: str) -> str:
        """Item ids are directory names, so they must be a single path segment."""
        if not v or "/" in v:
            raise ValueError("item_id must be a single non-empty path segment")
        return v


class MatchResult(BaseModel):
    """Outcome of searching the PDF corpus for one note."""

    note: NoteRecord
    pdf: Optional[PdfRecord] = None
    kind: MatchKind = MatchKind.NONE

    model_config = {"frozen": True}

    @property
    def matched(self) -> bool:
        return self.pdf is not None and self.kind != MatchKind.NONE


class ScanReport(BaseModel):
    """Categorized results of one run.

    ``matched`` holds every note that received (or, in a dry run, would have
    received) a link, exact and fuzzy alike; ``fuzzy_matched`` additionally
    lists the fuzzy ones as ``(note, pdf)`` name pairs.
    """

    dry_run: bool = False
    total: int = 0
    matched: List[str] = Field(default_factory=list)
    fuzzy_matched: List[Tuple[str, str]] = Field(default_factory=list)
    unmatched: List[str] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)
    failed: List[Tuple[str, str]] = Field(default_factory=list)

    def record(self, note: NoteRecord, pdf: Optional[PdfRecord] = None,
               reason: Optional[str] = None) -> None:
        """Append a note to the bucket matching its terminal outcome."""
        self.total += 1
        if note.outcome == Outcome.SKIPPED:
            self.skipped.append(note.name)
        elif note.outcome == Outcome.MATCHED:
            self.matched.append(note.name)
        elif note.outcome == Outcome.FUZZY_MATCHED:
            self.matched.append(note.name)
            self.fuzzy_matched.append((note.name, pdf.name if pdf else ""))
        elif note.outcome == Outcome.UNMATCHED:
            self.unmatched.append(note.name)
        elif note.outcome == Outcome.FAILED:
            self.failed.append((note.name, reason or "unknown error"))
        else:
            raise ValueError(f"Cannot record note {note.name!r} in state {note.outcome.value}")

    def merge(self, other: "ScanReport") -> "ScanReport":
        """Combine two reports, keeping this report's entries first."""
        return ScanReport(
            dry_run=self.dry_run or other.dry_run,
            total=self.total + other.total,
            matched=self.matched + other.matched,
            fuzzy_matched=self.fuzzy_matched + other.fuzzy_matched,
            unmatched=self.unmatched + other.unmatched,
            skipped=self.skipped + other.skipped,
            failed=self.failed + other.failed,
        )

    @property
    def matched_count(self) -> int:
        return len(self.matched)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def unmatched_count(self) -> int:
        return len(self.unmatched)

    @property
    def failed_count(self) -> int:
        return len(self.failed)
