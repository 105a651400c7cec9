"""Plain-text rendering of a ScanReport."""

from typing import Iterable, List

from zotlink.models.schema import ScanReport

RULE = "-" * 40
BULLET = "•"

DRY_RUN_BANNER = "DRY RUN - No changes will be made"
DRY_RUN_FOOTER = "DRY RUN - No changes were made"
COMPLETE_FOOTER = "Processing complete"


def _section(title: str, items: Iterable[str]) -> List[str]:
    return ["", f"{title}:", RULE] + [f"{BULLET} {item}" for item in items]


def render_summary(report: ScanReport) -> str:
    """Render the end-of-run summary.

    Count lines are always present; the fuzzy, unmatched and failed sections
    only appear when they have entries.
    """
    lines = [
        "",
        "Summary",
        RULE,
        f"Total notes found: {report.total}",
        f"Successfully matched and linked: {report.matched_count}",
        f"Already linked (skipped): {report.skipped_count}",
        f"No matches found: {report.unmatched_count}",
    ]
    if report.failed:
        lines.append(f"Failed: {report.failed_count}")

    if report.fuzzy_matched:
        lines += _section(
            "Fuzzy Matches Made",
            (f"{note} -> {pdf}" for note, pdf in report.fuzzy_matched),
        )
    if report.unmatched:
        lines += _section("Unmatched Notes", report.unmatched)
    if report.failed:
        lines += _section(
            "Failed Notes",
            (f"{note}: {reason}" for note, reason in report.failed),
        )

    lines += ["", DRY_RUN_FOOTER if report.dry_run else COMPLETE_FOOTER]
    return "\n".join(lines)
