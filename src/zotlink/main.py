#!/usr/bin/env python
"""Command-line entry point for zotlink."""
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from zotlink import __version__
from zotlink.config import load_config
from zotlink.exceptions import ConfigurationError, ErrorCode
from zotlink.observability import configure_logging
from zotlink.report import DRY_RUN_BANNER, render_summary
from zotlink.services.linker_service import LinkerService


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Malformed arguments exit with status 2 via argparse.
    """
    parser = argparse.ArgumentParser(
        prog="zotlink",
        description="Insert Zotero deep links into notes whose filenames match a stored PDF.",
    )
    parser.add_argument(
        "-n", "--dry-run",
        help="Show what would be done without making changes",
        action="store_true",
    )
    parser.add_argument("storage_path", help="Zotero storage directory", type=Path)
    parser.add_argument("notes_path", help="Notes directory (searched recursively)", type=Path)
    parser.add_argument(
        "--log-dir",
        help="Directory for the run log file (default: ZOTLINK_LOG_DIR or cwd)",
        type=Path,
    )
    parser.add_argument(
        "--log-level",
        help="Logging level (default: ZOTLINK_LOG_LEVEL or INFO)",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    )
    parser.add_argument(
        "-v", "--verbose",
        help="Also write log records to stderr",
        action="store_true",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def validate_paths(storage_path: Path, notes_path: Path) -> None:
    """Check the storage root is readable and the notes root writable.

    Raises:
        ConfigurationError: If either root is missing or inaccessible.
    """
    if not storage_path.is_dir() or not os.access(storage_path, os.R_OK | os.X_OK):
        raise ConfigurationError(
            f"Cannot read from Zotero storage path: {storage_path}",
            config_key="storage_path",
            code=ErrorCode.SOURCE_UNREADABLE,
        )
    if not notes_path.is_dir() or not os.access(notes_path, os.W_OK | os.X_OK):
        raise ConfigurationError(
            f"Cannot write to notes path: {notes_path}",
            config_key="notes_path",
            code=ErrorCode.DESTINATION_UNWRITABLE,
        )


def _print_progress(_note) -> None:
    print(".", end="", file=sys.stderr, flush=True)


def main(argv: Optional[List[str]] = None) -> None:
    """Run zotlink."""
    args = parse_args(argv)

    try:
        settings = load_config()
    except ConfigurationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)

    log_level = getattr(logging, (args.log_level or settings.log_level).upper(), logging.INFO)
    try:
        log_file = configure_logging(
            args.log_dir or settings.log_dir, level=log_level, console=args.verbose
        )
    except OSError as e:
        # Fall back to basic console logging if the log file cannot be created
        logging.basicConfig(level=log_level)
        logging.getLogger(__name__).warning(f"Failed to configure file logging: {e}")
        log_file = None

    logger = logging.getLogger(__name__)
    if log_file:
        logger.info(f"Run log: {log_file}")

    try:
        validate_paths(args.storage_path, args.notes_path)
    except ConfigurationError as e:
        logger.error(str(e))
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)

    if args.dry_run:
        print(f"\n{DRY_RUN_BANNER}")
    print("Processing notes...")

    service = LinkerService(
        args.storage_path, args.notes_path, dry_run=args.dry_run, settings=settings
    )
    report = service.run(progress=_print_progress)
    print(file=sys.stderr)

    summary = render_summary(report)
    print(summary)
    logger.info(f"Summary:\n{summary}")


if __name__ == "__main__":
    main()
