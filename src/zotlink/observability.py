"""Logging utilities for zotlink.

Every run writes a timestamped log file next to where it was started
(``zotero_linker_YYYYmmdd_HHMMSS.log``); console logging is optional
because the summary itself goes to stdout.
"""
import logging
import time
import uuid
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

# Logging format with ISO 8601 timestamps
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

LOG_FILE_PREFIX = "zotero_linker_"


def build_log_filename(now: Optional[datetime] = None) -> str:
    """Return the per-run log file name, e.g. ``zotero_linker_20240131_120000.log``."""
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return f"{LOG_FILE_PREFIX}{stamp}.log"


def configure_logging(
    log_dir: Optional[Union[str, Path]] = None,
    level: int = logging.INFO,
    console: bool = False,
) -> Path:
    """Configure per-run file logging for the ``zotlink`` logger hierarchy.

    Args:
        log_dir: Directory for the log file. Defaults to the working directory.
        level: Logging level (default: INFO)
        console: Also log to stderr (default: False)

    Returns:
        Path to the log file
    """
    log_path = Path(log_dir) if log_dir else Path.cwd()
    log_path.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger("zotlink")
    root_logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    log_file = log_path / build_log_filename()
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    if console and not any(
        type(h) is logging.StreamHandler for h in root_logger.handlers
    ):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    root_logger.info(f"Logging configured: {log_file}")

    return log_file


@contextmanager
def timed_operation(operation: str, **context):
    """Context manager for timing and logging operations.

    Args:
        operation: Name of the operation being performed
        **context: Additional context to include in log messages

    Yields:
        A dictionary where you can store result info (e.g., note_count)

    Example:
        with timed_operation('link_notes', dry_run=True) as op:
            report = service.run()
            op['note_count'] = report.total
    """
    correlation_id = str(uuid.uuid4())[:8]
    start_time = time.perf_counter()
    result_info: Dict[str, Any] = {'correlation_id': correlation_id}

    context_str = ', '.join(f'{k}={v}' for k, v in context.items())
    logger.debug(f"[{correlation_id}] START {operation} ({context_str})")

    error_msg = None
    success = True

    try:
        yield result_info
    except Exception as e:
        success = False
        error_msg = str(e)
        raise
    finally:
        duration_ms = (time.perf_counter() - start_time) * 1000
        result_str = ', '.join(f'{k}={v}' for k, v in result_info.items() if k != 'correlation_id')
        status = 'OK' if success else f'ERROR: {error_msg}'
        logger.debug(
            f"[{correlation_id}] END {operation} "
            f"({duration_ms:.2f}ms) [{status}] {result_str}"
        )
