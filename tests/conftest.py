"""Common test fixtures for zotlink."""

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

import pytest

from zotlink.config import LinkerConfig


@pytest.fixture
def storage_dir(tmp_path):
    """Empty Zotero storage root."""
    path = tmp_path / "storage"
    path.mkdir()
    return path


@pytest.fixture
def notes_dir(tmp_path):
    """Empty notes root."""
    path = tmp_path / "notes"
    path.mkdir()
    return path


@pytest.fixture
def add_pdf(storage_dir):
    """Factory creating ``storage/<item_id>/<name>.pdf``."""

    def _add(item_id: str, name: str) -> Path:
        item_dir = storage_dir / item_id
        item_dir.mkdir(exist_ok=True)
        pdf_path = item_dir / f"{name}.pdf"
        pdf_path.write_bytes(b"%PDF-1.4\n")
        return pdf_path

    return _add


@pytest.fixture
def add_note(notes_dir):
    """Factory creating a note from a list of lines or raw text."""

    def _add(
        name: str,
        content: Union[str, Iterable[str]] = "",
        subdir: Optional[str] = None,
    ) -> Path:
        folder = notes_dir / subdir if subdir else notes_dir
        folder.mkdir(parents=True, exist_ok=True)
        if not isinstance(content, str):
            content = "".join(f"{line}\n" for line in content)
        note_path = folder / f"{name}.md"
        note_path.write_bytes(content.encode("utf-8"))
        return note_path

    return _add


@pytest.fixture
def settings(tmp_path):
    """Explicit settings so the surrounding environment cannot leak in."""
    return LinkerConfig(
        log_dir=tmp_path / "logs",
        log_level="INFO",
        link_marker="zotero",
        link_line=6,
        cache_pdf_tokens=True,
        skip_hidden=False,
    )


@pytest.fixture
def reset_logging():
    """Detach handlers added to the zotlink logger during a test."""
    root_logger = logging.getLogger("zotlink")
    before = list(root_logger.handlers)
    yield
    for handler in list(root_logger.handlers):
        if handler not in before:
            root_logger.removeHandler(handler)
            handler.close()
