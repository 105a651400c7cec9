"""Tests for link detection and insertion on note files."""
import os

import pytest

from tests.helpers import note_lines
from zotlink.exceptions import ErrorCode, PathSafetyError, StorageError
from zotlink.storage.note_linker import NoteLinker, insert_line, split_lines

LINK = "[Open in Zotero](zotero://open-pdf/library/items/ABC123)"


# =============================================================================
# Pure text insertion
# =============================================================================


class TestInsertLine:
    """Tests for insert_line()."""

    def test_link_becomes_sixth_line(self):
        text = "".join(f"{line}\n" for line in note_lines(8))
        result = insert_line(text, LINK, 6)
        assert result.split("\n")[:-1] == note_lines(5) + [LINK] + ["L6", "L7", "L8"]

    def test_exactly_five_lines(self):
        text = "".join(f"{line}\n" for line in note_lines(5))
        assert insert_line(text, LINK, 6) == text + LINK + "\n"

    def test_short_note_is_not_padded(self):
        assert insert_line("L1\nL2\n", LINK, 6) == f"L1\nL2\n{LINK}\n"

    def test_missing_trailing_newline_is_completed(self):
        assert insert_line("L1\nL2", LINK, 6) == f"L1\nL2\n{LINK}\n"

    def test_empty_note(self):
        assert insert_line("", LINK, 6) == f"{LINK}\n"

    def test_tail_is_kept_byte_for_byte(self):
        text = "a\nb\nc\nd\ne\nf\n\n  indented\nno newline at end"
        result = insert_line(text, LINK, 6)
        assert result == f"a\nb\nc\nd\ne\n{LINK}\nf\n\n  indented\nno newline at end"

    def test_crlf_line_endings(self):
        text = "a\r\nb\r\nc\r\nd\r\ne\r\nf\r\n"
        result = insert_line(text, LINK, 6)
        assert result == f"a\r\nb\r\nc\r\nd\r\ne\r\n{LINK}\r\nf\r\n"

    def test_split_lines_only_breaks_on_newline(self):
        assert split_lines("a\x0cb\nc") == ["a\x0cb\n", "c"]


# =============================================================================
# File operations
# =============================================================================


class TestHasLink:
    """Tests for NoteLinker.has_link()."""

    def test_link_on_line_six(self, notes_dir, add_note):
        path = add_note("Linked", note_lines(5) + [LINK, "L6"])
        assert NoteLinker(notes_dir).has_link(path) is True

    def test_marker_anywhere_on_line_six(self, notes_dir, add_note):
        path = add_note("Linked", note_lines(5) + ["see zotero for the pdf"])
        assert NoteLinker(notes_dir).has_link(path) is True

    def test_link_on_other_line_does_not_count(self, notes_dir, add_note):
        path = add_note("Elsewhere", ["L1", LINK] + note_lines(6))
        assert NoteLinker(notes_dir).has_link(path) is False

    def test_short_note(self, notes_dir, add_note):
        path = add_note("Short", ["only line"])
        assert NoteLinker(notes_dir).has_link(path) is False

    def test_empty_note(self, notes_dir, add_note):
        path = add_note("Empty", "")
        assert NoteLinker(notes_dir).has_link(path) is False

    def test_short_note_with_appended_link(self, notes_dir, add_note):
        path = add_note("Short", ["# Title", LINK])
        assert NoteLinker(notes_dir).has_link(path) is True

    def test_short_note_marker_not_on_last_line(self, notes_dir, add_note):
        path = add_note("Short", [LINK, "# Title"])
        assert NoteLinker(notes_dir).has_link(path) is False

    def test_short_note_with_marker_in_prose(self, notes_dir, add_note):
        path = add_note("Short", ["# Title", "tags: zotero"])
        assert NoteLinker(notes_dir).has_link(path) is False

    def test_short_note_with_custom_link_prefix(self, notes_dir, add_note):
        path = add_note("Short", ["# Title", "pdf://item/ABC123"])
        linker = NoteLinker(notes_dir, link_prefix="pdf://item/")
        assert linker.has_link(path) is True

    def test_inserted_link_is_detected(self, notes_dir, add_note):
        for count in (0, 2, 5, 9):
            path = add_note(f"N{count}", note_lines(count))
            linker = NoteLinker(notes_dir)
            linker.insert_link(path, LINK)
            assert linker.has_link(path) is True

    def test_sixth_line_without_trailing_newline(self, notes_dir, add_note):
        path = add_note("NoEol", "1\n2\n3\n4\n5\n" + LINK)
        assert NoteLinker(notes_dir).has_link(path) is True

    def test_custom_marker_and_line(self, notes_dir, add_note):
        path = add_note("Custom", ["pdf://item"] + note_lines(3))
        linker = NoteLinker(notes_dir, link_marker="pdf://", link_line=1)
        assert linker.has_link(path) is True

    def test_missing_file_raises_storage_error(self, notes_dir):
        with pytest.raises(StorageError) as exc_info:
            NoteLinker(notes_dir).has_link(notes_dir / "gone.md")
        assert exc_info.value.code == ErrorCode.STORAGE_READ_FAILED


class TestPathSafety:
    """Writes must stay inside the notes root."""

    def test_path_inside_root(self, notes_dir, add_note):
        path = add_note("Inside", ["x"], subdir="nested/deeper")
        assert NoteLinker(notes_dir).ensure_within_root(path) == path.resolve()

    def test_parent_traversal_rejected(self, tmp_path, notes_dir):
        outside = tmp_path / "outside.md"
        outside.write_text("x\n")
        with pytest.raises(PathSafetyError) as exc_info:
            NoteLinker(notes_dir).ensure_within_root(notes_dir / ".." / "outside.md")
        assert exc_info.value.code == ErrorCode.PATH_TRAVERSAL_DETECTED

    def test_symlink_escaping_root_rejected(self, tmp_path, notes_dir):
        outside = tmp_path / "outside.md"
        outside.write_text("x\n")
        link = notes_dir / "Escape.md"
        link.symlink_to(outside)
        with pytest.raises(PathSafetyError):
            NoteLinker(notes_dir).insert_link(link, LINK)
        assert outside.read_text() == "x\n"

    def test_safety_checked_in_dry_run(self, tmp_path, notes_dir):
        outside = tmp_path / "outside.md"
        outside.write_text("x\n")
        with pytest.raises(PathSafetyError):
            NoteLinker(notes_dir).insert_link(outside, LINK, dry_run=True)

    def test_sibling_with_common_prefix_rejected(self, tmp_path, notes_dir):
        """A directory named like the root plus a suffix is still outside."""
        sibling = tmp_path / "notes-archive"
        sibling.mkdir()
        path = sibling / "Note.md"
        path.write_text("x\n")
        with pytest.raises(PathSafetyError):
            NoteLinker(notes_dir).ensure_within_root(path)


class TestInsertLink:
    """Tests for NoteLinker.insert_link()."""

    def test_rewrites_note(self, notes_dir, add_note):
        path = add_note("Paper", note_lines(7))
        assert NoteLinker(notes_dir).insert_link(path, LINK) is True
        assert path.read_text().split("\n")[:-1] == note_lines(5) + [LINK, "L6", "L7"]

    def test_dry_run_leaves_file_untouched(self, notes_dir, add_note):
        path = add_note("Paper", note_lines(7))
        before = path.read_bytes()
        assert NoteLinker(notes_dir).insert_link(path, LINK, dry_run=True) is False
        assert path.read_bytes() == before

    def test_no_temp_files_left_behind(self, notes_dir, add_note):
        path = add_note("Paper", note_lines(3))
        NoteLinker(notes_dir).insert_link(path, LINK)
        assert sorted(p.name for p in notes_dir.iterdir()) == ["Paper.md"]

    def test_file_mode_preserved(self, notes_dir, add_note):
        path = add_note("Paper", note_lines(3))
        os.chmod(path, 0o640)
        NoteLinker(notes_dir).insert_link(path, LINK)
        assert (path.stat().st_mode & 0o777) == 0o640

    def test_replace_failure_leaves_note_unmodified(self, notes_dir, add_note, monkeypatch):
        path = add_note("Paper", note_lines(7))
        before = path.read_bytes()

        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", failing_replace)
        with pytest.raises(StorageError) as exc_info:
            NoteLinker(notes_dir).insert_link(path, LINK)

        assert exc_info.value.code == ErrorCode.STORAGE_WRITE_FAILED
        assert path.read_bytes() == before
        assert sorted(p.name for p in notes_dir.iterdir()) == ["Paper.md"]

    def test_vanished_note_raises_storage_error(self, notes_dir, add_note):
        path = add_note("Paper", note_lines(7))
        path.unlink()
        with pytest.raises(StorageError):
            NoteLinker(notes_dir).insert_link(path, LINK)
