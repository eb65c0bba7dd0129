"""Unit tests for Pydantic data models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from models import FileView, Marker, NoteStore, NotesConfig


class TestNoteStore:
    def test_defaults(self, tmp_path: Path) -> None:
        store = NoteStore(path=tmp_path / "notes.json")
        assert store.files == {}
        assert store.revision is None

    def test_frozen(self, tmp_path: Path) -> None:
        store = NoteStore(path=tmp_path / "notes.json")
        with pytest.raises(ValidationError):
            store.revision = "abc"  # type: ignore[misc]

    def test_rejects_line_zero(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError):
            NoteStore(path=tmp_path / "notes.json", files={"a.ts": {0: "x"}})

    def test_rejects_empty_note(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError):
            NoteStore(path=tmp_path / "notes.json", files={"a.ts": {1: ""}})

    def test_equality_ignores_insertion_order(self, tmp_path: Path) -> None:
        a = NoteStore(path=tmp_path / "n.json", files={"a.ts": {1: "x", 2: "y"}, "b.ts": {3: "z"}})
        b = NoteStore(path=tmp_path / "n.json", files={"b.ts": {3: "z"}, "a.ts": {2: "y", 1: "x"}})
        assert a == b


class TestOtherModels:
    def test_marker_line_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            Marker(line=0, glyph="*", color="blue", hover="x")

    def test_file_view_defaults_cursor_to_first_line(self, tmp_path: Path) -> None:
        view = FileView(path=tmp_path / "a.ts", line_count=0)
        assert view.cursor_line == 1

    def test_config_rejects_unknown_types(self) -> None:
        with pytest.raises(ValidationError):
            NotesConfig(notes_file=123)  # type: ignore[arg-type]
