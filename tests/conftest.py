"""Common test fixtures for line notes tests."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import pytest

from models import FileView, Marker


class FakeHost:
    """EditorHost double that records everything the core asks of it."""

    def __init__(self, view: FileView | None = None, *, answer: Optional[str] = None) -> None:
        self.view = view
        self.extra_views: list[FileView] = []
        self.answer = answer
        self.prompts: list[str] = []
        self.notifications: list[tuple[str, str]] = []
        self.markers: dict[Path, list[Marker]] = {}

    def active_view(self) -> Optional[FileView]:
        return self.view

    def visible_views(self) -> list[FileView]:
        views = [self.view] if self.view is not None else []
        return views + self.extra_views

    def prompt(self, placeholder: str) -> Optional[str]:
        self.prompts.append(placeholder)
        return self.answer

    def notify(self, level: str, message: str) -> None:
        self.notifications.append((level, message))

    def set_markers(self, path: Path, markers: list[Marker]) -> None:
        self.markers[path] = list(markers)

    def marker_lines(self, path: Path) -> list[int]:
        return [m.line for m in self.markers.get(path, [])]


@pytest.fixture(autouse=True)
def _no_root_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("LINE_NOTES_ROOT", raising=False)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project root with a 20-line ``a.ts`` and a 3-line ``src/b.py``."""
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    (root / "a.ts").write_text("".join(f"line {i}\n" for i in range(1, 21)), encoding="utf-8")
    (root / "src" / "b.py").write_text("x = 1\ny = 2\nz = 3\n", encoding="utf-8")
    return root


def write_notes(root: Path, data: dict, name: str = "notes.json") -> Path:
    import json

    path = root / name
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    return path
