"""Presentation sync: markers and hover text for open file views.

Markers are derived from the store on demand and never persisted. Notes whose
line is past the end of the file are not rendered but stay in the store, so
they reappear when the file grows back. Line numbers are absolute: edits
above a note do not move it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from editor_host import EditorHost
from file_ids import to_file_id
from models import FileView, Marker, NoteStore, NotesConfig
from note_store import get_note, notes_for_file

logger = logging.getLogger(__name__)


def compute_markers(store: NoteStore, file_id: str, line_count: int) -> list[int]:
    """Return the annotated lines of *file_id* within ``[1, line_count]``, ascending."""
    return sorted(line for line in notes_for_file(store, file_id) if 1 <= line <= line_count)


def hover_text(store: NoteStore, file_id: str, line: int) -> Optional[str]:
    return get_note(store, file_id, line)


def build_markers(
    store: NoteStore,
    file_id: str,
    line_count: int,
    config: NotesConfig | None = None,
) -> list[Marker]:
    cfg = config or NotesConfig()
    lines = notes_for_file(store, file_id)
    return [
        Marker(line=line, glyph=cfg.marker_glyph, color=cfg.marker_color, hover=lines[line])
        for line in compute_markers(store, file_id, line_count)
    ]


class PresentationSync:
    """Keeps host markers aligned with the store.

    Starts stale. ``refresh`` recomputes markers for the given views and
    pushes them to the host; ``invalidate`` marks them stale again.
    """

    def __init__(self, host: EditorHost, project_root: Path, config: NotesConfig | None = None) -> None:
        self._host = host
        self._project_root = project_root
        self._config = config or NotesConfig()
        self._stale = True

    @property
    def is_stale(self) -> bool:
        return self._stale

    def invalidate(self) -> None:
        self._stale = True

    def refresh(self, store: NoteStore, views: Iterable[FileView]) -> None:
        for view in views:
            file_id = to_file_id(self._project_root, view.path)
            markers = build_markers(store, file_id, view.line_count, self._config)
            dormant = len(notes_for_file(store, file_id)) - len(markers)
            if dormant:
                logger.debug("%d note(s) past end of %s not rendered", dormant, file_id)
            self._host.set_markers(view.path, markers)
        self._stale = False
