"""Session-scoped context wiring the notes store to a host editor.

The session owns the current ``NoteStore`` value for one project and exposes
the user-facing commands (add note, remove note, reload) plus the hover and
view-change hooks. Every failure is reported through ``host.notify`` instead
of propagating to the host.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import note_store
from editor_host import EditorHost
from errors import ConfigurationError, NotesError
from file_ids import to_file_id
from models import FileView, NoteStore, NotesConfig
from presentation_sync import PresentationSync, hover_text
from project_config import load_config, resolve_project_root

logger = logging.getLogger(__name__)

PROMPT_PLACEHOLDER = "Enter your note"


class NoteSession:
    """ノートの読み書きとマーカー更新をまとめる."""

    def __init__(
        self,
        host: EditorHost,
        project_root: Path | None,
        config: NotesConfig | None = None,
    ) -> None:
        self.host = host
        self.project_root = project_root
        self.config = config or NotesConfig()
        self.store: NoteStore | None = None
        self._error: NotesError | None = None
        self._sync = PresentationSync(host, project_root, self.config) if project_root is not None else None

    @classmethod
    def open(
        cls,
        host: EditorHost,
        root: Path | str | None = None,
        *,
        cwd: Path | None = None,
    ) -> "NoteSession":
        """Resolve the project and its config, then load notes.

        A resolution failure is reported to the host and leaves a session
        whose commands report the same error.
        """
        try:
            project_root = resolve_project_root(root, cwd=cwd)
            config = load_config(project_root)
        except ConfigurationError as exc:
            session = cls(host, None)
            session._error = exc
            session._report(exc)
            return session
        session = cls(host, project_root, config)
        session.start()
        return session

    @property
    def is_loaded(self) -> bool:
        return self.store is not None

    @property
    def markers_stale(self) -> bool:
        return self._sync is None or self._sync.is_stale

    def start(self) -> bool:
        return self.reload()

    def reload(self) -> bool:
        """(Re)load notes from disk and refresh markers of every visible view."""
        try:
            self.store = note_store.load(self.project_root, self.config)
        except NotesError as exc:
            self.store = None
            self._error = exc
            self._report(exc)
            return False
        self._error = None
        self._refresh(self.host.visible_views())
        return True

    def on_active_view_changed(self, view: Optional[FileView]) -> None:
        if view is None or self.store is None:
            return
        self._refresh([view])

    def hover(self, path: Path | str, line: int) -> Optional[str]:
        if self.store is None or self.project_root is None:
            return None
        try:
            file_id = to_file_id(self.project_root, path)
        except ValueError:
            return None
        return hover_text(self.store, file_id, line)

    def add_note_command(self) -> bool:
        view = self.host.active_view()
        if view is None:
            return False
        store = self._require_store()
        if store is None:
            return False
        text = self.host.prompt(PROMPT_PLACEHOLDER)
        if not text:
            return False
        try:
            file_id = to_file_id(self.project_root, view.path)
            self.store = note_store.add_note(store, file_id, view.cursor_line, text)
        except (NotesError, ValueError) as exc:
            self._report(exc)
            return False
        self.host.notify("info", f"Note added to line {view.cursor_line}")
        self._refresh([view])
        return True

    def remove_note_command(self) -> bool:
        view = self.host.active_view()
        if view is None:
            return False
        store = self._require_store()
        if store is None:
            return False
        try:
            file_id = to_file_id(self.project_root, view.path)
            self.store, removed = note_store.remove_note(store, file_id, view.cursor_line)
        except (NotesError, ValueError) as exc:
            self._report(exc)
            return False
        if not removed:
            self.host.notify("warning", "No note found on this line")
            if self.store is not store:
                self._refresh([view])
            return False
        self.host.notify("info", f"Note removed from line {view.cursor_line}")
        self._refresh([view])
        return True

    def _require_store(self) -> NoteStore | None:
        if self.store is None:
            self._report(self._error or ConfigurationError("Notes are not loaded."))
        return self.store

    def _refresh(self, views: list[FileView]) -> None:
        if self._sync is None or self.store is None:
            return
        self._sync.invalidate()
        self._sync.refresh(self.store, views)

    def _report(self, exc: Exception) -> None:
        logger.error("%s", exc)
        self.host.notify("error", str(exc))
