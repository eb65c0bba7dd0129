"""Capabilities the notes core needs from a host editor."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol

from models import FileView, Marker, NotifyLevel


class EditorHost(Protocol):
    def active_view(self) -> Optional[FileView]:
        """The focused file view, or ``None`` when no file is open."""
        ...

    def visible_views(self) -> list[FileView]:
        ...

    def prompt(self, placeholder: str) -> Optional[str]:
        """Ask the user for a line of text; ``None`` when cancelled."""
        ...

    def notify(self, level: NotifyLevel, message: str) -> None:
        ...

    def set_markers(self, path: Path, markers: list[Marker]) -> None:
        """Replace every marker shown for *path*."""
        ...
