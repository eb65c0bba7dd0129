"""EditorHost implementation for the command line.

The "active view" is a single file given on the command line, with the
cursor on the requested line. Notifications go to stdout/stderr.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

from models import FileView, Marker, NotifyLevel

logger = logging.getLogger(__name__)


def count_lines(path: Path) -> int:
    """Number of lines in *path*; 0 when the file does not exist."""
    if not path.exists():
        logger.warning("File not found: %s", path)
        return 0
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return sum(1 for _ in f)


def view_for_file(path: Path | str, line: int = 1) -> FileView:
    resolved = Path(path).expanduser().resolve()
    return FileView(path=resolved, line_count=count_lines(resolved), cursor_line=line)


class TerminalHost:
    def __init__(
        self,
        view: FileView | None = None,
        *,
        text: str | None = None,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self._view = view
        self._text = text
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._stderr = stderr or sys.stderr
        self.markers: dict[Path, list[Marker]] = {}
        self.error_count = 0

    def active_view(self) -> Optional[FileView]:
        return self._view

    def visible_views(self) -> list[FileView]:
        return [self._view] if self._view is not None else []

    def prompt(self, placeholder: str) -> Optional[str]:
        if self._text is not None:
            return self._text
        self._stdout.write(f"{placeholder}: ")
        self._stdout.flush()
        line = self._stdin.readline()
        if not line:
            return None
        return line.rstrip("\n")

    def notify(self, level: NotifyLevel, message: str) -> None:
        if level == "error":
            self.error_count += 1
        stream = self._stdout if level == "info" else self._stderr
        prefix = "" if level == "info" else f"{level}: "
        print(f"{prefix}{message}", file=stream)

    def set_markers(self, path: Path, markers: list[Marker]) -> None:
        self.markers[path] = list(markers)
