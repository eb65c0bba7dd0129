"""Data models (Pydantic) for line notes.

Defines the core data structures used throughout the system:
- NoteStore: 全ノートのスナップショット (file id -> line -> note)
- Marker: 行マーカー (派生データ、永続化しない)
- FileView: ホストが開いているファイルの状態
- NotesConfig: プロジェクト単位の設定 (.line-notes.yaml)
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

LineNumber = Annotated[int, Field(ge=1)]
NoteText = Annotated[str, Field(min_length=1)]

NotifyLevel = Literal["info", "warning", "error"]


# --- Config ---

class NotesConfig(BaseModel):
    """プロジェクト設定ファイルのスキーマ."""

    notes_file: str = Field(default="notes.json", min_length=1)
    marker_glyph: str = Field(default="💬", min_length=1)
    marker_color: str = "blue"


# --- Store ---

class NoteStore(BaseModel):
    """Immutable snapshot of every note in a project.

    ``files`` maps a project-relative file id to a non-empty map of 1-based
    line numbers to note text. ``revision`` is the sha256 of the notes file
    bytes this snapshot was last read from or written to (``None`` when the
    file did not exist).
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    files: dict[str, dict[LineNumber, NoteText]] = Field(default_factory=dict)
    revision: Optional[str] = None


# --- Presentation ---

class Marker(BaseModel):
    """1行分のマーカー."""

    model_config = ConfigDict(frozen=True)

    line: LineNumber
    glyph: str
    color: str
    hover: str


class FileView(BaseModel):
    """ホストエディタ上で表示中のファイル."""

    path: Path
    line_count: int = Field(ge=0)
    cursor_line: LineNumber = 1
