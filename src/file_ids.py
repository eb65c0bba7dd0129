"""Project-relative file identifiers.

A file identifier is the path of a file relative to the project root, always
written with forward slashes, so the same notes file resolves on every
platform and after the project directory is moved.
"""

from __future__ import annotations

import os
import posixpath
from pathlib import Path


def normalize_file_id(raw: str) -> str:
    """Normalize an identifier that may have been written on another platform.

    ``src\\app.ts``, ``./src/app.ts`` and ``src//app.ts`` all become ``src/app.ts``.
    """
    text = (raw or "").strip().replace("\\", "/")
    if not text:
        raise ValueError("file identifier cannot be empty")
    normalized = posixpath.normpath(text)
    if normalized in (".", "/"):
        raise ValueError(f"invalid file identifier: {raw!r}")
    return normalized


def to_file_id(project_root: Path, file_path: Path | str) -> str:
    """Return the identifier of *file_path* relative to *project_root*.

    Relative paths are taken as already relative to the project root. Files
    outside the root keep their ``../`` prefix.
    """
    path = Path(file_path)
    if not path.is_absolute():
        return normalize_file_id(str(path))
    relative = os.path.relpath(os.path.abspath(path), os.path.abspath(project_root))
    return normalize_file_id(relative)
