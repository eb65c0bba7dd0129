"""Error taxonomy for line notes.

- ConfigurationError: no project root can be resolved, or the project config is invalid
- LoadError: the notes file exists but cannot be read or parsed
- PersistError: writing the notes file failed; the caller's store is unchanged
"""

from __future__ import annotations

from pathlib import Path


class NotesError(Exception):
    """Base class for every error surfaced to the user as a notification."""


class ConfigurationError(NotesError):
    pass


class LoadError(NotesError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to load notes from {path}: {reason}")
        self.path = path
        self.reason = reason


class PersistError(NotesError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to save notes to {path}: {reason}")
        self.path = path
        self.reason = reason
