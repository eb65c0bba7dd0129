"""Annotation store backed by a single JSON file per project.

File format (``notes.json``)::

    {"src/app.ts": {"10": "fix this", "42": "why?"}}

Every operation takes a ``NoteStore`` value and returns a new one; nothing is
held in module state. Mutations are written to disk synchronously before they
return.

Before each write the notes file is read again. When its revision differs from
the one the store was loaded with (another session wrote it), the mutation is
re-applied on top of the on-disk notes instead of overwriting them.
"""

from __future__ import annotations

import hashlib
import json
import logging
import re
from pathlib import Path
from typing import Callable, Iterator, Optional

from pydantic import StrictStr, TypeAdapter, ValidationError

from errors import ConfigurationError, LoadError, PersistError
from file_ids import normalize_file_id
from models import NoteStore, NotesConfig
from project_config import get_notes_path

logger = logging.getLogger(__name__)

Notes = dict[str, dict[int, str]]

_NOTES_ADAPTER = TypeAdapter(dict[StrictStr, dict[StrictStr, StrictStr]])
_LINE_KEY = re.compile(r"[1-9][0-9]*")


def load(project_root: Path | None, config: NotesConfig | None = None) -> NoteStore:
    """Load the notes of the project at *project_root*.

    A missing notes file yields an empty store.

    Raises:
        ConfigurationError: If *project_root* is ``None``.
        LoadError: If the notes file cannot be read or parsed.
    """
    if project_root is None:
        raise ConfigurationError("No workspace folder is open.")
    path = get_notes_path(Path(project_root), config)
    if not path.exists():
        logger.info("No notes file at %s, starting empty", path)
        return NoteStore(path=path)
    raw = _read_bytes(path)
    files = _parse(path, raw)
    logger.info("Loaded %d note(s) in %d file(s) from %s", _count(files), len(files), path)
    return NoteStore(path=path, files=files, revision=_revision(raw))


def save(store: NoteStore) -> NoteStore:
    """Overwrite the notes file with *store* and return it with the new revision."""
    payload = _serialize(store.files)
    _write(store.path, payload)
    return store.model_copy(update={"revision": _revision(payload)})


def get_note(store: NoteStore, file_id: str, line: int) -> Optional[str]:
    lines = store.files.get(normalize_file_id(file_id))
    if not lines:
        return None
    return lines.get(line)


def notes_for_file(store: NoteStore, file_id: str) -> dict[int, str]:
    return dict(store.files.get(normalize_file_id(file_id), {}))


def iter_notes(store: NoteStore) -> Iterator[tuple[str, int, str]]:
    """Yield ``(file_id, line, note)`` ordered by file id then line."""
    for file_id in sorted(store.files):
        lines = store.files[file_id]
        for line in sorted(lines):
            yield file_id, line, lines[line]


def add_note(store: NoteStore, file_id: str, line: int, text: str) -> NoteStore:
    """Set the note at (*file_id*, *line*) and persist.

    Empty *text* is a no-op: the same store is returned and nothing is written.

    Raises:
        ValueError: If *line* is not a 1-based line number.
        PersistError: If writing fails (the given store stays valid).
    """
    if not text:
        logger.debug("Empty note for %s:%s ignored", file_id, line)
        return store
    _check_line(line)
    fid = normalize_file_id(file_id)

    def mutate(files: Notes) -> Notes:
        files.setdefault(fid, {})[line] = text
        return files

    updated = _commit(store, mutate)
    logger.info("Note added at %s:%d", fid, line)
    return updated


def remove_note(store: NoteStore, file_id: str, line: int) -> tuple[NoteStore, bool]:
    """Delete the note at (*file_id*, *line*).

    Returns the new store and whether a note was removed. Nothing is written
    when there was no note.
    """
    fid = normalize_file_id(file_id)
    if get_note(store, fid, line) is None:
        return store, False

    popped = False

    def mutate(files: Notes) -> Notes:
        nonlocal popped
        lines = files.get(fid)
        if lines is not None and line in lines:
            del lines[line]
            popped = True
            if not lines:
                del files[fid]
        return files

    updated = _commit(store, mutate)
    if popped:
        logger.info("Note removed at %s:%d", fid, line)
    else:
        logger.warning("Note at %s:%d was already removed by another session", fid, line)
    return updated, popped


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _commit(store: NoteStore, mutate: Callable[[Notes], Notes]) -> NoteStore:
    base = store.files
    path = store.path
    if path.exists():
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise PersistError(path, f"cannot re-read before writing: {exc}") from exc
        if _revision(raw) != store.revision:
            logger.warning("Notes file %s changed on disk since it was loaded; applying change on top of it", path)
            base = _parse(path, raw)
    files = mutate(_copy(base))
    payload = _serialize(files)
    _write(path, payload)
    return NoteStore(path=path, files=files, revision=_revision(payload))


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise LoadError(path, str(exc)) from exc


def _parse(path: Path, raw: bytes) -> Notes:
    try:
        data = json.loads(raw.decode("utf-8"))
    except ValueError as exc:
        raise LoadError(path, f"invalid JSON: {exc}") from exc
    try:
        parsed = _NOTES_ADAPTER.validate_python(data)
    except ValidationError as exc:
        raise LoadError(path, f"unexpected structure: {exc}") from exc

    files: Notes = {}
    for raw_id, lines in parsed.items():
        try:
            file_id = normalize_file_id(raw_id)
        except ValueError as exc:
            raise LoadError(path, str(exc)) from exc
        target = files.setdefault(file_id, {})
        for key, text in lines.items():
            if not _LINE_KEY.fullmatch(key):
                raise LoadError(path, f"invalid line number {key!r} for {raw_id!r}")
            if not text:
                logger.warning("Pruned empty note at %r line %s in %s", raw_id, key, path)
                continue
            line = int(key)
            if line in target:
                raise LoadError(path, f"duplicate note for {file_id} line {line} (key {raw_id!r})")
            target[line] = text
        if not target:
            del files[file_id]
    return files


def _serialize(files: Notes) -> bytes:
    data = {
        file_id: {str(line): files[file_id][line] for line in sorted(files[file_id])}
        for file_id in sorted(files)
    }
    return (json.dumps(data, ensure_ascii=False, indent=2) + "\n").encode("utf-8")


def _write(path: Path, payload: bytes) -> None:
    tmp = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_bytes(payload)
        tmp.replace(path)
    except OSError as exc:
        if tmp.exists():
            try:
                tmp.unlink()
            except OSError:
                logger.warning("Failed to remove temporary file %s", tmp, exc_info=True)
        raise PersistError(path, str(exc)) from exc


def _revision(raw: bytes) -> str:
    return hashlib.sha256(raw).hexdigest()


def _copy(files: Notes) -> Notes:
    return {file_id: dict(lines) for file_id, lines in files.items()}


def _count(files: Notes) -> int:
    return sum(len(lines) for lines in files.values())


def _check_line(line: int) -> None:
    if isinstance(line, bool) or not isinstance(line, int) or line < 1:
        raise ValueError(f"line must be a 1-based line number: {line!r}")
