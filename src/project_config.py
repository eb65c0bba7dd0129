"""Project root resolution and per-project config.

Standard paths:
- <project_root>/.line-notes.yaml  (optional, NotesConfig)
- <project_root>/notes.json        (notes file, name configurable)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from errors import ConfigurationError
from models import NotesConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".line-notes.yaml"
ROOT_ENV = "LINE_NOTES_ROOT"
ROOT_MARKERS = (CONFIG_FILENAME, "notes.json", ".git")


def resolve_project_root(explicit: Path | str | None = None, *, cwd: Path | None = None) -> Path:
    """Return the project root notes are scoped to.

    Order: *explicit*, ``$LINE_NOTES_ROOT``, then the nearest ancestor of
    *cwd* holding one of ``ROOT_MARKERS``.

    Raises:
        ConfigurationError: If no root can be resolved.
    """
    candidate = explicit or (os.environ.get(ROOT_ENV) or "").strip() or None
    if candidate is not None:
        root = Path(candidate).expanduser()
        if not root.is_dir():
            raise ConfigurationError(f"Project root is not a directory: {root}")
        return root.resolve()

    start = (cwd or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        if any((directory / marker).exists() for marker in ROOT_MARKERS):
            logger.debug("Resolved project root %s from %s", directory, start)
            return directory
    raise ConfigurationError("No workspace folder is open.")


def get_config_path(project_root: Path) -> Path:
    return project_root / CONFIG_FILENAME


def load_config(project_root: Path) -> NotesConfig:
    """Read ``.line-notes.yaml``; defaults when the file is absent.

    Raises:
        ConfigurationError: If the file is not valid YAML or fails validation.
    """
    path = get_config_path(project_root)
    if not path.exists():
        return NotesConfig()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Cannot read {path}: {exc}") from exc
    try:
        return NotesConfig.model_validate(data or {})
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid config in {path}: {exc}") from exc


def get_notes_path(project_root: Path, config: NotesConfig | None = None) -> Path:
    """Return ``<project_root>/<notes_file>``."""
    cfg = config or NotesConfig()
    return project_root / cfg.notes_file
