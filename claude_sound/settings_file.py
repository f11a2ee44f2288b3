"""Read and write the Claude Code settings files that hold hook definitions.

Writes replace the whole document in one ``os.replace`` so a failure while
serializing never leaves a half-written file behind. Concurrent writers are
not coordinated.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Literal

from .errors import InvalidInputError, SettingsFileError
from .hooks import extract_managed_mapping

LOGGER = logging.getLogger("claude_sound.settings")

Scope = Literal["global", "project", "projectLocal"]
SCOPES: tuple[Scope, ...] = ("project", "projectLocal", "global")

SCOPE_LABELS: dict[str, str] = {
    "project": "Project (shared): .claude/settings.json",
    "projectLocal": "Project (local): .claude/settings.local.json",
    "global": "Global: ~/.claude/settings.json",
}


def config_path_for_scope(scope: str, project_dir: Path, *, claude_home: Path | None = None) -> Path:
    """Return the settings file for ``scope``."""
    if scope == "global":
        return (claude_home or Path.home() / ".claude") / "settings.json"
    if scope == "project":
        return project_dir / ".claude" / "settings.json"
    if scope == "projectLocal":
        return project_dir / ".claude" / "settings.local.json"
    raise InvalidInputError(f"Unknown scope: {scope!r}")


def read_settings(path: Path) -> dict[str, Any]:
    """Load a settings document, treating a missing file as empty."""
    try:
        raw = path.read_text(encoding="utf-8")
    except (FileNotFoundError, NotADirectoryError):
        LOGGER.debug("Settings file %s does not exist, starting empty", path)
        return {}
    except OSError as exc:
        raise SettingsFileError(f"Could not read {path}: {exc}") from exc

    if not raw.strip():
        return {}
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SettingsFileError(f"Could not parse JSON at {path}: {exc}") from exc
    if not isinstance(document, dict):
        raise SettingsFileError(f"Settings at {path} must be a JSON object")
    return document


def _new_file_mode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_settings(path: Path, document: dict[str, Any]) -> None:
    """Atomically replace ``path`` with ``document`` serialized as JSON."""
    text = json.dumps(document, indent=2, ensure_ascii=False) + "\n"
    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            tmp_name = handle.name
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        # Temp files start as 0600; match the existing file or a plain new file.
        os.chmod(tmp_name, path.stat().st_mode & 0o777 if path.exists() else _new_file_mode())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise SettingsFileError(f"Could not write {path}: {exc}") from exc
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
    LOGGER.info("Wrote hook settings to '%s'", path)


def inherited_mappings(
    scope: str,
    project_dir: Path,
    *,
    claude_home: Path | None = None,
) -> dict[str, tuple[str, str]]:
    """Return ``event -> (sound_id, source_scope)`` inherited from parent scopes.

    ``project`` inherits from ``global``; ``projectLocal`` inherits from both,
    with the shared project file taking precedence.
    """
    parents: list[str] = []
    if scope in {"project", "projectLocal"}:
        parents.append("global")
    if scope == "projectLocal":
        parents.append("project")

    inherited: dict[str, tuple[str, str]] = {}
    for parent in parents:
        path = config_path_for_scope(parent, project_dir, claude_home=claude_home)
        try:
            document = read_settings(path)
        except SettingsFileError as exc:
            LOGGER.warning("Skipping inherited %s settings: %s", parent, exc)
            continue
        for event_name, sound_id in extract_managed_mapping(document).items():
            inherited[event_name] = (sound_id, parent)
    return inherited
