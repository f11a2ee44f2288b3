"""Import local audio files into the custom sounds directory."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from .errors import InvalidInputError, SoundNotFoundError, StorageError, TooLargeError
from .tts import AcquiredSound
from .utils import short_hash, slugify

LOGGER = logging.getLogger("claude_sound.importer")

ALLOWED_EXTENSIONS = (".mp3", ".wav")
MAX_FILE_SIZE = 5 * 1024 * 1024
MAX_NAME_ATTEMPTS = 50


def _resolve_source(raw: str, cwd: Path | None = None) -> Path:
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidInputError("Path cannot be empty")
    if "\0" in raw:
        raise InvalidInputError("Invalid path")
    trimmed = raw.strip()
    candidate = Path(trimmed).expanduser()
    if not candidate.is_absolute():
        candidate = (cwd or Path.cwd()) / candidate
    return Path(os.path.normpath(candidate))


def validate_source(raw: str, *, cwd: Path | None = None) -> Path:
    """Resolve ``raw`` and check it is a non-empty, reasonably small audio file."""
    path = _resolve_source(raw, cwd)
    ext = path.suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise InvalidInputError(f"Only .mp3 and .wav files are supported, got {ext or '(no extension)'}")
    try:
        stat = path.stat()
    except FileNotFoundError as exc:
        raise SoundNotFoundError(f"File not found: {path}") from exc
    except OSError as exc:
        raise InvalidInputError(f"Cannot access {path}: {exc}") from exc
    if path.is_dir():
        raise InvalidInputError("Path must be a file, not a directory")
    if not path.is_file():
        raise InvalidInputError(f"Not a regular file: {path}")
    if stat.st_size > MAX_FILE_SIZE:
        raise TooLargeError(f"File too large (max {MAX_FILE_SIZE // (1024 * 1024)}MB)")
    if stat.st_size == 0:
        raise InvalidInputError("File is empty")
    return path


def _free_destination(source: Path, custom_dir: Path, base_slug: str, ext: str) -> Path:
    destination = custom_dir / f"{base_slug}{ext}"
    attempt = 0
    while destination.exists():
        if attempt >= MAX_NAME_ATTEMPTS:
            raise InvalidInputError(f"Could not find a free name for {base_slug}{ext} in {custom_dir}")
        suffix = short_hash(f"{source}{attempt}")
        destination = custom_dir / f"{base_slug}-{suffix}{ext}"
        attempt += 1
    return destination


def import_sound(source: str, custom_dir: Path, *, cwd: Path | None = None) -> AcquiredSound:
    """Copy an .mp3/.wav file into ``custom_dir`` under a slugged name.

    An existing file with the same name is never overwritten; a short hash
    suffix is added instead.
    """
    path = validate_source(source, cwd=cwd)
    ext = path.suffix.lower()
    base_slug = slugify(path.stem, allowed=r"a-z0-9_-", fallback="imported")

    try:
        custom_dir.mkdir(parents=True, exist_ok=True)
        destination = _free_destination(path, custom_dir, base_slug, ext)
        # read + write so a symlinked source is copied as content
        destination.write_bytes(path.read_bytes())
    except OSError as exc:
        raise StorageError(f"Could not import {path}: {exc}") from exc

    LOGGER.info("Imported %s as %s", path, destination)
    return AcquiredSound(sound_id=f"custom/{destination.stem}", path=destination)
