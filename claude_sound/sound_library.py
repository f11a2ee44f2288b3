"""Sound catalog and resolution helpers for bundled and custom sounds."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import NotInitializedError, SoundNotFoundError
from .tones import MANIFEST_NAME
from .validation import is_valid_sound_id

LOGGER = logging.getLogger("claude_sound.catalog")

ALLOWED_EXTENSIONS = {".wav", ".mp3"}
BUNDLED_CATEGORIES = ("common", "game")
CUSTOM_CATEGORY = "custom"
FLAT_CATEGORY = "ring"
CATEGORY_ORDER = ("common", "game", "ring", "custom")
CATEGORY_LABELS: dict[str, str] = {
    "common": "Common",
    "game": "Game",
    "ring": "Ring",
    "custom": "Custom",
}

_DIGITS_RE = re.compile(r"\d+")


@dataclass(frozen=True)
class SoundListing:
    grouped: dict[str, list[str]]
    labels: dict[str, str] = field(default_factory=dict)

    def ids(self) -> list[str]:
        return [sound_id for category in self.grouped for sound_id in self.grouped[category]]


def category_of(sound_id: str) -> str:
    if "/" in sound_id:
        return sound_id.split("/", 1)[0]
    return FLAT_CATEGORY


def short_name(sound_id: str) -> str:
    return sound_id.split("/", 1)[1] if "/" in sound_id else sound_id


def display_name(sound_id: str, labels: dict[str, str] | None = None) -> str:
    """Render ``Group / label`` for a sound id."""
    label = (labels or {}).get(sound_id) or short_name(sound_id)
    group = CATEGORY_LABELS.get(category_of(sound_id))
    return f"{group} / {label}" if group else label


def _numeric_key(sound_id: str) -> tuple[int, int, str]:
    match = _DIGITS_RE.search(short_name(sound_id))
    if match:
        return (0, int(match.group(0)), sound_id)
    return (1, 0, sound_id)


def _sorted_ids(category: str, ids: Iterable[str]) -> list[str]:
    if category == FLAT_CATEGORY:
        return sorted(ids, key=_numeric_key)
    return sorted(ids)


def _audio_files(directory: Path) -> list[Path]:
    if not directory.is_dir():
        return []
    try:
        candidates = sorted(directory.iterdir())
    except OSError as exc:
        LOGGER.debug("[catalog] Unable to list %s: %s", directory, exc)
        return []
    return [path for path in candidates if path.is_file() and path.suffix.lower() in ALLOWED_EXTENSIONS]


class SoundCatalog:
    """Index of playable sounds, built once and cached until invalidated."""

    def __init__(
        self,
        *,
        bundled_dir: Path,
        custom_dir: Path,
        order_file: Path | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.bundled_dir = bundled_dir
        self.custom_dir = custom_dir
        self.order_file = order_file
        self._logger = logger or LOGGER
        self._index: dict[str, Path] | None = None
        self._manifest_labels: dict[str, str] = {}

    @property
    def is_built(self) -> bool:
        return self._index is not None

    def build(self) -> dict[str, Path]:
        """Build the index if needed and return a copy of it."""
        if self._index is None:
            index: dict[str, Path] = {}
            self._manifest_labels = {}
            for sound_id, path in self._discover():
                self._add(index, sound_id, path)
            self._index = index
            self._logger.debug("[catalog] Indexed %d sound(s)", len(index))
        return dict(self._index)

    def invalidate(self) -> None:
        """Drop the cached index so the next build sees new files."""
        self._index = None

    def get(self) -> dict[str, Path]:
        if self._index is None:
            raise NotInitializedError("Sound catalog has not been built yet")
        return dict(self._index)

    def resolve(self, sound_id: str) -> Path:
        if self._index is None:
            raise NotInitializedError("Sound catalog has not been built yet")
        path = self._index.get(sound_id)
        if path is None:
            raise SoundNotFoundError(f"Unknown sound: {sound_id!r}")
        return path

    def list_ids(self) -> list[str]:
        return self.list_grouped().ids()

    def list_grouped(self) -> SoundListing:
        """Group sound ids by category, applying the order/label overrides."""
        index = self.build()
        buckets: dict[str, list[str]] = {}
        for sound_id in index:
            buckets.setdefault(category_of(sound_id), []).append(sound_id)

        order, overrides = self._load_overrides()
        labels = {**self._manifest_labels, **overrides}
        grouped: dict[str, list[str]] = {}
        categories = [c for c in CATEGORY_ORDER if c in buckets] + sorted(c for c in buckets if c not in CATEGORY_ORDER)
        for category in categories:
            ids = _sorted_ids(category, buckets[category])
            preferred = list(dict.fromkeys(sound_id for sound_id in order.get(category, []) if sound_id in ids))
            seen = set(preferred)
            grouped[category] = preferred + [sound_id for sound_id in ids if sound_id not in seen]
        return SoundListing(grouped=grouped, labels={k: v for k, v in labels.items() if k in index})

    def _add(self, index: dict[str, Path], sound_id: str, path: Path) -> None:
        if not is_valid_sound_id(sound_id):
            self._logger.debug("[catalog] Skipping %s: unsafe sound id %r", path, sound_id)
            return
        existing = index.get(sound_id)
        if existing is None:
            index[sound_id] = path
        elif existing != path:
            self._logger.warning("[catalog] Sound id %r already maps to %s, ignoring %s", sound_id, existing, path)

    def _discover(self) -> Iterable[tuple[str, Path]]:
        yield from self._manifest_sounds()
        for category in BUNDLED_CATEGORIES:
            for path in _audio_files(self.bundled_dir / category):
                yield f"{category}/{path.stem}", path.resolve()
        for path in _audio_files(self.custom_dir):
            yield f"{CUSTOM_CATEGORY}/{path.stem}", path.resolve()

    def _manifest_sounds(self) -> Iterable[tuple[str, Path]]:
        manifest_path = self.bundled_dir / MANIFEST_NAME
        entries = _load_json(manifest_path)
        if not isinstance(entries, list):
            if entries is not None:
                self._logger.warning("[catalog] Ignoring malformed manifest %s", manifest_path)
            return
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            sound_id = entry.get("id")
            filename = entry.get("file")
            if not isinstance(sound_id, str) or not isinstance(filename, str) or "/" in sound_id:
                continue
            path = (self.bundled_dir / filename).resolve()
            if not path.is_file():
                self._logger.debug("[catalog] Manifest entry %s has no file at %s", sound_id, path)
                continue
            label = entry.get("label")
            if isinstance(label, str) and label.strip():
                self._manifest_labels[sound_id] = label.strip()
            yield sound_id, path

    def _load_overrides(self) -> tuple[dict[str, list[str]], dict[str, str]]:
        if self.order_file is None:
            return {}, {}
        payload = _load_json(self.order_file)
        if payload is None:
            return {}, {}
        if not isinstance(payload, dict):
            self._logger.warning("[catalog] Ignoring malformed order file %s", self.order_file)
            return {}, {}

        order: dict[str, list[str]] = {}
        raw_order = payload.get("order")
        if isinstance(raw_order, dict):
            for category, ids in raw_order.items():
                if isinstance(category, str) and isinstance(ids, list):
                    order[category] = [sound_id for sound_id in ids if isinstance(sound_id, str)]

        labels: dict[str, str] = {}
        raw_labels = payload.get("labels")
        if isinstance(raw_labels, dict):
            for sound_id, label in raw_labels.items():
                if isinstance(sound_id, str) and isinstance(label, str) and label.strip():
                    labels[sound_id] = label.strip()
        return order, labels


def _load_json(path: Path) -> Any | None:
    if not path.exists():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError, UnicodeDecodeError):
        LOGGER.debug("[catalog] Unable to parse %s", path)
        return None
