"""Configuration helpers for claude-sound."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .hooks import DEFAULT_RUNNER
from .utils import parse_float

DEFAULT_TTS_URL = "https://translate.google.com/translate_tts"
DEFAULT_TTS_TIMEOUT_SECONDS = 15.0
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _strip_or_none(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def _path_or_default(value: str | None, default: Path) -> Path:
    stripped = _strip_or_none(value)
    if not stripped:
        return default
    return Path(stripped).expanduser()


@dataclass(frozen=True)
class TtsConfig:
    base_url: str
    timeout: float
    language: str
    user_agent: str


@dataclass(frozen=True)
class SoundConfig:
    home: Path
    bundled_dir: Path
    custom_dir: Path
    order_file: Path
    claude_home: Path
    runner: str
    player: str | None
    log_level: str
    tts: TtsConfig

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> SoundConfig:
        source = os.environ if env is None else env
        home = _path_or_default(source.get("CLAUDE_SOUND_HOME"), Path.home() / ".claude-sound")

        timeout = parse_float(source.get("CLAUDE_SOUND_TTS_TIMEOUT"), DEFAULT_TTS_TIMEOUT_SECONDS)
        if timeout <= 0:
            timeout = DEFAULT_TTS_TIMEOUT_SECONDS
        tts = TtsConfig(
            base_url=(_strip_or_none(source.get("CLAUDE_SOUND_TTS_URL")) or DEFAULT_TTS_URL),
            timeout=timeout,
            language=(_strip_or_none(source.get("CLAUDE_SOUND_TTS_LANG")) or "en"),
            user_agent=(_strip_or_none(source.get("CLAUDE_SOUND_USER_AGENT")) or DEFAULT_USER_AGENT),
        )

        log_level = (source.get("CLAUDE_SOUND_LOG_LEVEL") or "WARNING").strip().upper()
        if log_level not in LOG_LEVELS:
            log_level = "WARNING"

        return SoundConfig(
            home=home,
            bundled_dir=_path_or_default(source.get("CLAUDE_SOUND_BUNDLED_DIR"), home / "bundled"),
            custom_dir=_path_or_default(source.get("CLAUDE_SOUND_CUSTOM_DIR"), home / "sounds"),
            order_file=_path_or_default(source.get("CLAUDE_SOUND_ORDER_FILE"), home / "order.json"),
            claude_home=_path_or_default(source.get("CLAUDE_CONFIG_HOME"), Path.home() / ".claude"),
            runner=(_strip_or_none(source.get("CLAUDE_SOUND_RUNNER")) or DEFAULT_RUNNER),
            player=_strip_or_none(source.get("CLAUDE_SOUND_PLAYER")),
            log_level=log_level,
            tts=tts,
        )

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level, logging.WARNING)
