"""Shared test fixtures for the claude-sound test suite.

This module provides reusable fixtures for:
- Logger mocking
- Sound directories populated with tiny WAV files
- Configuration objects pointing at temporary directories
"""

from __future__ import annotations

import logging
import wave
from pathlib import Path
from unittest.mock import Mock

import pytest
from claude_sound.config import SoundConfig

# ============================================================================
# Helpers
# ============================================================================


def write_silence_wav(path: Path) -> Path:
    """Write a single-frame silent WAV file to ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with wave.open(str(path), "wb") as wav_file:
        wav_file.setnchannels(1)
        wav_file.setsampwidth(2)
        wav_file.setframerate(8000)
        wav_file.writeframes((0).to_bytes(2, byteorder="little", signed=True))
    return path


# ============================================================================
# Logging Fixtures
# ============================================================================


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing.

    Returns a Mock with spec=logging.Logger to ensure only valid
    logger methods can be called.
    """
    return Mock(spec=logging.Logger)


# ============================================================================
# Sound Directory Fixtures
# ============================================================================


@pytest.fixture
def bundled_dir(tmp_path: Path) -> Path:
    """Bundled pack with a manifest, two ring tones and one tone per category."""
    root = tmp_path / "bundled"
    write_silence_wav(root / "ring2.wav")
    write_silence_wav(root / "ring10.wav")
    write_silence_wav(root / "common" / "chime.wav")
    write_silence_wav(root / "game" / "coin.wav")
    (root / "manifest.json").write_text(
        '[{"id": "ring2", "file": "ring2.wav", "label": "Ring 2"},'
        ' {"id": "ring10", "file": "ring10.wav", "label": "Ring 10"}]\n',
        encoding="utf-8",
    )
    return root


@pytest.fixture
def custom_dir(tmp_path: Path) -> Path:
    root = tmp_path / "sounds"
    root.mkdir()
    return root


@pytest.fixture
def sound_config(tmp_path: Path, bundled_dir: Path, custom_dir: Path) -> SoundConfig:
    """SoundConfig with every directory inside ``tmp_path``."""
    return SoundConfig.from_env(
        {
            "CLAUDE_SOUND_HOME": str(tmp_path / "home"),
            "CLAUDE_SOUND_BUNDLED_DIR": str(bundled_dir),
            "CLAUDE_SOUND_CUSTOM_DIR": str(custom_dir),
            "CLAUDE_CONFIG_HOME": str(tmp_path / "claude-home"),
        }
    )
