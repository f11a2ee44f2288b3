"""Tests for text-to-speech sound creation."""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
from claude_sound.config import TtsConfig
from claude_sound.errors import InvalidInputError, SynthesisError, SynthesisTimeoutError
from claude_sound.tts import MAX_TEXT_LENGTH, TextToSpeech, normalize_language, tts_filename
from claude_sound.utils import short_hash

_CONFIG = TtsConfig(base_url="https://tts.test/translate_tts", timeout=2.0, language="en", user_agent="pytest")


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def _audio_handler(seen: list[httpx.Request]):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b"ID3fake-mp3")

    return handler


class TestHelpers:
    """Test language and filename helpers."""

    @pytest.mark.parametrize("lang", ["en", "de", "pt-BR", "zh-CN"])
    def test_language_kept(self, lang):
        assert normalize_language(lang) == lang

    @pytest.mark.parametrize("lang", [None, "", "e", "1en", "en_US", "en&q=x", "x" * 11])
    def test_language_defaulted(self, lang):
        assert normalize_language(lang) == "en"

    def test_filename_uses_slug_and_hash(self):
        assert tts_filename("Build done!") == f"build-done-{short_hash('Build done!')}"

    def test_filename_slug_limited(self):
        text = "word " * 30
        name = tts_filename(text)
        assert name.startswith("word-word")
        assert len(name.rsplit("-", 1)[0]) <= 40


class TestSynthesize:
    """Test TextToSpeech.synthesize."""

    def test_writes_custom_sound(self, custom_dir: Path):
        seen: list[httpx.Request] = []
        tts = TextToSpeech(custom_dir, config=_CONFIG, client=_client(_audio_handler(seen)))

        acquired = tts.synthesize("  Build done  ", lang="de")

        name = tts_filename("Build done")
        assert acquired.sound_id == f"custom/{name}"
        assert acquired.path == custom_dir / f"{name}.mp3"
        assert acquired.path.read_bytes() == b"ID3fake-mp3"
        request = seen[0]
        assert request.url.params["tl"] == "de"
        assert request.url.params["q"] == "Build done"
        assert request.url.params["client"] == "tw-ob"
        assert request.headers["User-Agent"] == "pytest"

    def test_creates_missing_dir(self, tmp_path: Path):
        target = tmp_path / "nested" / "sounds"
        tts = TextToSpeech(target, config=_CONFIG, client=_client(_audio_handler([])))
        assert tts.synthesize("hi").path.parent == target

    def test_default_language_from_config(self, custom_dir: Path):
        seen: list[httpx.Request] = []
        config = TtsConfig(base_url=_CONFIG.base_url, timeout=1.0, language="fr", user_agent="pytest")
        TextToSpeech(custom_dir, config=config, client=_client(_audio_handler(seen))).synthesize("bonjour")
        assert seen[0].url.params["tl"] == "fr"

    def test_empty_text(self, custom_dir: Path):
        tts = TextToSpeech(custom_dir, config=_CONFIG, client=_client(_audio_handler([])))
        with pytest.raises(InvalidInputError):
            tts.synthesize("   ")

    def test_too_long_rejected_before_network(self, custom_dir: Path):
        seen: list[httpx.Request] = []
        tts = TextToSpeech(custom_dir, config=_CONFIG, client=_client(_audio_handler(seen)))
        with pytest.raises(InvalidInputError):
            tts.synthesize("x" * (MAX_TEXT_LENGTH + 1))
        assert seen == []
        assert list(custom_dir.iterdir()) == []

    def test_exact_limit_allowed(self, custom_dir: Path):
        tts = TextToSpeech(custom_dir, config=_CONFIG, client=_client(_audio_handler([])))
        assert tts.synthesize("x" * MAX_TEXT_LENGTH).path.exists()

    def test_http_error_status(self, custom_dir: Path):
        tts = TextToSpeech(custom_dir, config=_CONFIG, client=_client(lambda request: httpx.Response(503)))
        with pytest.raises(SynthesisError, match="503"):
            tts.synthesize("hello")
        assert list(custom_dir.iterdir()) == []

    def test_timeout(self, custom_dir: Path):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        tts = TextToSpeech(custom_dir, config=_CONFIG, client=_client(handler))
        with pytest.raises(SynthesisTimeoutError):
            tts.synthesize("hello")

    def test_connection_error(self, custom_dir: Path):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("offline", request=request)

        tts = TextToSpeech(custom_dir, config=_CONFIG, client=_client(handler))
        with pytest.raises(SynthesisError):
            tts.synthesize("hello")

    def test_empty_body(self, custom_dir: Path):
        tts = TextToSpeech(custom_dir, config=_CONFIG, client=_client(lambda request: httpx.Response(200)))
        with pytest.raises(SynthesisError):
            tts.synthesize("hello")
