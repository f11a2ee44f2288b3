"""Create custom sounds from text using the Google Translate speech endpoint.

The endpoint is free and unauthenticated but limited to roughly 200 characters
per request. Requires network access.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

import httpx

from .config import DEFAULT_TTS_TIMEOUT_SECONDS, DEFAULT_TTS_URL, DEFAULT_USER_AGENT, TtsConfig
from .errors import InvalidInputError, StorageError, SynthesisError, SynthesisTimeoutError
from .utils import short_hash, slugify

LOGGER = logging.getLogger("claude_sound.tts")

MAX_TEXT_LENGTH = 200
DEFAULT_LANGUAGE = "en"
_LANG_RE = re.compile(r"^[A-Za-z][A-Za-z0-9-]*$")


@dataclass(frozen=True)
class AcquiredSound:
    sound_id: str
    path: Path


def normalize_language(lang: str | None) -> str:
    """Return ``lang`` if it looks like a language tag, otherwise the default."""
    if not isinstance(lang, str) or not 2 <= len(lang) <= 10 or not _LANG_RE.match(lang):
        return DEFAULT_LANGUAGE
    return lang


def tts_filename(text: str) -> str:
    return f"{slugify(text[:40])}-{short_hash(text)}"


class TextToSpeech:
    """Fetch spoken audio for short phrases and store it as a custom sound."""

    def __init__(
        self,
        custom_dir: Path,
        *,
        config: TtsConfig | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.custom_dir = custom_dir
        self.config = config or TtsConfig(
            base_url=DEFAULT_TTS_URL,
            timeout=DEFAULT_TTS_TIMEOUT_SECONDS,
            language=DEFAULT_LANGUAGE,
            user_agent=DEFAULT_USER_AGENT,
        )
        self._client = client

    def synthesize(self, text: str, lang: str | None = None) -> AcquiredSound:
        trimmed = (text or "").strip()
        if not trimmed:
            raise InvalidInputError("Text cannot be empty")
        if len(trimmed) > MAX_TEXT_LENGTH:
            raise InvalidInputError(f"Text must be {MAX_TEXT_LENGTH} characters or less")

        language = normalize_language(lang or self.config.language)
        audio = self._fetch(trimmed, language)

        name = tts_filename(trimmed)
        path = self.custom_dir / f"{name}.mp3"
        try:
            self.custom_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(audio)
        except OSError as exc:
            raise StorageError(f"Could not save speech to {path}: {exc}") from exc
        LOGGER.info("[tts] Saved %d bytes of speech to %s", len(audio), path)
        return AcquiredSound(sound_id=f"custom/{name}", path=path)

    def _fetch(self, text: str, language: str) -> bytes:
        params = {"ie": "UTF-8", "tl": language, "client": "tw-ob", "q": text}
        headers = {"User-Agent": self.config.user_agent}
        try:
            if self._client is not None:
                response = self._client.get(
                    self.config.base_url, params=params, headers=headers, timeout=self.config.timeout
                )
                response.raise_for_status()
            else:
                with httpx.Client(timeout=self.config.timeout, follow_redirects=True) as client:
                    response = client.get(self.config.base_url, params=params, headers=headers)
                    response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise SynthesisTimeoutError(f"TTS request timed out after {self.config.timeout:g}s") from exc
        except httpx.HTTPStatusError as exc:
            raise SynthesisError(
                f"TTS request failed: {exc.response.status_code} {exc.response.reason_phrase}"
            ) from exc
        except httpx.HTTPError as exc:
            raise SynthesisError(f"TTS request failed: {exc}") from exc

        content = response.content
        if not content:
            raise SynthesisError("TTS request returned no audio")
        return content
