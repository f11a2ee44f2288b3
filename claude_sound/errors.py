"""Exception hierarchy shared by the claude-sound modules."""

from __future__ import annotations


class ClaudeSoundError(RuntimeError):
    """Base class for every error the CLI reports to the operator."""


class InvalidInputError(ClaudeSoundError):
    """Malformed event name, sound id, text or file."""


class TooLargeError(InvalidInputError):
    """Raised when an imported file exceeds the size ceiling."""


class SoundNotFoundError(ClaudeSoundError):
    """Unknown sound id or missing source file."""


class NotInitializedError(ClaudeSoundError):
    """Raised when the sound catalog is queried before it was built."""


class NoPlayerFoundError(ClaudeSoundError):
    """No supported audio player is installed on this platform."""


class PlaybackError(ClaudeSoundError):
    """The audio player could not be started or exited with an error."""


class SynthesisError(ClaudeSoundError):
    """Text-to-speech request failed."""


class SynthesisTimeoutError(SynthesisError):
    """Text-to-speech request did not finish within the timeout."""


class StorageError(ClaudeSoundError):
    """Filesystem failure other than an expected missing file."""


class SettingsFileError(StorageError):
    """A settings file could not be read, parsed or written."""
