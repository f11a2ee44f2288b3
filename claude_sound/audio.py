"""Audio playback through external player programs."""

from __future__ import annotations

import logging
import shutil
import subprocess  # nosec B404 - subprocess used to launch audio players
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .errors import NoPlayerFoundError, PlaybackError

_LOGGER = logging.getLogger("claude_sound.audio")

PREVIEW_STOP_TIMEOUT_SECONDS = 2.0


def _powershell_args(executable: str, path: Path) -> list[str]:
    escaped = str(path).replace("'", "''")
    return [
        executable,
        "-NoProfile",
        "-NonInteractive",
        "-Command",
        f"(New-Object Media.SoundPlayer '{escaped}').PlaySync()",
    ]


@dataclass(frozen=True)
class PlayerSpec:
    name: str
    build_args: Callable[[str, Path], list[str]]


PLAYERS: dict[str, PlayerSpec] = {
    "afplay": PlayerSpec("afplay", lambda exe, path: [exe, str(path)]),
    "ffplay": PlayerSpec(
        "ffplay",
        lambda exe, path: [exe, "-nodisp", "-autoexit", "-loglevel", "quiet", str(path)],
    ),
    "mpv": PlayerSpec("mpv", lambda exe, path: [exe, "--no-video", "--really-quiet", str(path)]),
    "mpg123": PlayerSpec("mpg123", lambda exe, path: [exe, "-q", str(path)]),
    "paplay": PlayerSpec("paplay", lambda exe, path: [exe, str(path)]),
    "pw-play": PlayerSpec("pw-play", lambda exe, path: [exe, str(path)]),
    "aplay": PlayerSpec("aplay", lambda exe, path: [exe, "-q", str(path)]),
    "powershell": PlayerSpec("powershell", _powershell_args),
}

PLATFORM_PLAYERS: dict[str, tuple[str, ...]] = {
    "darwin": ("afplay", "ffplay", "mpv"),
    "win32": ("ffplay", "mpv", "powershell"),
    "linux": ("ffplay", "mpv", "mpg123", "paplay", "pw-play", "aplay"),
}


def candidate_players(platform: str) -> tuple[str, ...]:
    """Return the probe order of player programs for ``platform``."""
    if platform in PLATFORM_PLAYERS:
        return PLATFORM_PLAYERS[platform]
    if platform.startswith(("linux", "freebsd", "openbsd", "netbsd")):
        return PLATFORM_PLAYERS["linux"]
    return ("ffplay", "mpv")


class AudioPlayer:
    """Play files with the first available external player.

    At most one preview process is alive at a time; starting a new preview
    kills the previous one.
    """

    def __init__(
        self,
        *,
        platform: str | None = None,
        which: Callable[[str], str | None] = shutil.which,
        preferred: str | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._platform = platform or sys.platform
        self._which = which
        self._preferred = preferred
        self._logger = logger or _LOGGER
        self._player: tuple[PlayerSpec, str] | None = None
        self._preview: subprocess.Popen[bytes] | None = None

    def find_player(self) -> tuple[PlayerSpec, str]:
        """Return the cached ``(spec, executable)`` pair, probing on first use."""
        if self._player is not None:
            return self._player
        candidates = list(candidate_players(self._platform))
        if self._preferred:
            if self._preferred in PLAYERS:
                candidates.insert(0, self._preferred)
            else:
                self._logger.warning("[audio] Unknown preferred player %r, ignoring", self._preferred)
        for name in candidates:
            executable = self._which(name)
            if executable:
                self._logger.debug("[audio] Using %s at %s", name, executable)
                self._player = (PLAYERS[name], executable)
                return self._player
        raise NoPlayerFoundError(f"No supported audio player found (tried: {', '.join(dict.fromkeys(candidates))})")

    def _command(self, path: Path) -> list[str]:
        spec, executable = self.find_player()
        return spec.build_args(executable, path)

    def play(self, path: Path) -> None:
        """Play ``path`` and wait for the player to exit."""
        if not path.is_file():
            raise PlaybackError(f"Sound file not found: {path}")
        command = self._command(path)
        try:
            result = subprocess.run(  # nosec B603 - argument list built from a fixed player table
                command,
                check=False,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            )
        except OSError as exc:
            raise PlaybackError(f"Failed to start {command[0]}: {exc}") from exc
        if result.returncode != 0:
            detail = (result.stderr or b"").decode("utf-8", errors="replace").strip()
            message = f"{Path(command[0]).name} exited with status {result.returncode}"
            raise PlaybackError(f"{message}: {detail}" if detail else message)

    def preview_start(self, path: Path) -> None:
        """Start non-blocking playback, replacing any running preview."""
        self.preview_stop()
        try:
            command = self._command(path)
            self._preview = subprocess.Popen(  # nosec B603 - argument list built from a fixed player table
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except (OSError, NoPlayerFoundError) as exc:
            self._logger.debug("[audio] Preview of %s failed: %s", path, exc)
            self._preview = None

    def preview_stop(self) -> None:
        """Kill the running preview, if any."""
        process, self._preview = self._preview, None
        if process is None:
            return
        try:
            process.kill()
        except (ProcessLookupError, OSError):
            pass
        try:
            process.wait(timeout=PREVIEW_STOP_TIMEOUT_SECONDS)
        except subprocess.TimeoutExpired:
            self._logger.debug("[audio] Preview process %s did not exit after kill", process.pid)

    @property
    def previewing(self) -> bool:
        return self._preview is not None and self._preview.poll() is None
