"""Render the bundled claude-sound tone pack.

Ring tones live at the top of the pack and are listed in ``manifest.json``;
``common`` and ``game`` tones are rendered into category subdirectories and
picked up by directory scan.
"""

from __future__ import annotations

import json
import logging
import math
import wave
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from .errors import StorageError

LOGGER = logging.getLogger("claude_sound.tones")

SAMPLE_RATE = 44_100
MAX_AMPLITUDE = 28_000
MANIFEST_NAME = "manifest.json"


@dataclass(frozen=True)
class Segment:
    duration: float
    freqs: tuple[float, ...]
    envelope: tuple[float, float] = (0.01, 0.2)  # attack, decay fraction
    gain: float = 1.0
    shimmer: bool = False
    glide: float = 0.0  # frequency multiplier reached at segment end, 0 = none


@dataclass(frozen=True)
class ToneSpec:
    sound_id: str
    label: str
    segments: tuple[Segment, ...]

    @property
    def relative_path(self) -> Path:
        return Path(f"{self.sound_id}.wav")

    @property
    def in_manifest(self) -> bool:
        return "/" not in self.sound_id


def _ring(number: int, low: float, high: float, beats: int, beat: float) -> ToneSpec:
    segments: list[Segment] = []
    for index in range(beats):
        freq = high if index % 2 else low
        segments.append(Segment(beat, (freq, freq * 1.5), envelope=(0.01, 0.35), gain=0.8))
        segments.append(Segment(beat / 3, (), gain=0.0))
    return ToneSpec(sound_id=f"ring{number}", label=f"Ring {number}", segments=tuple(segments))


TONES: tuple[ToneSpec, ...] = (
    _ring(1, 660, 880, 2, 0.14),
    _ring(2, 523, 659, 2, 0.16),
    _ring(3, 784, 988, 3, 0.1),
    _ring(4, 440, 554, 2, 0.2),
    _ring(5, 880, 1175, 4, 0.08),
    _ring(6, 392, 523, 3, 0.14),
    _ring(7, 698, 932, 2, 0.12),
    _ring(8, 587, 740, 4, 0.1),
    _ring(9, 1047, 1319, 2, 0.1),
    _ring(10, 330, 494, 3, 0.18),
    ToneSpec(
        sound_id="common/chime",
        label="Chime",
        segments=(Segment(0.35, (880, 1320), envelope=(0.02, 0.35), gain=0.7),),
    ),
    ToneSpec(
        sound_id="common/ding",
        label="Ding",
        segments=(Segment(0.3, (1175, 2350), envelope=(0.003, 0.6), gain=0.75),),
    ),
    ToneSpec(
        sound_id="common/pop",
        label="Pop",
        segments=(Segment(0.08, (620,), envelope=(0.002, 0.5), gain=0.9, glide=1.6),),
    ),
    ToneSpec(
        sound_id="common/success",
        label="Success",
        segments=(
            Segment(0.12, (523,), envelope=(0.005, 0.2), gain=0.8),
            Segment(0.12, (659,), envelope=(0.005, 0.2), gain=0.8),
            Segment(0.22, (784,), envelope=(0.005, 0.4), gain=0.85),
        ),
    ),
    ToneSpec(
        sound_id="common/error",
        label="Error",
        segments=(
            Segment(0.2, (349,), envelope=(0.005, 0.25), gain=0.85),
            Segment(0.3, (262,), envelope=(0.005, 0.4), gain=0.85),
        ),
    ),
    ToneSpec(
        sound_id="common/attention",
        label="Attention",
        segments=(
            Segment(0.1, (698,), envelope=(0.005, 0.25), gain=0.85),
            Segment(0.05, (), gain=0.0),
            Segment(0.1, (698,), envelope=(0.005, 0.25), gain=0.85),
        ),
    ),
    ToneSpec(
        sound_id="game/coin",
        label="Coin",
        segments=(
            Segment(0.07, (988,), envelope=(0.002, 0.1), gain=0.7),
            Segment(0.25, (1319,), envelope=(0.002, 0.6), gain=0.7),
        ),
    ),
    ToneSpec(
        sound_id="game/jump",
        label="Jump",
        segments=(Segment(0.18, (330,), envelope=(0.005, 0.3), gain=0.8, glide=2.2),),
    ),
    ToneSpec(
        sound_id="game/laser",
        label="Laser",
        segments=(Segment(0.22, (1600,), envelope=(0.002, 0.3), gain=0.7, glide=0.25),),
    ),
    ToneSpec(
        sound_id="game/powerup",
        label="Power Up",
        segments=(
            Segment(0.08, (392,), envelope=(0.003, 0.2), gain=0.75),
            Segment(0.08, (523,), envelope=(0.003, 0.2), gain=0.75),
            Segment(0.08, (659,), envelope=(0.003, 0.2), gain=0.75),
            Segment(0.2, (784, 1047), envelope=(0.003, 0.4), gain=0.8, shimmer=True),
        ),
    ),
    ToneSpec(
        sound_id="game/gameover",
        label="Game Over",
        segments=(
            Segment(0.2, (494,), envelope=(0.005, 0.2), gain=0.8),
            Segment(0.2, (440,), envelope=(0.005, 0.2), gain=0.8),
            Segment(0.45, (392,), envelope=(0.005, 0.6), gain=0.8, glide=0.9),
        ),
    ),
)


def _render_segment(segment: Segment, frames: list[float]) -> None:
    total_samples = max(1, int(segment.duration * SAMPLE_RATE))
    attack_samples = max(1, int(total_samples * segment.envelope[0]))
    decay_samples = max(1, int(total_samples * segment.envelope[1]))
    phases = [0.0 for _ in segment.freqs]
    for i in range(total_samples):
        t = i / SAMPLE_RATE
        env = 1.0
        if i < attack_samples:
            env *= i / attack_samples
        if i > total_samples - decay_samples:
            env *= max(0.0, (total_samples - i) / decay_samples)
        bend = 1.0
        if segment.glide:
            bend = segment.glide ** (i / total_samples)
        sample_val = 0.0
        for idx, freq in enumerate(segment.freqs):
            phases[idx] += 2 * math.pi * freq * bend / SAMPLE_RATE
            mod = 1.0
            if segment.shimmer and idx % 2 == 0:
                mod += 0.08 * math.sin(2 * math.pi * 6.5 * t)
            sample_val += math.sin(phases[idx]) * mod
        sample_val /= max(1, len(segment.freqs))
        sample_val *= env * segment.gain
        frames.append(sample_val)


def _to_pcm16(frames: list[float]) -> bytes:
    """Pack samples as little-endian 16-bit PCM, attenuating only when they clip."""
    loudest = max((abs(sample) for sample in frames), default=0.0)
    gain = MAX_AMPLITUDE / loudest if loudest > 1.0 else MAX_AMPLITUDE
    return b"".join(int(sample * gain).to_bytes(2, "little", signed=True) for sample in frames)


def render_tone(spec: ToneSpec, output_dir: Path) -> Path:
    frames: list[float] = []
    for segment in spec.segments:
        _render_segment(segment, frames)
    path = output_dir / spec.relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    with wave.open(str(path), "wb") as wav_file:
        wav_file.setnchannels(1)
        wav_file.setsampwidth(2)
        wav_file.setframerate(SAMPLE_RATE)
        wav_file.writeframes(_to_pcm16(frames))
    return path


def write_manifest(output_dir: Path, tones: Iterable[ToneSpec] = TONES) -> Path:
    manifest = [
        {"id": spec.sound_id, "file": spec.relative_path.as_posix(), "label": spec.label}
        for spec in tones
        if spec.in_manifest
    ]
    output_dir.mkdir(parents=True, exist_ok=True)
    manifest_path = output_dir / MANIFEST_NAME
    manifest_path.write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")
    return manifest_path


def ensure_pack(
    output_dir: Path,
    *,
    force: bool = False,
    strict: bool = False,
    tones: Iterable[ToneSpec] = TONES,
) -> list[Path]:
    """Render any missing tones and the manifest into ``output_dir``.

    Returns the paths that were (re)rendered. By default failures are logged and
    leave the catalog to work with whatever is already on disk; with ``strict``
    they raise :class:`StorageError`.
    """
    specs = tuple(tones)
    rendered: list[Path] = []
    try:
        for spec in specs:
            if not force and (output_dir / spec.relative_path).exists():
                continue
            rendered.append(render_tone(spec, output_dir))
        if force or rendered or not (output_dir / MANIFEST_NAME).exists():
            write_manifest(output_dir, specs)
    except OSError as exc:
        if strict:
            raise StorageError(f"Unable to render tone pack into {output_dir}: {exc}") from exc
        LOGGER.warning("[tones] Unable to render tone pack into %s: %s", output_dir, exc)
    if rendered:
        LOGGER.info("[tones] Rendered %d tone(s) into %s", len(rendered), output_dir)
    return rendered
