from __future__ import annotations

import json
import wave
from pathlib import Path
from unittest.mock import Mock

import pytest
from claude_sound.errors import NotInitializedError, SoundNotFoundError
from claude_sound.sound_library import SoundCatalog, category_of, display_name, short_name


def _write_silence_wav(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with wave.open(str(path), "wb") as wav_file:
        wav_file.setnchannels(1)
        wav_file.setsampwidth(2)
        wav_file.setframerate(8000)
        wav_file.writeframes((0).to_bytes(2, byteorder="little", signed=True))


def _catalog(bundled_dir: Path, custom_dir: Path, **kwargs) -> SoundCatalog:
    return SoundCatalog(bundled_dir=bundled_dir, custom_dir=custom_dir, **kwargs)


def test_category_and_names() -> None:
    assert category_of("ring3") == "ring"
    assert category_of("custom/hello") == "custom"
    assert short_name("game/coin") == "coin"
    assert display_name("game/coin") == "Game / coin"
    assert display_name("ring2", {"ring2": "Ring 2"}) == "Ring / Ring 2"


def test_resolve_before_build_fails(bundled_dir: Path, custom_dir: Path) -> None:
    catalog = _catalog(bundled_dir, custom_dir)

    with pytest.raises(NotInitializedError):
        catalog.resolve("ring2")
    with pytest.raises(NotInitializedError):
        catalog.get()


def test_build_indexes_all_sources(bundled_dir: Path, custom_dir: Path) -> None:
    _write_silence_wav(custom_dir / "hello-abc123.wav")
    (custom_dir / "notes.txt").write_text("ignored", encoding="utf-8")
    catalog = _catalog(bundled_dir, custom_dir)

    index = catalog.build()

    assert set(index) == {"ring2", "ring10", "common/chime", "game/coin", "custom/hello-abc123"}
    assert catalog.resolve("common/chime") == (bundled_dir / "common" / "chime.wav").resolve()


def test_resolve_unknown_sound(bundled_dir: Path, custom_dir: Path) -> None:
    catalog = _catalog(bundled_dir, custom_dir)
    catalog.build()

    with pytest.raises(SoundNotFoundError):
        catalog.resolve("ring99")


def test_build_is_cached_until_invalidated(bundled_dir: Path, custom_dir: Path) -> None:
    catalog = _catalog(bundled_dir, custom_dir)
    catalog.build()
    _write_silence_wav(custom_dir / "late.wav")

    assert "custom/late" not in catalog.build()

    catalog.invalidate()
    assert "custom/late" in catalog.build()


def test_grouped_order_and_numeric_sort(bundled_dir: Path, custom_dir: Path) -> None:
    _write_silence_wav(custom_dir / "zeta.mp3")
    _write_silence_wav(custom_dir / "alpha.wav")
    catalog = _catalog(bundled_dir, custom_dir)

    listing = catalog.list_grouped()

    assert list(listing.grouped) == ["common", "game", "ring", "custom"]
    assert listing.grouped["ring"] == ["ring2", "ring10"]
    assert listing.grouped["custom"] == ["custom/alpha", "custom/zeta"]
    assert listing.labels["ring10"] == "Ring 10"
    assert catalog.list_ids()[0] == "common/chime"


def test_order_file_overrides(bundled_dir: Path, custom_dir: Path, tmp_path: Path) -> None:
    _write_silence_wav(bundled_dir / "common" / "pop.wav")
    order_file = tmp_path / "order.json"
    order_file.write_text(
        json.dumps(
            {
                "order": {"common": ["common/pop", "common/missing"], "ring": ["ring10"]},
                "labels": {"common/pop": "Bubble", "ring10": "Loud ring", "common/missing": "Ghost"},
            }
        ),
        encoding="utf-8",
    )
    catalog = _catalog(bundled_dir, custom_dir, order_file=order_file)

    listing = catalog.list_grouped()

    assert listing.grouped["common"] == ["common/pop", "common/chime"]
    assert listing.grouped["ring"] == ["ring10", "ring2"]
    assert listing.labels["common/pop"] == "Bubble"
    assert listing.labels["ring10"] == "Loud ring"
    assert "common/missing" not in listing.labels


def test_malformed_order_file_ignored(bundled_dir: Path, custom_dir: Path, tmp_path: Path) -> None:
    order_file = tmp_path / "order.json"
    order_file.write_text("{nope", encoding="utf-8")
    catalog = _catalog(bundled_dir, custom_dir, order_file=order_file)

    assert catalog.list_grouped().grouped["ring"] == ["ring2", "ring10"]


def test_unsafe_file_names_skipped(bundled_dir: Path, custom_dir: Path) -> None:
    _write_silence_wav(custom_dir / "bad name;rm.wav")
    catalog = _catalog(bundled_dir, custom_dir)

    assert not any("bad" in sound_id for sound_id in catalog.build())


def test_first_source_wins_on_collision(bundled_dir: Path, custom_dir: Path, mock_logger: Mock) -> None:
    manifest = json.loads((bundled_dir / "manifest.json").read_text(encoding="utf-8"))
    manifest.append({"id": "ring2", "file": "common/chime.wav"})
    (bundled_dir / "manifest.json").write_text(json.dumps(manifest), encoding="utf-8")
    catalog = _catalog(bundled_dir, custom_dir, logger=mock_logger)

    index = catalog.build()

    assert index["ring2"] == (bundled_dir / "ring2.wav").resolve()
    mock_logger.warning.assert_called_once()


def test_manifest_entry_without_file_skipped(bundled_dir: Path, custom_dir: Path) -> None:
    (bundled_dir / "ring10.wav").unlink()
    catalog = _catalog(bundled_dir, custom_dir)

    assert "ring10" not in catalog.build()


def test_missing_directories(tmp_path: Path) -> None:
    catalog = _catalog(tmp_path / "none", tmp_path / "also-none")

    assert catalog.build() == {}
    assert catalog.list_grouped().grouped == {}


def test_order_file_duplicates_listed_once(bundled_dir: Path, custom_dir: Path, tmp_path: Path) -> None:
    order_file = tmp_path / "order.json"
    order_file.write_text(json.dumps({"order": {"ring": ["ring10", "ring10", "ring2", "ring10"]}}), encoding="utf-8")
    catalog = _catalog(bundled_dir, custom_dir, order_file=order_file)

    listing = catalog.list_grouped()

    assert listing.grouped["ring"] == ["ring10", "ring2"]
    assert listing.ids().count("ring10") == 1
