"""Tests for shared parsing and naming helpers."""

from __future__ import annotations

from claude_sound.utils import parse_float, short_hash, slugify


class TestParseFloat:
    """Test parse_float fallback behavior."""

    def test_valid(self):
        assert parse_float("2.5", 1.0) == 2.5

    def test_none_uses_default(self):
        assert parse_float(None, 1.0) == 1.0

    def test_garbage_uses_default(self):
        assert parse_float("soon", 3.0) == 3.0


class TestShortHash:
    """Test the filename collision hash."""

    def test_deterministic(self):
        assert short_hash("hello world") == short_hash("hello world")

    def test_known_value(self):
        # "a" -> 97 -> base36 "2p"
        assert short_hash("a") == "2p"

    def test_empty_string(self):
        assert short_hash("") == "0"

    def test_at_most_six_base36_chars(self):
        value = short_hash("The quick brown fox jumps over the lazy dog" * 10)
        assert 1 <= len(value) <= 6
        assert all(ch in "0123456789abcdefghijklmnopqrstuvwxyz" for ch in value)

    def test_differs_for_different_input(self):
        assert short_hash("build done") != short_hash("build failed")


class TestSlugify:
    """Test slug generation."""

    def test_collapses_punctuation(self):
        assert slugify("Hello, World!") == "hello-world"

    def test_strips_edges(self):
        assert slugify("  --Done--  ") == "done"

    def test_fallback_when_empty(self):
        assert slugify("!!!") == "custom"
        assert slugify("!!!", fallback="imported") == "imported"

    def test_truncates_without_trailing_hyphen(self):
        slug = slugify("a" * 39 + " bcd", max_length=40)
        assert slug == "a" * 39
        assert len(slugify("x" * 100)) == 40

    def test_allowed_characters_kept(self):
        assert slugify("My_Sound file", allowed=r"a-z0-9_-") == "my_sound-file"
        assert slugify("My_Sound file") == "my-sound-file"
