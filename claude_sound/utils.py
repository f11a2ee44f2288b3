"""
Shared helpers for parsing and naming

Provides common helpers for:
- String parsing: Environment variable conversion (parse_float)
- Naming: Filesystem-safe slugs and short non-cryptographic hashes

The short hash only avoids filename collisions. Never use it for integrity checks.
"""

from __future__ import annotations

import re

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def parse_float(value: str | None, default: float) -> float:
    """Best-effort float parser with fallback."""
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits: list[str] = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def short_hash(value: str) -> str:
    """Return a deterministic base36 hash of at most six characters."""
    h = 0
    for char in value:
        h = (h * 31 + ord(char)) & 0xFFFFFFFF
    return _to_base36(h)[:6]


def slugify(value: str, *, allowed: str = r"a-z0-9", fallback: str = "custom", max_length: int = 40) -> str:
    """Lowercase ``value`` and collapse runs of other characters into single hyphens."""
    slug = re.sub(rf"[^{allowed}]+", "-", value.lower())
    slug = slug.strip("-")[:max_length].strip("-")
    return slug or fallback
