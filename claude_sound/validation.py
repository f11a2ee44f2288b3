"""Whitelists for values that end up inside generated hook commands."""

from __future__ import annotations

import re
from typing import Any

from .errors import InvalidInputError

HOOK_EVENTS: tuple[str, ...] = (
    "SessionStart",
    "UserPromptSubmit",
    "PreToolUse",
    "PermissionRequest",
    "PostToolUse",
    "PostToolUseFailure",
    "Notification",
    "SubagentStart",
    "SubagentStop",
    "Stop",
    "TeammateIdle",
    "TaskCompleted",
    "PreCompact",
    "SessionEnd",
)

MAX_SOUND_ID_LENGTH = 120

# Alphanumeric, slash, hyphen, underscore only (ring1, common/pop, custom/hello-abc123)
SAFE_SOUND_ID = re.compile(r"^[A-Za-z0-9/_-]+$")


def is_hook_event(name: Any) -> bool:
    return isinstance(name, str) and name in HOOK_EVENTS


def is_valid_sound_id(sound_id: Any) -> bool:
    """Return True when ``sound_id`` is safe to embed in a shell command."""
    return (
        isinstance(sound_id, str)
        and len(sound_id) <= MAX_SOUND_ID_LENGTH
        and SAFE_SOUND_ID.fullmatch(sound_id) is not None
    )


def validate_event_name(name: Any) -> str:
    if not is_hook_event(name):
        raise InvalidInputError(f"Invalid event name: {name!r}")
    return name


def validate_sound_id(sound_id: Any) -> str:
    if not is_valid_sound_id(sound_id):
        raise InvalidInputError(f"Invalid sound id: {sound_id!r}")
    return sound_id
