"""Managed hook extraction and reconciliation for Claude Code settings.

A settings document is owned by the host tool and may contain anything. The
only entries this module touches are handlers whose command carries the
``--managed-by claude-sound`` marker; everything else is carried over as-is.
"""

from __future__ import annotations

import copy
import logging
import re
from collections.abc import Mapping
from typing import Any

from .errors import InvalidInputError
from .validation import is_hook_event, is_valid_sound_id, validate_event_name, validate_sound_id

LOGGER = logging.getLogger("claude_sound.hooks")

TOOL_NAME = "claude-sound"
MANAGED_TOKEN = f"--managed-by {TOOL_NAME}"
DEFAULT_RUNNER = TOOL_NAME
HANDLER_TIMEOUT_SECONDS = 5

_SOUND_FLAG_RE = re.compile(r"--sound\s+(\S+)")
# Runner is operator-supplied; keep it to plain words, paths and version pins.
_SAFE_RUNNER_RE = re.compile(r"^[A-Za-z0-9@/._:=+-]+(?: [A-Za-z0-9@/._:=+-]+)*$")
# Flags of the generated command; the runner must not contain them anywhere.
_RESERVED_FLAGS = ("--event", "--sound", "--managed-by")


def is_managed_command(command: Any) -> bool:
    return isinstance(command, str) and MANAGED_TOKEN in command


def extract_managed_sound_id(command: Any) -> str | None:
    """Return the token following ``--sound`` in a command, if any."""
    if not isinstance(command, str):
        return None
    match = _SOUND_FLAG_RE.search(command)
    return match.group(1) if match else None


def _validate_runner(runner: str) -> str:
    if not isinstance(runner, str) or not _SAFE_RUNNER_RE.fullmatch(runner):
        raise InvalidInputError(f"Invalid runner command: {runner!r}")
    if any(flag in runner for flag in _RESERVED_FLAGS):
        raise InvalidInputError(f"Invalid runner command: {runner!r}")
    return runner


def build_managed_command(event_name: str, sound_id: str, *, runner: str = DEFAULT_RUNNER) -> str:
    """Build the hook command that plays ``sound_id`` when ``event_name`` fires.

    The argument layout is stable so :func:`extract_managed_sound_id` can parse
    it back later.
    """
    validate_event_name(event_name)
    validate_sound_id(sound_id)
    _validate_runner(runner)
    return f"{runner} play --event {event_name} --sound {sound_id} {MANAGED_TOKEN}"


def _handlers(group: Any) -> list[Any] | None:
    if not isinstance(group, dict):
        return None
    handlers = group.get("hooks")
    return handlers if isinstance(handlers, list) else None


def _is_managed_handler(handler: Any) -> bool:
    return isinstance(handler, dict) and is_managed_command(handler.get("command"))


def extract_managed_mapping(document: Mapping[str, Any] | None) -> dict[str, str]:
    """Return the event -> sound id mapping previously written by this tool.

    Commands that were hand-edited into an unsafe shape are ignored. When an
    event carries several managed handlers the last one scanned wins.
    """
    mapping: dict[str, str] = {}
    hooks = (document or {}).get("hooks")
    if not isinstance(hooks, dict):
        return mapping

    for event_name, groups in hooks.items():
        if not is_hook_event(event_name) or not isinstance(groups, list):
            continue
        for group in groups:
            for handler in _handlers(group) or []:
                if not _is_managed_handler(handler):
                    continue
                sound_id = extract_managed_sound_id(handler["command"])
                if sound_id and is_valid_sound_id(sound_id):
                    mapping[event_name] = sound_id
                else:
                    LOGGER.debug("Ignoring managed %s handler with unsafe sound id %r", event_name, sound_id)
    return mapping


def _strip_managed(hooks: dict[str, Any]) -> None:
    for event_name in list(hooks):
        groups = hooks[event_name]
        if not isinstance(groups, list):
            continue
        kept_groups: list[Any] = []
        removed = False
        for group in groups:
            handlers = _handlers(group)
            if handlers is None:
                kept_groups.append(group)
                continue
            kept = [handler for handler in handlers if not _is_managed_handler(handler)]
            if len(kept) == len(handlers):
                kept_groups.append(group)
                continue
            removed = True
            if kept:
                kept_groups.append({**group, "hooks": kept})
        if removed and not kept_groups:
            del hooks[event_name]
        else:
            hooks[event_name] = kept_groups


def _managed_group(event_name: str, sound_id: str, runner: str) -> dict[str, Any]:
    handler = {
        "type": "command",
        "command": build_managed_command(event_name, sound_id, runner=runner),
        "async": True,
        "timeout": HANDLER_TIMEOUT_SECONDS,
    }
    return {"matcher": "*", "hooks": [handler]}


def reconcile(
    document: Mapping[str, Any] | None,
    mapping: Mapping[str, str | None],
    *,
    runner: str = DEFAULT_RUNNER,
) -> dict[str, Any]:
    """Return a copy of ``document`` whose managed hooks match ``mapping``.

    Managed handlers are removed everywhere first, then one wildcard group per
    mapped event is appended after any groups the operator or other tools
    created. Events mapped to an empty value are left unmanaged. The caller's
    document is never modified.
    """
    out = dict(document or {})
    raw_hooks = out.get("hooks", {})
    if raw_hooks is None:
        raw_hooks = {}
    if not isinstance(raw_hooks, dict):
        raise InvalidInputError(f"Settings 'hooks' must be an object, got {type(raw_hooks).__name__}")
    hooks: dict[str, Any] = copy.deepcopy(raw_hooks)

    _strip_managed(hooks)

    for event_name, sound_id in mapping.items():
        if not sound_id:
            continue
        group = _managed_group(event_name, sound_id, runner)
        existing = hooks.get(event_name, [])
        if not isinstance(existing, list):
            raise InvalidInputError(f"Settings hooks.{event_name} must be a list")
        hooks[event_name] = [*existing, group]

    if hooks:
        out["hooks"] = hooks
    else:
        out.pop("hooks", None)
    return out
