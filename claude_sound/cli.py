"""Command-line entry point for claude-sound."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path

from . import __version__
from .audio import AudioPlayer
from .config import SoundConfig
from .errors import ClaudeSoundError, InvalidInputError
from .hooks import TOOL_NAME, extract_managed_mapping, reconcile
from .importer import import_sound
from .settings_file import SCOPES, config_path_for_scope, inherited_mappings, read_settings, write_settings
from .sound_library import CATEGORY_LABELS, SoundCatalog, display_name
from .tones import ensure_pack
from .tts import TextToSpeech
from .validation import HOOK_EVENTS, validate_event_name, validate_sound_id

LOGGER = logging.getLogger("claude_sound.cli")

DEFAULT_PREVIEW_INTERVAL = 1.5


@dataclass
class CliContext:
    config: SoundConfig
    catalog: SoundCatalog
    player: AudioPlayer
    project_dir: Path

    def load_catalog(self) -> SoundCatalog:
        ensure_pack(self.config.bundled_dir)
        self.catalog.build()
        return self.catalog

    def settings_path(self, scope: str) -> Path:
        return config_path_for_scope(scope, self.project_dir, claude_home=self.config.claude_home)


def build_context(config: SoundConfig, *, project_dir: Path | None = None) -> CliContext:
    catalog = SoundCatalog(
        bundled_dir=config.bundled_dir,
        custom_dir=config.custom_dir,
        order_file=config.order_file,
    )
    return CliContext(
        config=config,
        catalog=catalog,
        player=AudioPlayer(preferred=config.player),
        project_dir=(project_dir or Path.cwd()).resolve(),
    )


def _out(line: str = "") -> None:
    sys.stdout.write(line + "\n")


def _update_mapping(ctx: CliContext, scope: str, changes: Mapping[str, str | None]) -> Path:
    """Apply ``changes`` to the managed mapping of ``scope`` and persist it."""
    path = ctx.settings_path(scope)
    settings = read_settings(path)
    mapping = extract_managed_mapping(settings)
    for event_name, sound_id in changes.items():
        if sound_id:
            mapping[event_name] = sound_id
        else:
            mapping.pop(event_name, None)
    write_settings(path, reconcile(settings, mapping, runner=ctx.config.runner))
    return path


def _assign(ctx: CliContext, scope: str, event_name: str, sound_id: str) -> None:
    validate_event_name(event_name)
    validate_sound_id(sound_id)
    ctx.catalog.resolve(sound_id)
    path = _update_mapping(ctx, scope, {event_name: sound_id})
    _out(f"{event_name} -> {sound_id} (saved to {path})")


def cmd_play(args: argparse.Namespace, ctx: CliContext) -> int:
    catalog = ctx.load_catalog()
    path = catalog.resolve(validate_sound_id(args.sound))
    LOGGER.debug("Playing %s for event %s", args.sound, args.event or "-")
    ctx.player.play(path)
    return 0


def cmd_list_sounds(args: argparse.Namespace, ctx: CliContext) -> int:
    listing = ctx.load_catalog().list_grouped()
    if not args.grouped:
        for sound_id in listing.ids():
            _out(sound_id)
        return 0
    for category, ids in listing.grouped.items():
        _out(f"{CATEGORY_LABELS.get(category, category)}:")
        for sound_id in ids:
            label = listing.labels.get(sound_id)
            _out(f"  {sound_id}  {label}" if label else f"  {sound_id}")
    return 0


def cmd_list_events(args: argparse.Namespace, ctx: CliContext) -> int:
    for event_name in HOOK_EVENTS:
        _out(event_name)
    return 0


def cmd_show(args: argparse.Namespace, ctx: CliContext) -> int:
    path = ctx.settings_path(args.scope)
    mapping = extract_managed_mapping(read_settings(path))
    inherited = inherited_mappings(args.scope, ctx.project_dir, claude_home=ctx.config.claude_home)
    labels = ctx.load_catalog().list_grouped().labels
    known = ctx.catalog.get()

    _out(f"Hook sounds ({path})")
    width = max(len(name) for name in HOOK_EVENTS)
    for event_name in HOOK_EVENTS:
        sound_id = mapping.get(event_name)
        if sound_id:
            suffix = "" if sound_id in known else "  (missing)"
            _out(f"  {event_name:<{width}}  ->  {display_name(sound_id, labels)}{suffix}")
        elif event_name in inherited:
            inherited_id, source = inherited[event_name]
            _out(f"  {event_name:<{width}}  ->  {display_name(inherited_id, labels)}  (from {source})")
        else:
            _out(f"  {event_name:<{width}}  -")
    return 0


def cmd_set(args: argparse.Namespace, ctx: CliContext) -> int:
    ctx.load_catalog()
    _assign(ctx, args.scope, args.event, args.sound)
    return 0


def cmd_unset(args: argparse.Namespace, ctx: CliContext) -> int:
    validate_event_name(args.event)
    path = _update_mapping(ctx, args.scope, {args.event: None})
    _out(f"Removed {args.event} sound (saved to {path})")
    return 0


def cmd_clear(args: argparse.Namespace, ctx: CliContext) -> int:
    path = ctx.settings_path(args.scope)
    write_settings(path, reconcile(read_settings(path), {}, runner=ctx.config.runner))
    _out(f"Removed all {TOOL_NAME} hooks from {path}")
    return 0


def _finish_acquisition(args: argparse.Namespace, ctx: CliContext, sound_id: str) -> int:
    ctx.catalog.invalidate()
    ctx.load_catalog()
    _out(f"Created {sound_id}")
    if args.event:
        _assign(ctx, args.scope, args.event, sound_id)
    return 0


def cmd_tts(args: argparse.Namespace, ctx: CliContext) -> int:
    if args.event:
        validate_event_name(args.event)
    tts = TextToSpeech(ctx.config.custom_dir, config=ctx.config.tts)
    acquired = tts.synthesize(args.text, lang=args.lang)
    return _finish_acquisition(args, ctx, acquired.sound_id)


def cmd_import(args: argparse.Namespace, ctx: CliContext) -> int:
    if args.event:
        validate_event_name(args.event)
    acquired = import_sound(args.path, ctx.config.custom_dir, cwd=ctx.project_dir)
    return _finish_acquisition(args, ctx, acquired.sound_id)


def cmd_preview(args: argparse.Namespace, ctx: CliContext) -> int:
    listing = ctx.load_catalog().list_grouped()
    if args.category:
        if args.category not in listing.grouped:
            raise InvalidInputError(f"No sounds in category {args.category!r}")
        ids = listing.grouped[args.category]
    else:
        ids = listing.ids()
    try:
        for sound_id in ids:
            _out(display_name(sound_id, listing.labels))
            ctx.player.preview_start(ctx.catalog.resolve(sound_id))
            time.sleep(args.interval)
    except KeyboardInterrupt:
        pass
    finally:
        ctx.player.preview_stop()
    return 0


def cmd_generate_sounds(args: argparse.Namespace, ctx: CliContext) -> int:
    output = args.output.expanduser().resolve() if args.output else ctx.config.bundled_dir
    rendered = ensure_pack(output, force=args.force, strict=True)
    _out(f"Rendered {len(rendered)} sound(s) into {output}")
    return 0


def _add_scope(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--scope", choices=SCOPES, default="project", help="Settings file to edit")


def build_parser(config: SoundConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=TOOL_NAME, description="Play sounds on Claude Code hook events")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default=config.log_level, help="Logging level (default: %(default)s)")
    parser.add_argument("--project-dir", type=Path, help="Project directory (default: current directory)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    play = subparsers.add_parser("play", help="Play a sound by id")
    play.add_argument("--sound", required=True, help="Sound id, e.g. ring1 or common/chime")
    play.add_argument("--event", help="Hook event that triggered playback")
    play.add_argument("--managed-by", help=argparse.SUPPRESS)
    play.set_defaults(func=cmd_play)

    list_sounds = subparsers.add_parser("list-sounds", help="List available sound ids")
    list_sounds.add_argument("--grouped", action="store_true", help="Group by category with labels")
    list_sounds.set_defaults(func=cmd_list_sounds)

    list_events = subparsers.add_parser("list-events", help="List Claude Code hook events")
    list_events.set_defaults(func=cmd_list_events)

    show = subparsers.add_parser("show", help="Show configured hook sounds")
    _add_scope(show)
    show.set_defaults(func=cmd_show)

    set_cmd = subparsers.add_parser("set", help="Assign a sound to an event")
    _add_scope(set_cmd)
    set_cmd.add_argument("--event", required=True)
    set_cmd.add_argument("--sound", required=True)
    set_cmd.set_defaults(func=cmd_set)

    unset = subparsers.add_parser("unset", help="Remove the sound for an event")
    _add_scope(unset)
    unset.add_argument("--event", required=True)
    unset.set_defaults(func=cmd_unset)

    clear = subparsers.add_parser("clear", help=f"Remove all {TOOL_NAME} hooks")
    _add_scope(clear)
    clear.set_defaults(func=cmd_clear)

    tts = subparsers.add_parser("tts", help="Create a custom sound from text")
    tts.add_argument("text")
    tts.add_argument("--lang", help=f"Voice language (default: {config.tts.language})")
    tts.add_argument("--event", help="Also assign the new sound to this event")
    _add_scope(tts)
    tts.set_defaults(func=cmd_tts)

    import_cmd = subparsers.add_parser("import", help="Import an .mp3 or .wav file")
    import_cmd.add_argument("path")
    import_cmd.add_argument("--event", help="Also assign the new sound to this event")
    _add_scope(import_cmd)
    import_cmd.set_defaults(func=cmd_import)

    preview = subparsers.add_parser("preview", help="Play through sounds one after another")
    preview.add_argument("--category", help="Only preview one category (common, game, ring, custom)")
    preview.add_argument("--interval", type=float, default=DEFAULT_PREVIEW_INTERVAL, help="Seconds per sound")
    preview.set_defaults(func=cmd_preview)

    generate = subparsers.add_parser("generate-sounds", help="Render the bundled tone pack")
    generate.add_argument("-o", "--output", type=Path, help="Output directory (default: bundled sound dir)")
    generate.add_argument("--force", action="store_true", help="Re-render existing files")
    generate.set_defaults(func=cmd_generate_sounds)

    return parser


def main(
    argv: list[str] | None = None,
    *,
    env: Mapping[str, str] | None = None,
    context_factory: Callable[..., CliContext] = build_context,
) -> int:
    config = SoundConfig.from_env(env)
    parser = build_parser(config)
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), config.log_level_value))

    ctx = context_factory(config, project_dir=args.project_dir)
    try:
        return args.func(args, ctx)
    except ClaudeSoundError as exc:
        sys.stderr.write(f"{TOOL_NAME}: {exc}\n")
        return 1
    finally:
        ctx.player.preview_stop()


if __name__ == "__main__":
    raise SystemExit(main())
