import sys

import atheris

with atheris.instrument_imports():
    from claude_sound.errors import InvalidInputError
    from claude_sound.hooks import build_managed_command, extract_managed_sound_id
    from claude_sound.utils import parse_float, short_hash, slugify
    from claude_sound.validation import is_valid_sound_id, validate_event_name, validate_sound_id

_SHELL_META = set(" ;&|`$<>()'\"\\\n\t*?!{}[]~#")


def TestOneInput(data: bytes) -> None:
    """Fuzz identifier validation and command building with arbitrary input."""
    value = data.decode("utf-8", errors="ignore")

    # Parsers and naming helpers never raise
    parse_float(value, default=0.0)
    short_hash(value)
    slugify(value)

    try:
        validate_event_name(value)
    except InvalidInputError:
        pass

    try:
        sound_id = validate_sound_id(value)
    except InvalidInputError:
        assert not is_valid_sound_id(value)
        return

    # Anything the validator accepts must be safe inside a shell command
    assert not _SHELL_META.intersection(sound_id)
    command = build_managed_command("Stop", sound_id)
    assert extract_managed_sound_id(command) == sound_id


def main() -> None:
    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
