import json
import sys

import atheris
from claude_sound.errors import InvalidInputError
from claude_sound.hooks import extract_managed_mapping, reconcile


def TestOneInput(data: bytes) -> None:
    # Treat the input as a hand-edited settings file; reconciliation must stay idempotent.
    try:
        document = json.loads(data.decode("utf-8", errors="ignore"))
    except ValueError:
        return
    if not isinstance(document, dict):
        return
    mapping = extract_managed_mapping(document)
    try:
        once = reconcile(document, mapping)
    except InvalidInputError:
        return
    assert reconcile(once, mapping) == once
    assert extract_managed_mapping(once) == mapping


def main() -> None:
    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
