"""Interactive prompts that read answers from a text stream."""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import TextIO

_QUOTES = "`'\""


class InteractiveLevel(IntEnum):
    """The user's preference for interactive command generation."""

    # Interactive mode was neither turned on nor off; treated as off.
    SOFT_OFF = 0
    # Interactive mode was explicitly turned off.
    HARD_OFF = 1
    # Interactive mode was explicitly turned on.
    ON_ALL = 2


def _print_message(msg: str, optional: bool) -> None:
    kind = "optional" if optional else "required"
    print()
    print(f"{msg.strip()} ({kind}): \n> ", end="", flush=True)


def _read_line(stream: TextIO) -> str:
    """Read one whole line, stripped of spaces and surrounding quotes."""
    line = stream.readline()
    if not line.endswith("\n"):
        raise EOFError("Error when reading input: EOF")
    return line.strip().strip(_QUOTES)


def get_required_input(msg: str, stream: TextIO | None = None) -> str:
    """Prompt with msg until a non-empty answer is read from stream."""
    stream = sys.stdin if stream is None else stream
    while True:
        _print_message(msg, optional=False)
        value = _read_line(stream)
        if value:
            return value
        print("Input is required. ", end="")


def get_optional_input(msg: str, stream: TextIO | None = None) -> str:
    """Prompt once with msg and return the answer, which may be empty."""
    stream = sys.stdin if stream is None else stream
    _print_message(msg, optional=True)
    return _read_line(stream)


def get_string_array(msg: str, stream: TextIO | None = None) -> list[str]:
    """Prompt with msg until a comma separated list is read from stream."""
    stream = sys.stdin if stream is None else stream
    while True:
        _print_message(msg, optional=False)
        values = [word.strip() for word in _read_line(stream).split(",")]
        if values and values[0]:
            return values
        print("No list provided. ", end="")