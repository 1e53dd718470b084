"""Helpers for display names and DNS-1123 compliant labels."""

from __future__ import annotations

import re

DNS1123_LABEL_MAX_LENGTH = 63

_DNS1123_LABEL_RE = re.compile(r"[a-z0-9]([-a-z0-9]*[a-z0-9])?")
_NON_ALPHANUMERIC_RE = re.compile(r"[^a-zA-Z0-9]+")
_WORD_RE = re.compile(r"\S+")


def _split_camel_case(word: str) -> str:
    """Insert a space before each upper-case letter that follows a non-upper-case one."""
    pieces: list[str] = []
    previous: str | None = None
    for char in word:
        if char.isupper() and previous is not None and not previous.isupper():
            pieces.append(" ")
        pieces.append(char)
        previous = char
    return "".join(pieces)


def _title_word(match: re.Match[str]) -> str:
    word = match.group(0)
    return word[:1].title() + word[1:]


def get_display_name(name: str) -> str:
    """Turn a snake, chain, camel, dotted or spaced name into a titled display name.

    "another-_AppOperator_againTwiceThrice More" becomes
    "Another App Operator Again Twice Thrice More".
    """
    for separator in ".-_ ":
        parts = [part.strip() for part in name.split(separator) if part != ""]
        name = " ".join(parts)
    words = [_split_camel_case(word) for word in name.split(" ")]
    return _WORD_RE.sub(_title_word, " ".join(words)).strip()


def is_dns1123_label(value: str) -> bool:
    """Return True if value is a valid DNS-1123 label."""
    return (
        len(value) <= DNS1123_LABEL_MAX_LENGTH
        and _DNS1123_LABEL_RE.fullmatch(value) is not None
    )


def format_operator_name_dns1123(name: str) -> str:
    """Make name DNS-1123 label compliant, replacing invalid character runs with "-"."""
    if is_dns1123_label(name):
        return name
    replaced = _NON_ALPHANUMERIC_RE.sub("-", name)
    return replaced.strip("-").lower()


def trim_dns1123_label(label: str) -> str:
    """Drop leading characters so that the label is at most 63 characters long."""
    if len(label) > DNS1123_LABEL_MAX_LENGTH:
        return label[len(label) - DNS1123_LABEL_MAX_LENGTH:].strip("-")
    return label