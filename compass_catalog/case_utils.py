"""String case helpers used for display names."""

from __future__ import annotations

import re


def to_kebab(value: str) -> str:
    """Convert camelCase, PascalCase or snake_case text to kebab-case.

    Upper-case runs (``SERVICE``, ``ON_CALL``) are lowered without splitting
    every letter, and a digit run starts a new word.
    """
    out: list[str] = []
    previous = ""
    for char in value:
        if char.isdigit() and not previous.isdigit():
            out.append(f"-{char}")
        elif not char.isupper():
            out.append(char)
        elif previous == "" or previous.isupper():
            out.append(char.lower())
        else:
            out.append(f"-{char.lower()}")
        previous = char
    return re.sub(r"[-_\s]+", "-", "".join(out).strip()).strip("-")


def to_sentence(value: str) -> str:
    """Convert an identifier like ``OTHER_LINK`` to ``Other link``."""
    interim = to_kebab(value).replace("-", " ")
    return interim[:1].upper() + interim[1:]
