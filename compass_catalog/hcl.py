"""Extract team names from a Terraform tfvars ``groups`` block."""

from __future__ import annotations

import re

_GROUPS_BLOCK = re.compile(r"\bgroups\s*=\s*\[([\s\S]*?)\n\]")
_NAME_ENTRY = re.compile(r'^\s*\{?\s*name\s*=\s*"([^"]+)"', re.MULTILINE)


def parse_team_names(content: str) -> list[str]:
    """Return the ``name = "..."`` values inside ``groups = [ ... ]``.

    Only the groups block is read, so keys like ``application_name`` elsewhere
    in the file are ignored. The block must close with ``]`` at the start of a
    line.
    """
    match = _GROUPS_BLOCK.search(content)
    if not match:
        return []
    return _NAME_ENTRY.findall(match.group(1))
