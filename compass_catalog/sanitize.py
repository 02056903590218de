"""Sanitizers for identifiers, markdown text and URLs from untrusted sources."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

_UNSAFE_ID_CHARS = re.compile(r"[^a-zA-Z0-9\-_]")
_MARKDOWN_LINK_CHARS = re.compile(r"([\[\]()])")
_WINDOWS_DRIVE = re.compile(r"^[a-zA-Z]:[\\/]")

ALLOWED_URL_SCHEMES = ("http", "https")


def sanitize_id(raw: str) -> str:
    """Make a string safe to use as a catalog id or path segment."""
    return _UNSAFE_ID_CHARS.sub("-", str(raw))


def sanitize_html(text: str) -> str:
    """Escape HTML special characters: & < > " '."""
    return (
        str(text)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )


def sanitize_markdown_text(text: str) -> str:
    """Escape text so it cannot inject HTML or break a markdown link."""
    return _MARKDOWN_LINK_CHARS.sub(r"\\\1", sanitize_html(text))


def sanitize_url(url: str) -> str:
    """Return the URL if it is http(s), otherwise an empty string.

    Parentheses are percent-encoded so the URL cannot terminate a markdown
    link early. Callers treat an empty result as "omit this link".
    """
    if not url or not isinstance(url, str):
        return ""
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return ""
    if parts.scheme not in ALLOWED_URL_SCHEMES or not parts.netloc:
        return ""
    return url.strip().replace("(", "%28").replace(")", "%29")


def is_safe_local_path(path: str) -> bool:
    """Check that a spec path is relative and stays inside the service folder."""
    if not path:
        return False
    if path.startswith(("/", "\\")) or _WINDOWS_DRIVE.match(path):
        return False
    segments = re.split(r"[\\/]", path)
    return ".." not in segments


def last_segment(value: str) -> str:
    """Last ``/``-separated segment of an ARI or path (the value itself if it has none)."""
    segment = str(value).rstrip("/").rsplit("/", 1)[-1]
    return segment or str(value)
