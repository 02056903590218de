"""Rendering of components into EventCatalog services."""

from .badges import build_badges, scorecard_percentage
from .markdown import (
    MarkdownTemplate,
    StructuredLink,
    StructuredLinks,
    build_structured_links,
    default_markdown,
)
from .service import build_specifications, owner_team_id, render_service

__all__ = [
    "MarkdownTemplate",
    "StructuredLink",
    "StructuredLinks",
    "build_badges",
    "build_specifications",
    "build_structured_links",
    "default_markdown",
    "owner_team_id",
    "render_service",
    "scorecard_percentage",
]
