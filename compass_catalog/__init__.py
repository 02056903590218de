"""Generate EventCatalog domains, services and teams from Atlassian Compass."""

from .generator import Generator, RunSummary, generate

__all__ = ["Generator", "RunSummary", "generate"]
