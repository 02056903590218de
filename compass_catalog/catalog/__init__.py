"""Catalog persistence for generated EventCatalog records."""

from .store import CatalogStore, FileCatalog, parse_document, render_document

__all__ = [
    "CatalogStore",
    "FileCatalog",
    "parse_document",
    "render_document",
]
