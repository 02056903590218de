"""Resolve DEPENDS_ON references between components of one run."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from .models import ComponentConfig, ResolvedDependency

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IdentifierEntry:
    """Catalog service an external component id maps to."""

    service_id: str
    name: str


@dataclass
class ServiceEntry:
    """A loaded component together with the service id chosen for it."""

    config: ComponentConfig
    service_id: str
    version: str


IdentifierMap = dict[str, IdentifierEntry]


def build_identifier_map(entries: Iterable[ServiceEntry]) -> IdentifierMap:
    """Map each component's external id to its catalog service.

    Entries without an external id are left out. A repeated id keeps the
    last entry.
    """
    identifier_map: IdentifierMap = {}
    for entry in entries:
        if entry.config.id:
            identifier_map[entry.config.id] = IdentifierEntry(
                service_id=entry.service_id, name=entry.config.name
            )
    return identifier_map


def resolve_dependencies(config: ComponentConfig, identifier_map: IdentifierMap) -> list[ResolvedDependency]:
    """Resolve a component's DEPENDS_ON ids against the identifier map.

    References to components outside this run are skipped.
    """
    resolved: list[ResolvedDependency] = []
    for external_id in config.depends_on:
        target = identifier_map.get(external_id)
        if target is None:
            logger.debug(f"{config.name}: dependency {external_id} is not in this batch, skipping")
            continue
        resolved.append(ResolvedDependency(id=target.service_id, name=target.name))
    return resolved


class DependencyResolver:
    """Two-pass resolver: index every component first, then resolve edges."""

    def __init__(self, entries: Iterable[ServiceEntry]):
        self.identifier_map = build_identifier_map(entries)

    def resolve(self, config: ComponentConfig) -> list[ResolvedDependency]:
        return resolve_dependencies(config, self.identifier_map)
