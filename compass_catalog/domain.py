"""Keep the configured EventCatalog domain at the requested version."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from .catalog import CatalogStore
from .catalog.store import Format
from .config import DomainOption
from .models import Domain, ResourcePointer
from .render.markdown import ARCHITECTURE_DIAGRAM

logger = logging.getLogger(__name__)


class DomainState(Enum):
    """State of the catalog's latest domain relative to the requested version."""

    NO_DOMAIN = "no_domain"
    CURRENT_MATCHES = "current_matches"
    CURRENT_STALE = "current_stale"


@dataclass
class DomainResult:
    """What reconciliation did (or would do in a dry run)."""

    state: DomainState
    versioned: str | None = None  # previous version that was archived
    created: bool = False


class DomainReconciler:
    """Version the previous domain and write the requested one, idempotently."""

    def __init__(self, store: CatalogStore, dry_run: bool = False, format: Format = "mdx"):
        self._store = store
        self._dry_run = dry_run
        self._format = format

    def reconcile(self, option: DomainOption) -> DomainResult:
        """Bring the domain to ``option.version``.

        A different latest version is archived first; re-running with the same
        version changes nothing.
        """
        requested = self._store.get_domain(option.id, option.version)
        current = self._store.get_domain(option.id, "latest")
        logger.info(f"Processing domain: {option.name} (v{option.version})")

        if current is None:
            result = DomainResult(state=DomainState.NO_DOMAIN)
        elif current.version == option.version:
            result = DomainResult(state=DomainState.CURRENT_MATCHES)
        else:
            result = DomainResult(state=DomainState.CURRENT_STALE)

        if result.state is DomainState.CURRENT_STALE:
            result.versioned = current.version
            if self._dry_run:
                logger.info(f" - [dry run] Would version previous domain (v{current.version})")
            else:
                self._store.version_domain(option.id)
                logger.info(f" - Versioned previous domain (v{current.version})")

        if requested is None or requested.version != option.version:
            result.created = True
            if self._dry_run:
                logger.info(f" - [dry run] Would create domain (v{option.version})")
            else:
                self._store.write_domain(
                    Domain(
                        id=option.id,
                        name=option.name,
                        version=option.version,
                        markdown=ARCHITECTURE_DIAGRAM,
                    ),
                    override=True,
                    format=self._format,
                )
                logger.info(f" - Domain (v{option.version}) created")

        if result.state is DomainState.CURRENT_MATCHES:
            logger.info(f" - Domain (v{option.version}) already exists, skipped creation")

        return result

    def add_service(self, option: DomainOption, service_id: str, service_version: str) -> None:
        if self._dry_run:
            logger.info(f" - [dry run] Would add service {service_id} (v{service_version}) to domain {option.id}")
            return
        self._store.add_service_to_domain(
            option.id,
            ResourcePointer(id=service_id, version=service_version),
            option.version,
        )
        logger.info(f" - Service {service_id} (v{service_version}) added to domain {option.id}")
