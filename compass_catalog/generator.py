"""Generator pipeline: Compass components in, EventCatalog records out."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .catalog import CatalogStore, FileCatalog
from .compass import CompassClient, load_component_file
from .config import GeneratorConfig, ServiceOption, validate_config
from .domain import DomainReconciler
from .exceptions import CompassCatalogError, ConfigurationError
from .models import ComponentConfig
from .render import render_service
from .resolver import DependencyResolver, ServiceEntry
from .sanitize import last_segment, sanitize_id
from .team import TeamEnricher

logger = logging.getLogger(__name__)


@dataclass
class Failure:
    """A component or file that could not be processed."""

    name: str
    error: str


@dataclass
class RunSummary:
    """Outcome of one generator run."""

    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    failures: list[Failure] = field(default_factory=list)

    def record_failure(self, name: str, error: Exception | str) -> None:
        self.failed += 1
        self.failures.append(Failure(name=name, error=str(error)))

    @property
    def ok(self) -> bool:
        return self.failed == 0


class Generator:
    """Runs the Compass -> EventCatalog pipeline.

    Components are loaded from compass.yml files or the Compass API, indexed
    for dependency resolution, rendered and written to the catalog store.
    Per-component failures are collected in the RunSummary; only invalid
    configuration and failed bulk API fetches abort the run.
    """

    def __init__(
        self,
        config: GeneratorConfig | dict[str, Any],
        store: CatalogStore,
        compass_client: CompassClient | None = None,
    ):
        self.config = validate_config(config)
        self._store = store
        self._client = compass_client
        self._owns_client = False
        if self.config.api is not None and self._client is None:
            self._client = CompassClient(self.config.api)
            self._owns_client = True

    def run(self) -> RunSummary:
        """Run the pipeline once.

        Raises:
            CompassApiError: If components cannot be fetched in API mode.
        """
        try:
            return self._run()
        finally:
            if self._owns_client and self._client is not None:
                self._client.close()

    def _run(self) -> RunSummary:
        config = self.config
        summary = RunSummary()
        if config.dry_run:
            logger.info("[dry run] No changes will be written to the catalog")

        entries = self._filter(self._load(summary))
        logger.info(f"Processing {len(entries)} components")

        resolver = DependencyResolver(entries)

        reconciler = DomainReconciler(self._store, dry_run=config.dry_run, format=config.format)
        if config.domain is not None:
            reconciler.reconcile(config.domain)

        teams = TeamEnricher(
            self._store,
            compass_url=config.compass_url,
            compass_client=self._client if config.api_mode else None,
            dry_run=config.dry_run,
            format=config.format,
        )

        for entry in entries:
            try:
                self._process(entry, resolver, teams, reconciler, summary)
            except Exception as e:
                logger.warning(f"Failed to process {entry.config.name}: {e}")
                summary.record_failure(entry.config.name, e)

        self._log_summary(summary)
        return summary

    # -- loading ---------------------------------------------------------------

    def _load(self, summary: RunSummary) -> list[ServiceEntry]:
        if self.config.api_mode:
            return self._load_from_api(summary)
        return self._load_from_files(summary)

    def _load_from_api(self, summary: RunSummary) -> list[ServiceEntry]:
        assert self._client is not None
        scorecard_names = self._client.fetch_scorecard_names()
        types = self.config.effective_type_filter or None
        components = self._client.fetch_components(scorecard_names, types=types)

        entries: list[ServiceEntry] = []
        for component in components:
            try:
                entries.append(self._entry_for(component))
            except Exception as e:
                logger.warning(f"Failed to prepare {component.name}: {e}")
                summary.record_failure(component.name, e)
        return entries

    def _load_from_files(self, summary: RunSummary) -> list[ServiceEntry]:
        entries: list[ServiceEntry] = []
        for option in self.config.services or []:
            try:
                component = load_component_file(option.path)
            except (OSError, yaml.YAMLError, ValidationError, CompassCatalogError) as e:
                logger.warning(f"Failed to load {option.path}: {e}")
                summary.record_failure(option.path, e)
                continue
            try:
                entries.append(self._entry_for(component, option))
            except Exception as e:
                logger.warning(f"Failed to prepare {component.name}: {e}")
                summary.record_failure(component.name, e)
        return entries

    def _entry_for(self, component: ComponentConfig, option: ServiceOption | None = None) -> ServiceEntry:
        if option is not None and option.id:
            service_id = sanitize_id(option.id)
        else:
            service_id = self.service_id_for(component)
        version = (option.version if option else None) or self.config.default_version
        return ServiceEntry(config=component, service_id=service_id, version=version)

    def service_id_for(self, component: ComponentConfig) -> str:
        """Catalog id for a component under the configured strategy."""
        mapped = self.config.name_mapping.get(component.name)
        if mapped:
            return sanitize_id(mapped)

        strategy = self.config.service_id_strategy
        if callable(strategy):
            return sanitize_id(strategy(component))
        if strategy == "compass-id" and component.id:
            return sanitize_id(last_segment(component.id))
        return sanitize_id(component.name)

    def _filter(self, entries: list[ServiceEntry]) -> list[ServiceEntry]:
        types = self.config.effective_type_filter
        names = set(self.config.name_filter or [])
        kept = []
        for entry in entries:
            component = entry.config
            if types and (component.typeId is None or component.typeId.value not in types):
                logger.debug(f"Filtered out {component.name} by type")
                continue
            if names and component.name not in names:
                logger.debug(f"Filtered out {component.name} by name")
                continue
            kept.append(entry)
        return kept

    # -- processing --------------------------------------------------------------

    def _process(
        self,
        entry: ServiceEntry,
        resolver: DependencyResolver,
        teams: TeamEnricher,
        reconciler: DomainReconciler,
        summary: RunSummary,
    ) -> None:
        config = self.config
        component = entry.config
        logger.info(f"Processing component: {component.name}")

        dependencies = resolver.resolve(component)
        teams.enrich(component.ownerId)

        service = render_service(
            component,
            compass_url=config.compass_url,
            version=entry.version,
            service_id=entry.service_id,
            dependencies=dependencies,
            markdown_template=config.markdown_template,
            badges=config.badges,
        )

        existing = self._store.get_service(service.id)
        if existing is not None and not config.override_existing:
            logger.info(f" - Service {service.id} already exists, skipped")
            summary.skipped += 1
            return

        if existing is not None:
            # Messages are managed in EventCatalog, not Compass
            service.sends = service.sends or existing.sends
            service.receives = service.receives or existing.receives

        if config.dry_run:
            action = "update" if existing is not None else "create"
            logger.info(f" - [dry run] Would {action} service {service.id} (v{service.version})")
        else:
            if existing is not None and existing.version != service.version:
                self._store.version_service(service.id)
                logger.info(f" - Versioned previous service (v{existing.version})")
            self._store.write_service(service, override=existing is not None, format=config.format)
            logger.info(f" - Service {service.id} (v{service.version}) {'updated' if existing else 'created'}")

        if config.domain is not None:
            reconciler.add_service(config.domain, service.id, service.version)

        summary.succeeded += 1

    def _log_summary(self, summary: RunSummary) -> None:
        logger.info(
            f"Done. Succeeded: {summary.succeeded}, Skipped: {summary.skipped}, Failed: {summary.failed}"
        )
        for failure in summary.failures:
            logger.warning(f" - {failure.name}: {failure.error}")


def generate(
    options: GeneratorConfig | dict[str, Any],
    project_dir: str | Path | None = None,
    store: CatalogStore | None = None,
    compass_client: CompassClient | None = None,
) -> RunSummary:
    """Run the generator against an EventCatalog project.

    ``project_dir`` defaults to the ``PROJECT_DIR`` environment variable set
    by EventCatalog.

    Raises:
        ConfigurationError: If the options are invalid or no catalog directory is known.
    """
    config = validate_config(options)
    if store is None:
        directory = project_dir or os.environ.get("PROJECT_DIR")
        if not directory:
            raise ConfigurationError("Please provide the catalog directory (env variable PROJECT_DIR)")
        store = FileCatalog(directory)
    return Generator(config, store, compass_client).run()
