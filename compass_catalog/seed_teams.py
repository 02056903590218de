"""Seed Atlassian teams from Terraform and assign them as Compass component owners.

Usage::

    compass-catalog-seed-teams --tfvars pr.tfvars --mappings owners.json [--dry-run]

``owners.json`` maps a team name to the names of the components it owns.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from .compass import CompassClient, TeamsClient
from .config import ApiOption
from .exceptions import CompassApiError, CompassCatalogError, ConfigurationError
from .hcl import parse_team_names

logger = logging.getLogger(__name__)

REQUIRED_ENV = (
    "COMPASS_API_TOKEN",
    "ATLASSIAN_TEAMS_TOKEN",
    "COMPASS_EMAIL",
    "COMPASS_CLOUD_ID",
    "ATLASSIAN_ORG_ID",
    "COMPASS_BASE_URL",
)


@dataclass
class SeedSettings:
    """Credentials and site coordinates read from the environment."""

    compass_token: str
    teams_token: str
    email: str
    cloud_id: str
    org_id: str
    base_url: str

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "SeedSettings":
        """Read settings from the environment.

        Raises:
            ConfigurationError: If a required variable is missing.
        """
        environ = os.environ if environ is None else environ
        for name in REQUIRED_ENV:
            if not environ.get(name):
                raise ConfigurationError(f"Missing required environment variable: {name}")
        return cls(
            compass_token=environ["COMPASS_API_TOKEN"],
            teams_token=environ["ATLASSIAN_TEAMS_TOKEN"],
            email=environ["COMPASS_EMAIL"],
            cloud_id=environ["COMPASS_CLOUD_ID"],
            org_id=environ["ATLASSIAN_ORG_ID"],
            base_url=environ["COMPASS_BASE_URL"],
        )

    def api_option(self) -> ApiOption:
        try:
            return ApiOption(
                cloud_id=self.cloud_id,
                api_token=self.compass_token,
                email=self.email,
                base_url=self.base_url,
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid Compass settings: {e}") from e


@dataclass
class SeedResult:
    """Counts of owner assignments."""

    updated: int = 0
    skipped: int = 0
    failed: int = 0


def ensure_teams(teams_client: TeamsClient, team_names: list[str], dry_run: bool = False) -> dict[str, str]:
    """Make sure each team exists and map its name to its ARI.

    Teams that cannot be found or created are left out of the result.
    """
    team_aris: dict[str, str] = {}
    for name in team_names:
        if dry_run:
            logger.info(f"[dry run] Would ensure team: {name}")
            team_aris[name] = f"ari:cloud:identity::team/dry-run-{name}"
            continue
        try:
            team = teams_client.ensure_team(name)
        except CompassApiError as e:
            logger.warning(f'Could not ensure team "{name}": {e}')
            continue
        team_aris[name] = team.id
        logger.info(f"  Team {name} -> {team.id}")

    missing = len(team_names) - len(team_aris)
    if missing:
        logger.warning(f"{missing} team(s) could not be created/found and will be skipped for assignment")
    return team_aris


def assign_owners(
    compass_client: CompassClient,
    mappings: dict[str, list[str]],
    team_aris: dict[str, str],
    dry_run: bool = False,
) -> SeedResult:
    """Set each mapped component's owner to its team."""
    components = compass_client.fetch_components()
    component_aris = {c.name: c.id for c in components if c.id and c.name}
    logger.info(f"Fetched {len(components)} components")

    result = SeedResult()
    for team_name, component_names in mappings.items():
        team_ari = team_aris.get(team_name)
        if not team_ari:
            logger.warning(f'Team "{team_name}" not available (not in tfvars or creation failed), skipping')
            result.skipped += len(component_names)
            continue

        for component_name in component_names:
            component_ari = component_aris.get(component_name)
            if not component_ari:
                logger.warning(f'Component "{component_name}" not found in Compass, skipping')
                result.skipped += 1
                continue

            if dry_run:
                logger.info(f'[dry run] Would set "{component_name}" owner -> {team_name}')
                result.updated += 1
                continue

            try:
                compass_client.update_component_owner(component_ari, team_ari)
            except CompassApiError as e:
                logger.error(f'Failed to update "{component_name}": {e}')
                result.failed += 1
                continue
            logger.info(f'  "{component_name}" owner -> {team_name}')
            result.updated += 1

    return result


def load_mappings(path: Path) -> dict[str, list[str]]:
    """Read the team -> component names JSON file.

    Raises:
        ConfigurationError: If the file is unreadable or not a mapping of lists.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Failed to read mappings from {path}: {e}") from e
    if not isinstance(data, dict) or not all(isinstance(v, list) for v in data.values()):
        raise ConfigurationError(f"Mappings file {path} must map team names to lists of component names")
    return {str(team): [str(name) for name in names] for team, names in data.items()}


def seed(
    tfvars: Path,
    mappings_path: Path,
    settings: SeedSettings,
    dry_run: bool = False,
    teams_client: TeamsClient | None = None,
    compass_client: CompassClient | None = None,
) -> SeedResult:
    """Ensure the tfvars teams exist, then assign component owners."""
    try:
        content = tfvars.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Failed to read {tfvars}: {e}") from e
    team_names = parse_team_names(content)
    logger.info(f"Found {len(team_names)} teams in {tfvars}")
    mappings = load_mappings(mappings_path)

    teams_client = teams_client or TeamsClient(
        base_url=settings.base_url,
        org_id=settings.org_id,
        site_id=settings.cloud_id,
        email=settings.email,
        api_token=settings.teams_token,
    )
    compass_client = compass_client or CompassClient(settings.api_option())
    with teams_client, compass_client:
        team_aris = ensure_teams(teams_client, team_names, dry_run=dry_run)
        logger.info("Fetching Compass components...")
        return assign_owners(compass_client, mappings, team_aris, dry_run=dry_run)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="compass-catalog-seed-teams",
        description="Create Atlassian teams from a tfvars file and assign Compass component owners.",
    )
    parser.add_argument("--tfvars", required=True, type=Path, help="Terraform tfvars file with a groups block")
    parser.add_argument("--mappings", required=True, type=Path, help="JSON file mapping team -> component names")
    parser.add_argument("--dry-run", action="store_true", help="Log changes without making them")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(message)s",
    )

    if args.dry_run:
        logger.info("[dry run] No changes will be made.")

    try:
        settings = SeedSettings.from_env()
        result = seed(args.tfvars, args.mappings, settings, dry_run=args.dry_run)
    except CompassCatalogError as e:
        logger.error(f"Fatal: {e}")
        return 1

    logger.info(f"Done. Updated: {result.updated}, Skipped: {result.skipped}, Failed: {result.failed}")
    return 1 if result.failed else 0


if __name__ == "__main__":
    sys.exit(main())
