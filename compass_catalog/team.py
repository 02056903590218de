"""Create EventCatalog teams (and their members) for component owners."""

from __future__ import annotations

import logging

from .catalog import CatalogStore
from .catalog.store import Format
from .compass import CompassClient, CompassTeamMember
from .models import Team, User
from .render import owner_team_id
from .sanitize import last_segment, sanitize_html, sanitize_id, sanitize_url

logger = logging.getLogger(__name__)


class TeamEnricher:
    """Writes one team per distinct owner in a run.

    With a Compass client the team's display name (and members) come from the
    API; without one the team id doubles as its name.
    """

    def __init__(
        self,
        store: CatalogStore,
        compass_url: str,
        compass_client: CompassClient | None = None,
        dry_run: bool = False,
        format: Format = "mdx",
    ):
        self._store = store
        self._compass_url = compass_url.rstrip("/")
        self._client = compass_client
        self._dry_run = dry_run
        self._format = format
        self._processed: set[str] = set()

    @property
    def processed(self) -> set[str]:
        return set(self._processed)

    def enrich(self, owner_id: str | None) -> Team | None:
        """Write the owner's team unless it was already handled in this run.

        Returns:
            The team written (or that would be written in a dry run), or None
            when there is no owner, the team was already processed, or the API
            lookup failed.
        """
        team_id = owner_team_id(owner_id)
        if team_id is None or team_id in self._processed:
            return None
        self._processed.add(team_id)

        members: list[CompassTeamMember] = []
        if self._client is not None:
            compass_team = self._client.fetch_team_by_id(last_segment(owner_id))
            if compass_team is None:
                logger.warning(f"Could not resolve team {team_id} from Compass, skipping team creation")
                return None
            name = sanitize_html(compass_team.display_name)
            members = compass_team.members
        else:
            name = team_id

        member_ids = [self._write_member(member) for member in members]
        team = Team(
            id=team_id,
            name=name,
            markdown=self._team_markdown(team_id),
            members=member_ids or None,
        )

        if self._dry_run:
            logger.info(f" - [dry run] Would write team {team_id} ({name})")
            return team

        exists = self._store.get_team(team_id) is not None
        self._store.write_team(team, override=exists, format=self._format)
        logger.info(f" - Team {team_id} {'updated' if exists else 'created'}")
        return team

    def _team_markdown(self, team_id: str) -> str:
        url = sanitize_url(f"{self._compass_url}/people/team/{team_id}")
        if not url:
            return ""
        return f"## Links\n\n * [Atlassian Compass Team]({url})"

    def _write_member(self, member: CompassTeamMember) -> str:
        user_id = sanitize_id(member.name.strip())
        user = User(
            id=user_id,
            name=sanitize_html(member.name.strip()),
            avatarUrl=sanitize_url(member.picture or "") or None,
            email=member.email or None,
        )
        if self._dry_run:
            logger.info(f" - [dry run] Would write user {user_id}")
            return user_id

        exists = self._store.get_user(user_id) is not None
        self._store.write_user(user, override=exists, format=self._format)
        logger.debug(f" - User {user_id} {'updated' if exists else 'created'}")
        return user_id
