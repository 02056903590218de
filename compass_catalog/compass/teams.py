"""Atlassian Teams API client used to seed team ownership."""

from __future__ import annotations

import logging

import httpx

from ..exceptions import CompassGraphQLError
from .client import CompassTeam, GraphQLTransport
from .queries import CREATE_TEAM_MUTATION, LIST_TEAMS_QUERY

logger = logging.getLogger(__name__)


def org_to_ari(org_id: str) -> str:
    return f"ari:cloud:platform::org/{org_id}"


class TeamsClient(GraphQLTransport):
    """Lists and creates Atlassian teams in an organization."""

    service_name = "Teams API"

    def __init__(
        self,
        base_url: str,
        org_id: str,
        site_id: str,
        email: str,
        api_token: str,
        http_client: httpx.Client | None = None,
        timeout: float = 30.0,
    ):
        super().__init__(
            base_url=base_url,
            email=email,
            api_token=api_token,
            http_client=http_client,
            timeout=timeout,
        )
        self.org_id = org_id
        self.site_id = site_id

    def list_teams(self) -> list[CompassTeam]:
        """List teams in the organization (first 200).

        Raises:
            CompassApiError: On HTTP or GraphQL failures.
        """
        data = self.execute(
            LIST_TEAMS_QUERY,
            {"orgAri": org_to_ari(self.org_id), "siteId": self.site_id},
        )
        search = (data.get("team") or {}).get("teamSearchV2") or {}
        teams: list[CompassTeam] = []
        for node in search.get("nodes") or []:
            team = node.get("team") if isinstance(node, dict) else None
            if team and team.get("id"):
                teams.append(CompassTeam(id=team["id"], display_name=team.get("displayName") or ""))
        return teams

    def create_team(self, display_name: str) -> CompassTeam:
        """Create a team with open membership.

        Raises:
            CompassApiError: On HTTP or GraphQL failures, or if no team is returned.
        """
        data = self.execute(
            CREATE_TEAM_MUTATION,
            {
                "input": {
                    "displayName": display_name,
                    "description": "",
                    "membershipSettings": "MEMBER_INVITE",
                    "scopeId": org_to_ari(self.org_id),
                }
            },
        )
        payload = (data.get("team") or {}).get("createTeam") or {}
        errors = payload.get("errors")
        if errors:
            raise CompassGraphQLError(f'Failed to create team "{display_name}": {errors[0].get("message")}')
        team = payload.get("team")
        if not team:
            raise CompassGraphQLError(f'Failed to create team "{display_name}": no team returned')
        logger.info(f"Created team {display_name} ({team['id']})")
        return CompassTeam(id=team["id"], display_name=team.get("displayName") or display_name)

    def ensure_team(self, display_name: str) -> CompassTeam:
        """Return the team with this display name (case-insensitive), creating it if needed."""
        wanted = display_name.lower()
        for team in self.list_teams():
            if team.display_name.lower() == wanted:
                return team
        return self.create_team(display_name)
