"""Compass GraphQL API client."""

from __future__ import annotations

import base64
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Iterator

import httpx

from ..config import ApiOption
from ..exceptions import CompassApiError, CompassGraphQLError, ConfigurationError
from ..models import ComponentConfig
from .normalizer import ScorecardNames, normalize_component
from .queries import (
    SCORECARDS_QUERY,
    SEARCH_COMPONENTS_QUERY,
    TEAM_BY_ID_QUERY,
    UPDATE_COMPONENT_OWNER_MUTATION,
)

logger = logging.getLogger(__name__)

GRAPHQL_PATH = "/gateway/api/graphql"


def resolve_value(value: str) -> str:
    """Resolve ``$ENV_VAR`` references against the environment.

    Raises:
        ConfigurationError: If the referenced variable is not set.
    """
    if value.startswith("$"):
        env_var = value[1:]
        resolved = os.environ.get(env_var)
        if not resolved:
            raise ConfigurationError(f"Environment variable {env_var} is not set")
        return resolved
    return value


def build_auth_header(email: str, api_token: str) -> str:
    """HTTP Basic header for ``email:api_token``."""
    token = base64.b64encode(f"{email}:{api_token}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def graphql_endpoint(base_url: str) -> str:
    return f"{base_url.rstrip('/')}{GRAPHQL_PATH}"


def team_to_ari(team_id: str) -> str:
    """Wrap a bare team id in the Atlassian identity ARI format."""
    if team_id.startswith("ari:"):
        return team_id
    return f"ari:cloud:identity::team/{team_id}"


@dataclass
class CompassTeamMember:
    """Member of an Atlassian team."""

    name: str
    picture: str | None = None
    email: str | None = None


@dataclass
class CompassTeam:
    """Atlassian team owning Compass components."""

    id: str
    display_name: str
    description: str | None = None
    members: list[CompassTeamMember] = field(default_factory=list)


class GraphQLTransport:
    """POSTs GraphQL documents to the Atlassian gateway with Basic auth."""

    service_name = "Compass API"

    def __init__(
        self,
        base_url: str,
        email: str,
        api_token: str,
        http_client: httpx.Client | None = None,
        timeout: float = 30.0,
    ):
        self.endpoint = graphql_endpoint(base_url)
        self._email = email
        self._api_token = api_token
        self._client = http_client or httpx.Client(timeout=timeout)
        self._owns_client = http_client is None

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _headers(self) -> dict[str, str]:
        # Secrets are resolved per request so $ENV references pick up late changes
        auth = build_auth_header(resolve_value(self._email), resolve_value(self._api_token))
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": auth,
        }

    def post(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """Send a query and return the decoded JSON body.

        Raises:
            CompassApiError: On transport failures or non-2xx responses.
        """
        try:
            response = self._client.post(
                self.endpoint,
                headers=self._headers(),
                json={"query": query, "variables": variables},
            )
        except httpx.HTTPError as e:
            raise CompassApiError(f"{self.service_name} request failed: {e}") from e

        if not response.is_success:
            raise CompassApiError.from_status(response.status_code, self.service_name)

        try:
            return response.json()
        except ValueError as e:
            raise CompassApiError(f"{self.service_name} returned invalid JSON: {e}") from e

    def execute(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """Send a query and return its ``data`` payload.

        Raises:
            CompassApiError: On transport failures or non-2xx responses.
            CompassGraphQLError: If the response carries errors or no data.
        """
        result = self.post(query, variables)
        errors = result.get("errors")
        if errors:
            message = errors[0].get("message", "unknown error") if isinstance(errors[0], dict) else errors[0]
            raise CompassGraphQLError(f"{self.service_name} GraphQL error: {message}")
        data = result.get("data")
        if not data:
            raise CompassGraphQLError(f"{self.service_name} returned no data")
        return data


class CompassClient(GraphQLTransport):
    """Reads components, teams and scorecards from Compass."""

    PAGE_SIZE = 50

    def __init__(self, api: ApiOption, http_client: httpx.Client | None = None, timeout: float = 30.0):
        super().__init__(
            base_url=api.base_url,
            email=api.email,
            api_token=api.api_token,
            http_client=http_client,
            timeout=timeout,
        )
        self.cloud_id = api.cloud_id

    def iter_component_records(self, types: list[str] | None = None) -> Iterator[dict[str, Any]]:
        """Yield raw component nodes, following the cursor across pages.

        ``types`` restricts the search to those component types on the server.

        Raises:
            CompassGraphQLError: If a page reports more results without a new cursor.
        """
        cursor: str | None = None
        has_next_page = True
        page = 0

        while has_next_page:
            variables: dict[str, Any] = {"cloudId": self.cloud_id, "after": cursor, "first": self.PAGE_SIZE}
            if types:
                variables["types"] = list(types)
            data = self.execute(SEARCH_COMPONENTS_QUERY, variables)
            search = (data.get("compass") or {}).get("searchComponents")
            if not isinstance(search, dict):
                raise CompassGraphQLError("Compass API returned no searchComponents result")
            if "nodes" not in search:
                message = search.get("message", search.get("__typename", "unknown error"))
                raise CompassGraphQLError(f"Compass search error: {message}")

            page += 1
            nodes = search.get("nodes") or []
            logger.debug(f"Fetched page {page} with {len(nodes)} components")
            for node in nodes:
                component = node.get("component") if isinstance(node, dict) else None
                if component:
                    yield component

            page_info = search.get("pageInfo") or {}
            has_next_page = bool(page_info.get("hasNextPage"))
            next_cursor = page_info.get("endCursor")
            if has_next_page and (not next_cursor or next_cursor == cursor):
                raise CompassGraphQLError(f"Compass search page {page} has more results but no new cursor")
            cursor = next_cursor

    def fetch_components(
        self,
        scorecard_names: ScorecardNames | None = None,
        types: list[str] | None = None,
    ) -> list[ComponentConfig]:
        """Fetch and normalize every component on the site, or those of ``types``.

        Records without a name are skipped with a warning.

        Raises:
            CompassApiError: If any page cannot be fetched.
        """
        components: list[ComponentConfig] = []
        for record in self.iter_component_records(types):
            if not record.get("name"):
                logger.warning(f"Skipping Compass component without a name: {record.get('id')}")
                continue
            components.append(normalize_component(record, scorecard_names))
        logger.info(f"Fetched {len(components)} components from Compass")
        return components

    def fetch_scorecard_names(self) -> dict[str, str]:
        """Map scorecard ids to display names.

        Returns an empty map when the lookup fails; names then fall back to
        the id's last segment.
        """
        try:
            data = self.execute(SCORECARDS_QUERY, {"cloudId": self.cloud_id})
        except CompassApiError as e:
            logger.warning(f"Could not fetch scorecard names: {e}")
            return {}

        scorecards = (data.get("compass") or {}).get("scorecards") or {}
        names: dict[str, str] = {}
        for node in scorecards.get("nodes") or []:
            if isinstance(node, dict) and node.get("id") and node.get("name"):
                names[node["id"]] = node["name"]
        return names

    def fetch_team_by_id(self, team_id: str) -> CompassTeam | None:
        """Look up a team's display name and members.

        Returns:
            The team, or None if it does not exist or the lookup failed.
        """
        try:
            data = self.execute(
                TEAM_BY_ID_QUERY,
                {"id": team_to_ari(team_id), "siteId": self.cloud_id},
            )
        except CompassApiError as e:
            logger.warning(f"Could not fetch team {team_id}: {e}")
            return None

        team = (data.get("team") or {}).get("teamV2")
        if not team or not team.get("displayName"):
            return None

        members: list[CompassTeamMember] = []
        for node in (team.get("members") or {}).get("nodes") or []:
            member = node.get("member") if isinstance(node, dict) else None
            if member and member.get("name"):
                members.append(
                    CompassTeamMember(
                        name=member["name"],
                        picture=member.get("picture"),
                        email=member.get("email"),
                    )
                )

        return CompassTeam(
            id=team.get("id") or team_id,
            display_name=team["displayName"],
            description=team.get("description"),
            members=members,
        )

    def update_component_owner(self, component_id: str, owner_id: str) -> None:
        """Set a component's owner team.

        Raises:
            CompassApiError: On HTTP or GraphQL failures, or if Compass rejects the update.
        """
        data = self.execute(
            UPDATE_COMPONENT_OWNER_MUTATION,
            {"input": {"id": component_id, "ownerId": owner_id}},
        )
        payload = (data.get("compass") or {}).get("updateComponent") or {}
        errors = payload.get("errors")
        if errors:
            raise CompassGraphQLError(f"Compass update component error: {errors[0].get('message')}")
        if payload.get("success") is False:
            raise CompassGraphQLError("Compass update component error: update was not successful")
