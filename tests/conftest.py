"""Shared test fixtures."""

import json

import httpx
import pytest

from compass_catalog.catalog import FileCatalog
from compass_catalog.compass import CompassTeam, CompassTeamMember
from compass_catalog.config import ApiOption

COMPASS_URL = "https://acme.atlassian.net/compass"
BASE_URL = "https://acme.atlassian.net"

SERVICE_A_YAML = """\
name: service-a
id: ari:cloud:compass:site-1:component/ws-1/aaa
description: Handles orders
typeId: SERVICE
ownerId: ari:cloud:identity::team/team-1
fields:
  lifecycle: Active
  tier: 1
links:
  - type: REPOSITORY
    url: https://github.com/acme/service-a
    name: Source
relationships:
  DEPENDS_ON:
    - ari:cloud:compass:site-1:component/ws-1/bbb
labels:
  - critical
"""

SERVICE_B_YAML = """\
name: service-b
id: ari:cloud:compass:site-1:component/ws-1/bbb
typeId: SERVICE
ownerId: ari:cloud:identity::team/team-1
"""


@pytest.fixture
def write_component(tmp_path):
    """Factory writing a compass.yml file and returning its path."""
    source_dir = tmp_path / "components"
    source_dir.mkdir()

    def _write(filename: str, content: str) -> str:
        path = source_dir / filename
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def sample_components(write_component):
    """service-a (depends on service-b) and service-b as compass.yml files."""
    return [
        write_component("service-a.yml", SERVICE_A_YAML),
        write_component("service-b.yml", SERVICE_B_YAML),
    ]


@pytest.fixture
def catalog(tmp_path):
    return FileCatalog(tmp_path / "catalog")


@pytest.fixture
def api_option():
    return ApiOption(
        cloud_id="cloud-1",
        api_token="token",
        email="bot@acme.com",
        base_url=BASE_URL,
    )


class FakeCompassClient:
    """In-memory stand-in for CompassClient."""

    def __init__(self, components=None, teams=None, scorecard_names=None):
        self.components = components or []
        self.teams = teams or {}
        self.scorecard_names = scorecard_names or {}
        self.team_lookups: list[str] = []
        self.owner_updates: list[tuple[str, str]] = []
        self.failing_updates: set[str] = set()
        self.closed = False
        self.requested_types = None

    def fetch_scorecard_names(self):
        return dict(self.scorecard_names)

    def fetch_components(self, scorecard_names=None, types=None):
        self.requested_types = types
        return list(self.components)

    def fetch_team_by_id(self, team_id):
        self.team_lookups.append(team_id)
        return self.teams.get(team_id)

    def update_component_owner(self, component_id, owner_id):
        from compass_catalog.exceptions import CompassGraphQLError

        if component_id in self.failing_updates:
            raise CompassGraphQLError("Compass update component error: denied")
        self.owner_updates.append((component_id, owner_id))

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


@pytest.fixture
def fake_compass():
    """Factory for FakeCompassClient instances."""
    return FakeCompassClient


@pytest.fixture
def platform_team():
    return CompassTeam(
        id="ari:cloud:identity::team/team-1",
        display_name="Platform <Core>",
        members=[
            CompassTeamMember(name="Ada Lovelace", picture="https://avatars.example.com/ada.png", email="ada@acme.com"),
        ],
    )


class GraphQLRecorder:
    """httpx.MockTransport handler that replays canned GraphQL responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    @property
    def payloads(self):
        return [json.loads(request.content) for request in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, json=response)


@pytest.fixture
def graphql():
    """Factory returning (recorder, httpx.Client) for canned GraphQL responses."""

    def _build(*responses):
        recorder = GraphQLRecorder(*responses)
        return recorder, httpx.Client(transport=httpx.MockTransport(recorder))

    return _build
