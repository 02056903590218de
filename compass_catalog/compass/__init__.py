"""Atlassian Compass integration: API clients and component normalization."""

from .client import (
    CompassClient,
    CompassTeam,
    CompassTeamMember,
    GraphQLTransport,
    build_auth_header,
    resolve_value,
    team_to_ari,
)
from .files import load_component_file, read_component_file
from .normalizer import (
    ComponentShape,
    detect_shape,
    map_lifecycle,
    map_tier,
    normalize_component,
    scorecard_name,
)
from .teams import TeamsClient

__all__ = [
    "CompassClient",
    "CompassTeam",
    "CompassTeamMember",
    "ComponentShape",
    "GraphQLTransport",
    "TeamsClient",
    "build_auth_header",
    "detect_shape",
    "load_component_file",
    "map_lifecycle",
    "map_tier",
    "normalize_component",
    "read_component_file",
    "resolve_value",
    "scorecard_name",
    "team_to_ari",
]
