"""Normalize raw Compass component records into ComponentConfig.

Components reach the generator in several shapes: compass.yml files, and
GraphQL responses whose layout changed between API versions (``type`` vs
``typeId``, ``endNodeAri`` vs ``nodeId`` vs ``endNode.id``, labels as strings
vs ``{name}`` objects). Each known shape has its own adapter; all of them
feed the same readers, which return ``None`` for values they cannot make
sense of rather than raising.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Any, Callable, Mapping

from ..exceptions import ComponentShapeError
from ..models import (
    ComponentConfig,
    ComponentFields,
    ComponentLink,
    ComponentRelationships,
    ComponentType,
    CustomField,
    CustomFieldType,
    Lifecycle,
    LinkType,
    Scorecard,
)

logger = logging.getLogger(__name__)

_DIGIT = re.compile(r"(\d)")

LIFECYCLE_ALIASES = {
    "Active": Lifecycle.ACTIVE,
    "Pre-release": Lifecycle.PRERELEASE,
    "Prerelease": Lifecycle.PRERELEASE,
    "Deprecated": Lifecycle.DEPRECATED,
}

# Substrings of explicit type names (``boolean``, ``CompassCustomNumberFieldDefinition``, ...)
_CUSTOM_FIELD_TYPE_HINTS = (
    ("boolean", CustomFieldType.BOOLEAN),
    ("number", CustomFieldType.NUMBER),
    ("multi", CustomFieldType.MULTIPLE_SELECT),
    ("single", CustomFieldType.SINGLE_SELECT),
    ("user", CustomFieldType.USER),
    ("text", CustomFieldType.TEXT),
)

ScorecardNames = Mapping[str, str]


class ComponentShape(str, Enum):
    """Known layouts of a raw component record."""

    CONFIG_FILE = "config_file"
    GRAPHQL_LEGACY = "graphql_legacy"
    GRAPHQL_SEARCH = "graphql_search"


# ---------------------------------------------------------------------------
# Value readers
# ---------------------------------------------------------------------------


def map_tier(value: Any) -> int | None:
    """Extract a tier (1-4) from values like ``3``, ``"3"`` or ``"Tier 3"``."""
    if value is None or isinstance(value, bool):
        return None
    match = _DIGIT.search(str(value))
    if match:
        tier = int(match.group(1))
        if 1 <= tier <= 4:
            return tier
    return None


def map_lifecycle(value: Any) -> Lifecycle | None:
    """Map a lifecycle label to a Lifecycle, case-insensitively."""
    if isinstance(value, Lifecycle):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    return LIFECYCLE_ALIASES.get(text[:1].upper() + text[1:].lower())


def map_component_type(value: Any) -> ComponentType | None:
    if value is None:
        return None
    try:
        return ComponentType(str(value).strip().upper())
    except ValueError:
        logger.debug(f"Ignoring unknown component type: {value}")
        return None


def map_link_type(value: Any) -> LinkType:
    try:
        return LinkType(str(value).strip().upper())
    except ValueError:
        return LinkType.OTHER_LINK


def _unwrap(value: Any) -> Any:
    """Reduce ``{label}``/``{value}`` wrappers and single-value lists to a scalar."""
    if isinstance(value, Mapping):
        for key in ("label", "value", "name"):
            if key in value:
                return _unwrap(value[key])
        return None
    if isinstance(value, (list, tuple)):
        return _unwrap(value[0]) if value else None
    return value


def read_builtin_fields(raw_fields: Any) -> ComponentFields | None:
    """Read lifecycle and tier from either a mapping or a definition/value list."""
    values: dict[str, Any] = {}
    if isinstance(raw_fields, Mapping):
        values = {str(key).lower(): _unwrap(value) for key, value in raw_fields.items()}
    elif isinstance(raw_fields, list):
        for entry in raw_fields:
            if not isinstance(entry, Mapping):
                continue
            definition = entry.get("definition")
            name = definition.get("name") if isinstance(definition, Mapping) else entry.get("name")
            if not name:
                continue
            raw_value = entry.get("value", entry.get("values", entry.get("label")))
            values[str(name).lower()] = _unwrap(raw_value)

    lifecycle = map_lifecycle(values.get("lifecycle"))
    tier = map_tier(values.get("tier"))
    if lifecycle is None and tier is None:
        return None
    return ComponentFields(lifecycle=lifecycle, tier=tier)


def map_link(raw: Any) -> ComponentLink | None:
    if not isinstance(raw, Mapping):
        return None
    url = raw.get("url")
    if not url or not isinstance(url, str):
        return None
    name = raw.get("name")
    return ComponentLink(
        type=map_link_type(raw.get("type")),
        url=url,
        name=str(name) if name else None,
    )


def label_text(raw: Any) -> str | None:
    """Labels arrive as plain strings or as ``{name}`` objects."""
    if isinstance(raw, str):
        return raw or None
    if isinstance(raw, Mapping):
        name = raw.get("name") or raw.get("value")
        return str(name) if name else None
    return None


def relationship_target(node: Any) -> str | None:
    """Return the target component id of a relationship node.

    Handles ``endNode.id`` (current API), ``endNodeAri`` and ``nodeId``
    (earlier API versions), and plain string entries.
    """
    if isinstance(node, str):
        return node or None
    if not isinstance(node, Mapping):
        return None
    end_node = node.get("endNode")
    if isinstance(end_node, Mapping) and end_node.get("id"):
        return str(end_node["id"])
    if isinstance(end_node, str) and end_node:
        return end_node
    for key in ("endNodeAri", "nodeId"):
        if node.get(key):
            return str(node[key])
    return None


def _is_depends_on(node: Any) -> bool:
    if not isinstance(node, Mapping):
        return True
    relationship_type = node.get("relationshipType") or node.get("type")
    return relationship_type is None or str(relationship_type).upper() == "DEPENDS_ON"


def read_relationships(raw: Any) -> ComponentRelationships | None:
    """Collect DEPENDS_ON targets from a mapping or a GraphQL node connection."""
    targets: list[str] = []
    if isinstance(raw, Mapping):
        if "nodes" in raw:
            nodes = raw.get("nodes") or []
            targets = [
                target
                for node in nodes
                if _is_depends_on(node) and (target := relationship_target(node))
            ]
        else:
            entries = raw.get("DEPENDS_ON") or []
            if isinstance(entries, list):
                targets = [target for entry in entries if (target := relationship_target(entry))]
    elif isinstance(raw, list):
        targets = [
            target
            for node in raw
            if _is_depends_on(node) and (target := relationship_target(node))
        ]
    if not targets:
        return None
    return ComponentRelationships(DEPENDS_ON=targets)


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ", ".join(_stringify(item) for item in value)
    return str(value)


def _explicit_custom_field_type(value: Any) -> CustomFieldType | None:
    if not value:
        return None
    text = str(value).lower()
    for needle, field_type in _CUSTOM_FIELD_TYPE_HINTS:
        if needle in text:
            return field_type
    return None


def map_custom_field(raw: Any) -> CustomField | None:
    """Map a custom field, inferring its type from the populated value slot."""
    if not isinstance(raw, Mapping):
        return None
    definition = raw.get("definition")
    definition = definition if isinstance(definition, Mapping) else {}
    name = definition.get("name") or raw.get("name")
    if not name:
        return None

    slots = {
        CustomFieldType.BOOLEAN: raw.get("booleanValue"),
        CustomFieldType.NUMBER: raw.get("numberValue"),
        CustomFieldType.TEXT: raw.get("textValue"),
    }
    field_type = _explicit_custom_field_type(definition.get("type") or raw.get("type"))
    if field_type is None:
        if slots[CustomFieldType.BOOLEAN] is not None:
            field_type = CustomFieldType.BOOLEAN
        elif slots[CustomFieldType.NUMBER] is not None:
            field_type = CustomFieldType.NUMBER
        else:
            field_type = CustomFieldType.TEXT

    value = slots.get(field_type)
    if value is None:
        candidates = [*slots.values(), raw.get("value")]
        value = next((candidate for candidate in candidates if candidate is not None), "")
    return CustomField(type=field_type, name=str(name), value=_stringify(value))


def scorecard_name(identifier: str, names: ScorecardNames | None = None) -> str:
    """Display name for a scorecard id.

    Uses the name map when it knows the id, otherwise the last path segment
    of an ARI-style id, otherwise the id itself.
    """
    if names and identifier in names:
        return names[identifier]
    if "/" in identifier:
        segment = identifier.rstrip("/").rsplit("/", 1)[-1]
        return segment or identifier
    return identifier


def _number(value: Any, default: float | None = None) -> float | None:
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def map_scorecard(raw: Any, names: ScorecardNames | None = None) -> Scorecard | None:
    if not isinstance(raw, Mapping):
        return None
    nested = raw.get("scorecard")
    nested = nested if isinstance(nested, Mapping) else {}

    name = raw.get("name") or nested.get("name")
    identifier = raw.get("scorecardId") or nested.get("id")
    if identifier and (not name or (names and str(identifier) in names)):
        name = scorecard_name(str(identifier), names)
    if not name:
        return None

    score = _number(raw.get("totalScore", raw.get("score")), default=0.0)
    max_score = _number(raw.get("maxTotalScore", raw.get("maxScore")), default=100.0)
    if score is None or max_score is None:
        return None
    return Scorecard(name=str(name), score=score, maxScore=max_score)


def _collect(items: Any, mapper: Callable[[Any], Any]) -> list:
    if not isinstance(items, list):
        return []
    return [mapped for item in items if (mapped := mapper(item)) is not None]


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text or None


# ---------------------------------------------------------------------------
# Shape adapters
# ---------------------------------------------------------------------------


def detect_shape(raw: Mapping[str, Any]) -> ComponentShape:
    """Work out which layout a raw component record uses."""
    relationships = raw.get("relationships")
    if isinstance(relationships, Mapping) and isinstance(relationships.get("nodes"), list):
        nodes = relationships["nodes"]
        if any(isinstance(node, Mapping) and "endNodeAri" in node for node in nodes):
            return ComponentShape.GRAPHQL_LEGACY
        return ComponentShape.GRAPHQL_SEARCH

    if isinstance(raw.get("fields"), list) or "scorecardScores" in raw:
        return ComponentShape.GRAPHQL_SEARCH
    labels = raw.get("labels")
    if isinstance(labels, list) and any(isinstance(label, Mapping) for label in labels):
        return ComponentShape.GRAPHQL_SEARCH

    fields = raw.get("fields")
    if isinstance(fields, Mapping) and any(isinstance(value, Mapping) for value in fields.values()):
        return ComponentShape.GRAPHQL_LEGACY
    if "type" in raw and "typeId" not in raw:
        return ComponentShape.GRAPHQL_LEGACY

    return ComponentShape.CONFIG_FILE


def _from_config_file(raw: Mapping[str, Any], names: ScorecardNames | None) -> ComponentConfig:
    """compass.yml layout: already shaped like ComponentConfig."""
    config_version = raw.get("configVersion")
    return ComponentConfig(
        configVersion=config_version if isinstance(config_version, int) else None,
        name=str(raw["name"]),
        id=_optional_text(raw.get("id")),
        description=_optional_text(raw.get("description")),
        typeId=map_component_type(raw.get("typeId")),
        ownerId=_optional_text(raw.get("ownerId")),
        fields=read_builtin_fields(raw.get("fields")),
        links=_collect(raw.get("links"), map_link),
        relationships=read_relationships(raw.get("relationships")),
        labels=_collect(raw.get("labels"), label_text),
        customFields=_collect(raw.get("customFields"), map_custom_field),
        scorecards=_collect(raw.get("scorecards"), lambda item: map_scorecard(item, names)),
    )


def _from_graphql_legacy(raw: Mapping[str, Any], names: ScorecardNames | None) -> ComponentConfig:
    """Early searchComponents layout: ``type``, ``{label}`` fields, ``endNodeAri``."""
    return ComponentConfig(
        name=str(raw["name"]),
        id=_optional_text(raw.get("id")),
        description=_optional_text(raw.get("description")),
        typeId=map_component_type(raw.get("type", raw.get("typeId"))),
        ownerId=_optional_text(raw.get("ownerId")),
        fields=read_builtin_fields(raw.get("fields")),
        links=_collect(raw.get("links"), map_link),
        relationships=read_relationships(raw.get("relationships")),
        labels=_collect(raw.get("labels"), label_text),
        customFields=_collect(raw.get("customFields"), map_custom_field),
        scorecards=_collect(raw.get("scorecardScores"), lambda item: map_scorecard(item, names)),
    )


def _from_graphql_search(raw: Mapping[str, Any], names: ScorecardNames | None) -> ComponentConfig:
    """Current searchComponents layout: ``typeId``, field lists, ``endNode.id``."""
    scorecards = raw.get("scorecardScores")
    if scorecards is None:
        scorecards = raw.get("scorecards")
    return ComponentConfig(
        name=str(raw["name"]),
        id=_optional_text(raw.get("id")),
        description=_optional_text(raw.get("description")),
        typeId=map_component_type(raw.get("typeId", raw.get("type"))),
        ownerId=_optional_text(raw.get("ownerId")),
        fields=read_builtin_fields(raw.get("fields")),
        links=_collect(raw.get("links"), map_link),
        relationships=read_relationships(raw.get("relationships")),
        labels=_collect(raw.get("labels"), label_text),
        customFields=_collect(raw.get("customFields"), map_custom_field),
        scorecards=_collect(scorecards, lambda item: map_scorecard(item, names)),
    )


SHAPE_ADAPTERS: dict[ComponentShape, Callable[[Mapping[str, Any], ScorecardNames | None], ComponentConfig]] = {
    ComponentShape.CONFIG_FILE: _from_config_file,
    ComponentShape.GRAPHQL_LEGACY: _from_graphql_legacy,
    ComponentShape.GRAPHQL_SEARCH: _from_graphql_search,
}


def normalize_component(
    raw: Mapping[str, Any],
    scorecard_names: ScorecardNames | None = None,
) -> ComponentConfig:
    """Convert a raw component record of any known shape to a ComponentConfig.

    Args:
        raw: Parsed compass.yml content or a GraphQL ``component`` node.
        scorecard_names: Optional scorecard id -> display name map.

    Returns:
        The canonical ComponentConfig.

    Raises:
        ComponentShapeError: If the record is not a mapping or has no name.
    """
    if not isinstance(raw, Mapping):
        raise ComponentShapeError(f"Component record must be a mapping, got {type(raw).__name__}")
    name = raw.get("name")
    if not name or not isinstance(name, str):
        raise ComponentShapeError("Component record has no name")

    shape = detect_shape(raw)
    logger.debug(f"Normalizing component {name} ({shape.value})")
    return SHAPE_ADAPTERS[shape](raw, scorecard_names)
