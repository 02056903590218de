"""Pydantic models for Compass components and EventCatalog records."""

from .catalog import (
    Attachment,
    Badge,
    Domain,
    Repository,
    ResolvedDependency,
    ResourcePointer,
    Service,
    ServiceStyles,
    Specification,
    Team,
    User,
)
from .component import (
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

__all__ = [
    "Attachment",
    "Badge",
    "ComponentConfig",
    "ComponentFields",
    "ComponentLink",
    "ComponentRelationships",
    "ComponentType",
    "CustomField",
    "CustomFieldType",
    "Domain",
    "Lifecycle",
    "LinkType",
    "Repository",
    "ResolvedDependency",
    "ResourcePointer",
    "Scorecard",
    "Service",
    "ServiceStyles",
    "Specification",
    "Team",
    "User",
]
