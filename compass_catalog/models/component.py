"""Canonical component model mirroring the compass.yml structure.

Reference: https://developer.atlassian.com/cloud/compass/config-as-code/structure-and-contents-of-a-compass-yml-file/
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class ComponentType(str, Enum):
    """Compass component types."""

    APPLICATION = "APPLICATION"
    SERVICE = "SERVICE"
    CAPABILITY = "CAPABILITY"
    CLOUD_RESOURCE = "CLOUD_RESOURCE"
    DATA_PIPELINE = "DATA_PIPELINE"
    LIBRARY = "LIBRARY"
    MACHINE_LEARNING_MODEL = "MACHINE_LEARNING_MODEL"
    OTHER = "OTHER"
    UI_ELEMENT = "UI_ELEMENT"
    WEBSITE = "WEBSITE"


class Lifecycle(str, Enum):
    """Compass lifecycle stages."""

    PRERELEASE = "Pre-release"
    ACTIVE = "Active"
    DEPRECATED = "Deprecated"


class LinkType(str, Enum):
    """Compass link categories."""

    CHAT_CHANNEL = "CHAT_CHANNEL"
    DOCUMENT = "DOCUMENT"
    DASHBOARD = "DASHBOARD"
    ON_CALL = "ON_CALL"
    PROJECT = "PROJECT"
    REPOSITORY = "REPOSITORY"
    OTHER_LINK = "OTHER_LINK"


class CustomFieldType(str, Enum):
    """Custom field value types."""

    TEXT = "text"
    BOOLEAN = "boolean"
    NUMBER = "number"
    USER = "user"
    SINGLE_SELECT = "single_select"
    MULTIPLE_SELECT = "multi_select"


class ComponentFields(BaseModel):
    """Built-in Compass fields."""

    lifecycle: Lifecycle | None = None
    tier: int | None = Field(default=None, ge=1, le=4)


class ComponentLink(BaseModel):
    """Link attached to a component."""

    type: LinkType = LinkType.OTHER_LINK
    url: str
    name: str | None = None


class ComponentRelationships(BaseModel):
    """Outgoing relationships, keyed by relationship type."""

    DEPENDS_ON: list[str] = Field(default_factory=list)


class CustomField(BaseModel):
    """Custom field with its value rendered as a string."""

    type: CustomFieldType = CustomFieldType.TEXT
    name: str
    value: str = ""


class Scorecard(BaseModel):
    """Scorecard result for a component."""

    name: str
    score: float = 0
    maxScore: float = 100


class ComponentConfig(BaseModel):
    """Source-agnostic description of a Compass component.

    Only ``name`` is required. Everything else is optional and simply left
    out of the rendered service when absent.
    """

    configVersion: int | None = None
    name: str = Field(..., min_length=1, description="Component name")
    id: str | None = Field(default=None, description="Compass component ARI")
    description: str | None = None
    typeId: ComponentType | None = None
    ownerId: str | None = Field(default=None, description="Owner team ARI")
    fields: ComponentFields | None = None
    links: list[ComponentLink] = Field(default_factory=list)
    relationships: ComponentRelationships | None = None
    labels: list[str] = Field(default_factory=list)
    customFields: list[CustomField] = Field(default_factory=list)
    scorecards: list[Scorecard] = Field(default_factory=list)

    @property
    def depends_on(self) -> list[str]:
        """External ids this component depends on."""
        if self.relationships is None:
            return []
        return list(self.relationships.DEPENDS_ON)

    @property
    def lifecycle(self) -> Lifecycle | None:
        return self.fields.lifecycle if self.fields else None

    @property
    def tier(self) -> int | None:
        return self.fields.tier if self.fields else None
