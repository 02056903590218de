"""EventCatalog records produced by the generator."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Badge(BaseModel):
    """Coloured badge shown on a service page."""

    content: str
    backgroundColor: str
    textColor: str = "#fff"


class Repository(BaseModel):
    url: str
    language: str | None = None


class Specification(BaseModel):
    """OpenAPI or AsyncAPI document attached to a service."""

    type: str = Field(..., description="openapi or asyncapi")
    path: str
    name: str | None = None


class Attachment(BaseModel):
    url: str
    title: str | None = None
    type: str | None = None


class ServiceStyles(BaseModel):
    icon: str | None = None


class ResourcePointer(BaseModel):
    """Versioned reference to another catalog resource."""

    id: str
    version: str | None = None


class ResolvedDependency(BaseModel):
    """DEPENDS_ON edge resolved to a catalog service."""

    id: str
    name: str


class Service(BaseModel):
    """EventCatalog service."""

    id: str
    name: str
    version: str
    summary: str = ""
    markdown: str = ""
    badges: list[Badge] | None = None
    repository: Repository | None = None
    owners: list[str] | None = None
    specifications: list[Specification] | None = None
    attachments: list[Attachment] | None = None
    sends: list[ResourcePointer] | None = None
    receives: list[ResourcePointer] | None = None
    styles: ServiceStyles | None = None


class Domain(BaseModel):
    """EventCatalog domain."""

    id: str
    name: str
    version: str
    summary: str | None = None
    markdown: str = ""
    services: list[ResourcePointer] = Field(default_factory=list)


class Team(BaseModel):
    """EventCatalog team."""

    id: str
    name: str
    summary: str | None = None
    markdown: str = ""
    members: list[str] | None = None


class User(BaseModel):
    """EventCatalog user."""

    id: str
    name: str
    avatarUrl: str | None = None
    email: str | None = None
    role: str | None = None
    markdown: str = ""
