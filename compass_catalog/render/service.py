"""Render a ComponentConfig into an EventCatalog service."""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

from ..models import (
    Attachment,
    ComponentConfig,
    ComponentLink,
    ComponentType,
    LinkType,
    Repository,
    ResolvedDependency,
    Service,
    ServiceStyles,
    Specification,
)
from ..sanitize import is_safe_local_path, last_segment, sanitize_html, sanitize_id, sanitize_url
from .badges import build_badges
from .markdown import MarkdownTemplate, build_structured_links, default_markdown

logger = logging.getLogger(__name__)

TYPE_ICONS = {
    ComponentType.APPLICATION: "WindowIcon",
    ComponentType.SERVICE: "ServerIcon",
    ComponentType.CAPABILITY: "PuzzlePieceIcon",
    ComponentType.CLOUD_RESOURCE: "CloudIcon",
    ComponentType.DATA_PIPELINE: "CircleStackIcon",
    ComponentType.LIBRARY: "BookOpenIcon",
    ComponentType.MACHINE_LEARNING_MODEL: "CpuChipIcon",
    ComponentType.OTHER: "CubeIcon",
    ComponentType.UI_ELEMENT: "Squares2X2Icon",
    ComponentType.WEBSITE: "GlobeAltIcon",
}


def owner_team_id(owner_id: str | None) -> str | None:
    """Catalog team id for an owner ARI: its sanitized last segment."""
    if not owner_id:
        return None
    return sanitize_id(last_segment(owner_id))


def _is_remote(path: str) -> bool:
    # A one-letter scheme is a Windows drive, not a URL
    try:
        scheme = urlsplit(path).scheme
    except ValueError:
        return False
    return len(scheme) > 1


def _specification_type(link: ComponentLink) -> str | None:
    name = (link.name or "").lower()
    if "openapi" in name or "swagger" in name:
        return "openapi"
    if "asyncapi" in name:
        return "asyncapi"
    return None


def build_specifications(links: list[ComponentLink]) -> list[Specification]:
    """OpenAPI/AsyncAPI specs referenced by name from the component links.

    Remote documents must be http(s); local paths must be relative and must
    not climb out of the service directory.
    """
    specifications: list[Specification] = []
    for link in links:
        spec_type = _specification_type(link)
        if spec_type is None:
            continue
        if _is_remote(link.url):
            path = sanitize_url(link.url)
        else:
            path = link.url if is_safe_local_path(link.url) else ""
        if not path:
            logger.warning(f"Ignoring unsafe {spec_type} specification path: {link.url}")
            continue
        specifications.append(Specification(type=spec_type, path=path, name=link.name))
    return specifications


def build_attachments(links: list[ComponentLink]) -> list[Attachment]:
    attachments = []
    for link in links:
        if link.type != LinkType.DOCUMENT:
            continue
        url = sanitize_url(link.url)
        if url:
            attachments.append(Attachment(url=url, title=link.name or "Document", type="documentation"))
    return attachments


def repository_for(config: ComponentConfig) -> Repository | None:
    for link in config.links:
        if link.type == LinkType.REPOSITORY:
            url = sanitize_url(link.url)
            return Repository(url=url) if url else None
    return None


def render_service(
    config: ComponentConfig,
    compass_url: str,
    version: str,
    service_id: str,
    dependencies: list[ResolvedDependency],
    markdown_template: MarkdownTemplate | None = None,
    badges: bool = True,
) -> Service:
    """Build the EventCatalog service for a component.

    Args:
        config: Normalized component.
        compass_url: Compass site URL used for links back to Compass.
        version: Service version to write.
        service_id: Catalog id chosen for the service.
        dependencies: Resolved DEPENDS_ON targets.
        markdown_template: Optional replacement for the default markdown body.
            Its output is used as-is.
        badges: Whether to attach badges.

    Returns:
        The rendered Service.
    """
    links = build_structured_links(config, compass_url)
    if markdown_template is not None:
        markdown = markdown_template(config, dependencies, links)
    else:
        markdown = default_markdown(config, dependencies, links)

    team_id = owner_team_id(config.ownerId)
    specifications = build_specifications(config.links)
    attachments = build_attachments(config.links)
    icon = TYPE_ICONS.get(config.typeId) if config.typeId else None

    return Service(
        id=service_id,
        name=config.name,
        version=version,
        summary=sanitize_html(config.description or ""),
        markdown=markdown,
        badges=build_badges(config) if badges else None,
        repository=repository_for(config),
        owners=[team_id] if team_id else None,
        specifications=specifications or None,
        attachments=attachments or None,
        styles=ServiceStyles(icon=icon) if icon else None,
    )
