"""Default markdown body for generated services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from ..case_utils import to_sentence
from ..models import ComponentConfig, CustomField, CustomFieldType, LinkType, ResolvedDependency
from ..sanitize import last_segment, sanitize_id, sanitize_markdown_text, sanitize_url

COMPASS_CATEGORY = "Compass"
LINK_CATEGORIES = (COMPASS_CATEGORY, "Development", "Operations", "Documentation", "Other")

LINK_CATEGORY_BY_TYPE = {
    LinkType.REPOSITORY: "Development",
    LinkType.PROJECT: "Development",
    LinkType.DASHBOARD: "Operations",
    LinkType.ON_CALL: "Operations",
    LinkType.CHAT_CHANNEL: "Operations",
    LinkType.DOCUMENT: "Documentation",
    LinkType.OTHER_LINK: "Other",
}

NO_DEPENDENCIES = "No known dependencies."
ARCHITECTURE_DIAGRAM = "## Architecture diagram\n\n<NodeGraph />"


@dataclass
class StructuredLink:
    """Link as handed to markdown templates (URL not yet sanitized)."""

    name: str
    url: str
    type: str | None = None


StructuredLinks = dict[str, list[StructuredLink]]


class MarkdownTemplate(Protocol):
    """Callable that renders a service body from component data."""

    def __call__(
        self,
        config: ComponentConfig,
        dependencies: list[ResolvedDependency],
        links: StructuredLinks,
    ) -> str: ...


def component_url(compass_url: str, config: ComponentConfig) -> str:
    """Compass page for the component, or the component list when it has no id."""
    base = compass_url.rstrip("/")
    if config.id:
        return f"{base}/component/{last_segment(config.id)}"
    return f"{base}/components"


def team_url(compass_url: str, config: ComponentConfig) -> str | None:
    if not config.ownerId:
        return None
    return f"{compass_url.rstrip('/')}/people/team/{sanitize_id(last_segment(config.ownerId))}"


def build_structured_links(config: ComponentConfig, compass_url: str) -> StructuredLinks:
    """Group the component's links by category, Compass links first."""
    links: StructuredLinks = {category: [] for category in LINK_CATEGORIES}
    links[COMPASS_CATEGORY].append(
        StructuredLink(name="Atlassian Compass Component", url=component_url(compass_url, config))
    )
    owner_url = team_url(compass_url, config)
    if owner_url:
        links[COMPASS_CATEGORY].append(StructuredLink(name="Atlassian Compass Team", url=owner_url))

    for link in config.links:
        category = LINK_CATEGORY_BY_TYPE.get(link.type, "Other")
        links[category].append(
            StructuredLink(
                name=link.name or to_sentence(link.type.value),
                url=link.url,
                type=link.type.value,
            )
        )
    return links


def render_links(links: StructuredLinks) -> str:
    sections: list[str] = []
    for category in LINK_CATEGORIES:
        items = []
        for link in links.get(category, []):
            url = sanitize_url(link.url)
            if url:
                items.append(f" * [{sanitize_markdown_text(link.name)}]({url})")
        if items:
            sections.append(f"### {category}\n\n" + "\n".join(items))
    return "## Links\n\n" + "\n\n".join(sections)


def _table_cell(text: str) -> str:
    return sanitize_markdown_text(text).replace("|", "\\|").replace("\n", " ")


def _custom_field_value(field: CustomField) -> str:
    if field.type == CustomFieldType.BOOLEAN:
        return "✅" if field.value.strip().lower() == "true" else "❌"
    return _table_cell(field.value)


def render_custom_fields(fields: list[CustomField]) -> str | None:
    if not fields:
        return None
    rows = [f"| {_table_cell(field.name)} | {_custom_field_value(field)} |" for field in fields]
    return "## Custom Fields\n\n| Field | Value |\n| --- | --- |\n" + "\n".join(rows)


def render_dependencies(dependencies: list[ResolvedDependency]) -> str:
    if not dependencies:
        return f"## Dependencies\n\n{NO_DEPENDENCIES}"
    items = [f" * [{sanitize_markdown_text(dep.name)}](../../{sanitize_id(dep.id)}/)" for dep in dependencies]
    return "## Dependencies\n\n" + "\n".join(items)


def default_markdown(
    config: ComponentConfig,
    dependencies: list[ResolvedDependency],
    links: StructuredLinks,
) -> str:
    """Links, custom fields, dependencies and the architecture diagram, in that order."""
    sections = [
        render_links(links),
        render_custom_fields(config.customFields),
        render_dependencies(dependencies),
        ARCHITECTURE_DIAGRAM,
    ]
    return "\n\n".join(section for section in sections if section)
