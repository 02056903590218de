"""Tests for service rendering: badges, markdown, specifications."""

import pytest

from compass_catalog.models import (
    ComponentConfig,
    ComponentFields,
    ComponentLink,
    ComponentType,
    CustomField,
    CustomFieldType,
    Lifecycle,
    LinkType,
    ResolvedDependency,
    Scorecard,
)
from compass_catalog.render import build_badges, build_specifications, default_markdown, render_service, scorecard_percentage
from compass_catalog.render.badges import scorecard_color
from compass_catalog.render.markdown import build_structured_links

COMPASS_URL = "https://acme.atlassian.net/compass"


@pytest.fixture
def component():
    return ComponentConfig(
        name="service-a",
        id="ari:cloud:compass:site-1:component/ws-1/aaa",
        description="Handles <orders>",
        typeId=ComponentType.SERVICE,
        ownerId="ari:cloud:identity::team/team-1",
        fields=ComponentFields(lifecycle=Lifecycle.ACTIVE, tier=1),
        links=[
            ComponentLink(type=LinkType.REPOSITORY, url="https://github.com/acme/service-a", name="Source"),
            ComponentLink(type=LinkType.DASHBOARD, url="https://grafana.acme.com/d/a"),
            ComponentLink(type=LinkType.OTHER_LINK, url="javascript:alert(1)", name="Evil"),
            ComponentLink(type=LinkType.DOCUMENT, url="https://wiki.acme.com/a", name="Design doc"),
        ],
        labels=["<b>critical</b>"],
        customFields=[
            CustomField(type=CustomFieldType.BOOLEAN, name="PCI", value="true"),
            CustomField(type=CustomFieldType.TEXT, name="Notes", value="a | b"),
        ],
        scorecards=[Scorecard(name="Readiness", score=45, maxScore=50)],
    )


class TestBadges:
    def test_badge_order_and_colors(self, component):
        badges = build_badges(component)

        assert [(b.content, b.backgroundColor) for b in badges] == [
            ("SERVICE", "#6366f1"),
            ("Active", "#22c55e"),
            ("Tier 1", "#1e40af"),
            ("&lt;b&gt;critical&lt;/b&gt;", "#6b7280"),
            ("Readiness: 90%", "#22c55e"),
        ]
        assert all(b.textColor == "#fff" for b in badges)

    def test_minimal_component_has_no_badges(self):
        assert build_badges(ComponentConfig(name="bare")) == []

    @pytest.mark.parametrize("score,max_score,expected", [(1, 3, 33), (1, 8, 13), (50, 100, 50), (3, 0, 0)])
    def test_scorecard_percentage(self, score, max_score, expected):
        assert scorecard_percentage(score, max_score) == expected

    @pytest.mark.parametrize("percentage,expected", [(80, "#22c55e"), (79, "#f59e0b"), (50, "#f59e0b"), (49, "#ef4444")])
    def test_scorecard_color_thresholds(self, percentage, expected):
        assert scorecard_color(percentage) == expected


class TestMarkdown:
    def test_links_grouped_by_category(self, component):
        markdown = default_markdown(component, [], build_structured_links(component, COMPASS_URL))

        assert markdown.startswith("## Links\n\n### Compass\n\n")
        assert " * [Atlassian Compass Component](https://acme.atlassian.net/compass/component/aaa)" in markdown
        assert " * [Atlassian Compass Team](https://acme.atlassian.net/compass/people/team/team-1)" in markdown
        assert "### Development\n\n * [Source](https://github.com/acme/service-a)" in markdown
        assert "### Operations\n\n * [Dashboard](https://grafana.acme.com/d/a)" in markdown
        assert "### Documentation" in markdown

    def test_unsafe_links_are_dropped(self, component):
        markdown = default_markdown(component, [], build_structured_links(component, COMPASS_URL))

        assert "javascript:" not in markdown
        assert "Evil" not in markdown
        assert "### Other" not in markdown

    def test_component_without_id_links_to_component_list(self):
        config = ComponentConfig(name="bare")
        markdown = default_markdown(config, [], build_structured_links(config, COMPASS_URL))

        assert "(https://acme.atlassian.net/compass/components)" in markdown
        assert "Atlassian Compass Team" not in markdown

    def test_custom_fields_table(self, component):
        markdown = default_markdown(component, [], build_structured_links(component, COMPASS_URL))

        assert "## Custom Fields\n\n| Field | Value |\n| --- | --- |" in markdown
        assert "| PCI | ✅ |" in markdown
        assert "| Notes | a \\| b |" in markdown

    def test_dependencies(self, component):
        dependencies = [ResolvedDependency(id="service-b", name="service-b")]
        markdown = default_markdown(component, dependencies, build_structured_links(component, COMPASS_URL))

        assert "## Dependencies\n\n * [service-b](../../service-b/)" in markdown

    def test_no_dependencies(self, component):
        markdown = default_markdown(component, [], build_structured_links(component, COMPASS_URL))

        assert "## Dependencies\n\nNo known dependencies." in markdown
        assert markdown.endswith("## Architecture diagram\n\n<NodeGraph />")


class TestSpecifications:
    def test_local_and_remote_specs(self):
        links = [
            ComponentLink(url="specs/openapi.yml", name="OpenAPI spec"),
            ComponentLink(url="https://api.acme.com/asyncapi.yml", name="AsyncAPI"),
            ComponentLink(url="https://docs.acme.com", name="Docs"),
        ]

        specs = build_specifications(links)

        assert [(s.type, s.path, s.name) for s in specs] == [
            ("openapi", "specs/openapi.yml", "OpenAPI spec"),
            ("asyncapi", "https://api.acme.com/asyncapi.yml", "AsyncAPI"),
        ]

    @pytest.mark.parametrize("url", ["../../secrets/openapi.yml", "/etc/openapi.yml", "javascript:alert(1)"])
    def test_unsafe_specs_are_skipped(self, url, caplog):
        assert build_specifications([ComponentLink(url=url, name="openapi")]) == []
        assert "Ignoring unsafe openapi specification path" in caplog.text


class TestRenderService:
    def test_service_fields(self, component):
        service = render_service(
            component,
            compass_url=COMPASS_URL,
            version="1.2.0",
            service_id="service-a",
            dependencies=[],
        )

        assert service.id == "service-a"
        assert service.version == "1.2.0"
        assert service.summary == "Handles &lt;orders&gt;"
        assert service.owners == ["team-1"]
        assert service.repository.url == "https://github.com/acme/service-a"
        assert service.styles.icon == "ServerIcon"
        assert [a.title for a in service.attachments] == ["Design doc"]
        assert service.sends is None
        assert len(service.badges) == 5

    def test_badges_can_be_disabled(self, component):
        service = render_service(component, COMPASS_URL, "1.0.0", "service-a", [], badges=False)
        assert service.badges is None

    def test_custom_markdown_template(self, component):
        calls = []

        def template(config, dependencies, links):
            calls.append(links)
            return f"# {config.name} has {len(dependencies)} deps"

        dependencies = [ResolvedDependency(id="b", name="b")]
        service = render_service(component, COMPASS_URL, "1.0.0", "service-a", dependencies, markdown_template=template)

        assert service.markdown == "# service-a has 1 deps"
        assert calls[0]["Other"][0].url == "javascript:alert(1)"

    def test_minimal_component(self):
        service = render_service(ComponentConfig(name="bare"), COMPASS_URL, "0.0.0", "bare", [])

        assert service.owners is None
        assert service.repository is None
        assert service.specifications is None
        assert service.styles is None
        assert service.summary == ""


class TestScenarios:
    def test_all_caps_lifecycle_renders_green_badge(self):
        from compass_catalog.compass import normalize_component

        config = normalize_component({"name": "x", "fields": {"lifecycle": "ACTIVE"}})

        assert config.lifecycle == Lifecycle.ACTIVE
        badge = build_badges(config)[0]
        assert badge.model_dump() == {"content": "Active", "backgroundColor": "#22c55e", "textColor": "#fff"}

    def test_swagger_link_becomes_openapi_spec(self):
        link = ComponentLink(url="https://api.example.com/swagger.json", name="Swagger Documentation")

        spec = build_specifications([link])[0]

        assert spec.model_dump() == {
            "type": "openapi",
            "path": "https://api.example.com/swagger.json",
            "name": "Swagger Documentation",
        }

    @pytest.mark.parametrize("owner", ["ari:cloud:identity::team/abc 123", "plain-team"])
    def test_owner_is_sanitized_trailing_segment(self, owner):
        from compass_catalog.sanitize import last_segment, sanitize_id

        service = render_service(ComponentConfig(name="x", ownerId=owner), COMPASS_URL, "1.0.0", "x", [])
        assert service.owners == [sanitize_id(last_segment(owner))]
