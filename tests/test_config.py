"""Tests for configuration models and loading."""

from pathlib import Path

import pytest

from compass_catalog.config import ConfigLoader, GeneratorConfig, load_config, validate_config
from compass_catalog.exceptions import ConfigurationError
from compass_catalog.render import default_markdown

COMPASS_URL = "https://acme.atlassian.net/compass"

CONFIG_YAML = """\
compass_url: https://acme.atlassian.net/compass
services:
  - path: components/orders.yml
  - path: /abs/payments.yml
    id: payments
domain:
  id: sales
  name: Sales
  version: 0.0.1
format: md
"""


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    monkeypatch.setattr(ConfigLoader, "USER_CONFIG_DIR", tmp_path / "home" / ".compass-catalog")


class TestGeneratorConfig:
    def test_defaults(self):
        config = validate_config({"services": [{"path": "a.yml"}], "compass_url": COMPASS_URL})

        assert config.service_id_strategy == "name"
        assert config.override_existing is True
        assert config.format == "mdx"
        assert config.default_version == "0.0.0"
        assert config.badges is True
        assert not config.api_mode

    def test_api_requires_https(self):
        with pytest.raises(ConfigurationError, match="HTTPS"):
            validate_config(
                {
                    "api": {"cloud_id": "c", "api_token": "t", "email": "e", "base_url": "http://acme.atlassian.net"},
                    "compass_url": COMPASS_URL,
                }
            )

    def test_env_references_are_kept_unresolved(self):
        config = validate_config(
            {
                "api": {
                    "cloud_id": "c",
                    "api_token": "$COMPASS_TOKEN",
                    "email": "$COMPASS_EMAIL",
                    "base_url": "https://acme.atlassian.net",
                    "type_filter": ["service", "Library"],
                },
                "compass_url": COMPASS_URL,
            }
        )

        assert config.api.api_token == "$COMPASS_TOKEN"
        assert config.effective_type_filter == ["SERVICE", "LIBRARY"]

    def test_top_level_type_filter_wins(self):
        config = GeneratorConfig(
            services=[{"path": "a.yml"}],
            compass_url=COMPASS_URL,
            type_filter=["application"],
        )
        assert config.effective_type_filter == ["APPLICATION"]

    def test_callables_import_from_strings(self):
        config = validate_config(
            {
                "services": [{"path": "a.yml"}],
                "compass_url": COMPASS_URL,
                "markdown_template": "compass_catalog.render:default_markdown",
            }
        )
        assert config.markdown_template is default_markdown

    def test_unknown_callable(self):
        with pytest.raises(ConfigurationError, match="Cannot import"):
            validate_config(
                {
                    "services": [{"path": "a.yml"}],
                    "compass_url": COMPASS_URL,
                    "markdown_template": "compass_catalog.render:nope",
                }
            )

    def test_unknown_strategy(self):
        with pytest.raises(ConfigurationError):
            validate_config({"services": [{"path": "a.yml"}], "compass_url": COMPASS_URL, "service_id_strategy": "uuid"})

    def test_validated_config_passes_through(self):
        config = GeneratorConfig(services=[{"path": "a.yml"}], compass_url=COMPASS_URL)
        assert validate_config(config) is config


class TestConfigLoader:
    def test_loads_project_config(self, tmp_path):
        (tmp_path / "compass-catalog.yaml").write_text(CONFIG_YAML, encoding="utf-8")

        config = load_config(tmp_path)

        assert config.format == "md"
        assert config.domain.version == "0.0.1"
        assert Path(config.services[0].path) == tmp_path / "components" / "orders.yml"
        assert config.services[1].path == "/abs/payments.yml"
        assert config.services[1].id == "payments"

    def test_explicit_config_path(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text(CONFIG_YAML, encoding="utf-8")

        config = load_config(config_path=path)

        assert config.domain.id == "sales"

    def test_user_config_fallback(self, tmp_path):
        user_dir = ConfigLoader.USER_CONFIG_DIR
        user_dir.mkdir(parents=True)
        (user_dir / "compass-catalog.yaml").write_text(CONFIG_YAML, encoding="utf-8")
        project = tmp_path / "project"
        project.mkdir()

        assert ConfigLoader(project).get_config_path() == user_dir / "compass-catalog.yaml"

    def test_missing_config(self, tmp_path):
        with pytest.raises(ConfigurationError, match="No compass-catalog.yaml found"):
            load_config(tmp_path)

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / "compass-catalog.yaml").write_text("services: [\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Failed to read config"):
            load_config(tmp_path)

    def test_not_a_mapping(self, tmp_path):
        (tmp_path / "compass-catalog.yaml").write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            load_config(tmp_path)

    def test_invalid_values(self, tmp_path):
        (tmp_path / "compass-catalog.yaml").write_text("compass_url: nope\nservices:\n  - path: a.yml\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Invalid generator configuration"):
            load_config(tmp_path)
