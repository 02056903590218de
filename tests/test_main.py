"""Tests for the generator command line."""

from compass_catalog import main as cli


def write_config(tmp_path, sample_components, extra=""):
    services = "\n".join(f"  - path: {path}" for path in sample_components)
    config = tmp_path / "compass-catalog.yaml"
    config.write_text(
        f"compass_url: https://acme.atlassian.net/compass\nservices:\n{services}\n{extra}",
        encoding="utf-8",
    )
    return config


class TestMain:
    def test_generates_into_project_dir(self, tmp_path, sample_components):
        config = write_config(tmp_path, sample_components)
        project = tmp_path / "eventcatalog"

        assert cli.main([str(project), "--config", str(config)]) == 0
        assert (project / "services" / "service-a" / "index.mdx").exists()

    def test_dry_run_flag(self, tmp_path, sample_components):
        config = write_config(tmp_path, sample_components)
        project = tmp_path / "eventcatalog"

        assert cli.main([str(project), "--config", str(config), "--dry-run"]) == 0
        assert not project.exists()

    def test_invalid_config(self, tmp_path, caplog):
        config = tmp_path / "compass-catalog.yaml"
        config.write_text("compass_url: nope\n", encoding="utf-8")

        assert cli.main(["--config", str(config)]) == 2
        assert "Invalid generator configuration" in caplog.text

    def test_failures_give_exit_code_one(self, tmp_path, sample_components):
        config = write_config(tmp_path, [*sample_components, str(tmp_path / "missing.yml")])

        assert cli.main([str(tmp_path / "eventcatalog"), "--config", str(config)]) == 1
