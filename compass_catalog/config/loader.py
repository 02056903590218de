"""Generator configuration file loader."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigurationError
from .models import GeneratorConfig

logger = logging.getLogger(__name__)


def validate_config(data: dict[str, Any] | GeneratorConfig) -> GeneratorConfig:
    """Validate raw generator options.

    Raises:
        ConfigurationError: If the options are incomplete or inconsistent.
    """
    if isinstance(data, GeneratorConfig):
        return data
    try:
        return GeneratorConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid generator configuration: {e}") from e


class ConfigLoader:
    """Load generator configuration from YAML."""

    CONFIG_FILENAME = "compass-catalog.yaml"
    USER_CONFIG_DIR = Path.home() / ".compass-catalog"

    def __init__(self, project_path: Path | None = None):
        self._project_path = project_path or Path.cwd()

    def search_paths(self) -> list[Path]:
        """Candidate config files, most specific first."""
        return [directory / self.CONFIG_FILENAME for directory in (self._project_path, self.USER_CONFIG_DIR)]

    def get_config_path(self) -> Path | None:
        """First existing config file, or None when there is none."""
        return next((path for path in self.search_paths() if path.is_file()), None)

    def load(self, config_path: Path | None = None) -> GeneratorConfig:
        """Load and validate configuration.

        Args:
            config_path: Explicit config file. If None, the default locations are searched.

        Returns:
            Validated GeneratorConfig.

        Raises:
            ConfigurationError: If no file is found, it cannot be parsed, or it is invalid.
        """
        config_path = config_path or self.get_config_path()
        if config_path is None:
            raise ConfigurationError(
                f"No {self.CONFIG_FILENAME} found in {self._project_path} or {self.USER_CONFIG_DIR}"
            )

        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to read config from {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {config_path} must contain a mapping")

        # Relative compass.yml paths are relative to the config file
        for service in data.get("services") or []:
            if isinstance(service, dict) and service.get("path"):
                path = Path(service["path"])
                if not path.is_absolute():
                    service["path"] = str(Path(config_path).parent / path)

        config = validate_config(data)
        logger.info(f"Loaded config from: {config_path}")
        return config


def load_config(
    project_path: Path | str | None = None,
    config_path: Path | str | None = None,
) -> GeneratorConfig:
    """Load generator settings from ``config_path`` or the default locations."""
    path = Path(project_path) if project_path else None
    explicit = Path(config_path) if config_path else None
    return ConfigLoader(path).load(explicit)
