"""Read compass.yml component files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from ..exceptions import ComponentShapeError
from ..models import ComponentConfig
from .normalizer import normalize_component


def read_component_file(path: str | Path) -> dict[str, Any]:
    """Parse a compass.yml file into a raw record.

    Raises:
        OSError: If the file cannot be read.
        yaml.YAMLError: If the file is not valid YAML.
        ComponentShapeError: If the file is not UTF-8 or the document is not
            a mapping.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except UnicodeDecodeError as e:
        raise ComponentShapeError(f"{path} is not valid UTF-8: {e}") from e
    if not isinstance(data, dict):
        raise ComponentShapeError(f"{path} does not contain a component mapping")
    return data


def load_component_file(path: str | Path) -> ComponentConfig:
    """Read and normalize a compass.yml file."""
    return normalize_component(read_component_file(path))
