"""Configuration models for the Compass catalog generator."""

from __future__ import annotations

import importlib
from typing import Any, Callable, Literal
from urllib.parse import urlsplit

from pydantic import BaseModel, Field, field_validator, model_validator

from ..models import ComponentConfig

ServiceIdStrategy = Literal["name", "compass-id"] | Callable[[ComponentConfig], str]


def _import_callable(value: Any) -> Any:
    """Resolve ``"package.module:function"`` strings to the callable they name."""
    if not isinstance(value, str) or ":" not in value:
        return value
    module_name, _, attr = value.partition(":")
    try:
        module = importlib.import_module(module_name)
        return getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise ValueError(f"Cannot import {value}: {e}") from e


def _check_url(value: str, field_name: str) -> str:
    parts = urlsplit(value)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValueError(f"{field_name} must be a valid URL")
    return value


class ServiceOption(BaseModel):
    """A compass.yml file to turn into a service."""

    path: str = Field(..., min_length=1, description="Path to the compass.yml file")
    id: str | None = Field(default=None, description="Service id override")
    version: str | None = Field(default=None, description="Service version override")


class DomainOption(BaseModel):
    """Domain every generated service is attached to."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    version: str = Field(..., min_length=1)


class ApiOption(BaseModel):
    """Compass GraphQL API access.

    ``api_token`` and ``email`` may be ``$ENV_VAR`` references, resolved when
    a request is made.
    """

    cloud_id: str = Field(..., min_length=1, description="Atlassian cloud (site) id")
    api_token: str = Field(..., min_length=1, description="API token or $ENV_VAR")
    email: str = Field(..., min_length=1, description="Account email or $ENV_VAR")
    base_url: str = Field(..., description="Site URL, e.g. https://acme.atlassian.net")
    type_filter: list[str] | None = Field(default=None, description="Component types to keep")

    @field_validator("base_url")
    @classmethod
    def _https_base_url(cls, value: str) -> str:
        _check_url(value, "base_url")
        if not value.startswith("https://"):
            raise ValueError("base_url must use HTTPS to protect API credentials")
        return value


class GeneratorConfig(BaseModel):
    """Root generator configuration."""

    services: list[ServiceOption] | None = Field(
        default=None, description="compass.yml files (file mode)"
    )
    api: ApiOption | None = Field(default=None, description="Compass API source (API mode)")
    compass_url: str = Field(..., description="Compass site URL used for human-facing links")
    domain: DomainOption | None = None
    type_filter: list[str] | None = None
    name_filter: list[str] | None = None
    name_mapping: dict[str, str] = Field(
        default_factory=dict, description="Component name -> service id"
    )
    service_id_strategy: ServiceIdStrategy = "name"
    override_existing: bool = True
    format: Literal["md", "mdx"] = "mdx"
    markdown_template: Callable[..., str] | None = None
    default_version: str = Field(default="0.0.0", min_length=1)
    dry_run: bool = False
    debug: bool = False
    badges: bool = True

    @field_validator("compass_url")
    @classmethod
    def _valid_compass_url(cls, value: str) -> str:
        return _check_url(value, "compass_url")

    @field_validator("services")
    @classmethod
    def _at_least_one_service(cls, value: list[ServiceOption] | None) -> list[ServiceOption] | None:
        if value is not None and not value:
            raise ValueError("At least one service is required")
        return value

    @field_validator("markdown_template", "service_id_strategy", mode="before")
    @classmethod
    def _load_callables(cls, value: Any) -> Any:
        return _import_callable(value)

    @model_validator(mode="after")
    def _exactly_one_source(self) -> "GeneratorConfig":
        if self.services is None and self.api is None:
            raise ValueError('Either "services" (file mode) or "api" (API mode) must be provided')
        if self.services is not None and self.api is not None:
            raise ValueError('Cannot use both "services" and "api" - choose one mode')
        return self

    @property
    def api_mode(self) -> bool:
        return self.api is not None

    @property
    def effective_type_filter(self) -> list[str]:
        """Types to keep, from the top level or the API section."""
        types = self.type_filter or (self.api.type_filter if self.api else None) or []
        return [t.upper() for t in types]
