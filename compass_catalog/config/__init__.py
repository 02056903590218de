"""Configuration module for the Compass catalog generator."""

from .loader import ConfigLoader, load_config, validate_config
from .models import ApiOption, DomainOption, GeneratorConfig, ServiceOption

__all__ = [
    "ApiOption",
    "ConfigLoader",
    "DomainOption",
    "GeneratorConfig",
    "ServiceOption",
    "load_config",
    "validate_config",
]
