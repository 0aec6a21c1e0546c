"""Configuration loading, schema, and defaults."""

from cyselect.config.loader import ConfigError, load_config
from cyselect.config.schema import CySelectConfig

__all__ = [
    "ConfigError",
    "CySelectConfig",
    "load_config",
]
