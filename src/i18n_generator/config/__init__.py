"""Configuration loading and validation."""

from .manager import ConfigManager
from .schema import DEFAULT_LANGUAGES, GeneratorConfig

__all__ = ["ConfigManager", "DEFAULT_LANGUAGES", "GeneratorConfig"]
