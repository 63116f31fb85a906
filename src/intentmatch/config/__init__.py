"""Configuration schema and loading."""

from intentmatch.config.loader import get_default_config_path, load_config
from intentmatch.config.schema import AppConfig

__all__ = ["AppConfig", "get_default_config_path", "load_config"]
