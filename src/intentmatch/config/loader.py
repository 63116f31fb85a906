"""Configuration loading from files and environment.

Supports:
- TOML config files
- Environment variables (INTENTMATCH_* prefix)
- .env files
"""

import os
import re
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from intentmatch.config.schema import AppConfig
from intentmatch.observability.logging import get_logger

logger = get_logger(__name__)


def _substitute_env_vars(obj: Any) -> Any:
    """Recursively substitute environment variables in a data structure.

    Supports formats:
    - ${VAR_NAME}
    - ${VAR_NAME:-default}

    Args:
        obj: Input data (dict, list, str, etc.)

    Returns:
        Data structure with environment variables substituted
    """
    if isinstance(obj, dict):
        return {k: _substitute_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_substitute_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        def replace_var(match):
            var_expr = match.group(1)
            if ":-" in var_expr:
                var_name, default_value = var_expr.split(":-", 1)
                return os.getenv(var_name.strip(), default_value)

            var_name = var_expr.strip()
            value = os.getenv(var_name)
            if value is None:
                # Leave the placeholder in place
                logger.warning(
                    "env_var_not_found",
                    var_name=var_name,
                    suggestion="Check that the environment variable is set",
                )
                return match.group(0)
            return value

        return re.sub(r"\$\{([^}]+)\}", replace_var, obj)
    else:
        return obj


def load_config(
    config_path: Optional[Path] = None,
    env_file: Optional[Path] = None,
) -> AppConfig:
    """Load application configuration.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file
    3. Defaults

    A relative ``knowledge_base.path`` in the config file is resolved
    against the directory holding that file.

    Args:
        config_path: Path to TOML config file
        env_file: Path to .env file

    Returns:
        Loaded and validated configuration
    """
    if env_file and env_file.exists():
        load_dotenv(env_file)
        logger.info("loaded_env_file", path=str(env_file))

    config_data: dict[str, Any] = {}
    if config_path and config_path.exists():
        with open(config_path, "rb") as f:
            config_data = tomllib.load(f)
        logger.info("loaded_config_file", path=str(config_path))

        config_data = _substitute_env_vars(config_data)

        kb_section = config_data.get("knowledge_base", {})
        kb_path = kb_section.get("path")
        if kb_path and not Path(kb_path).expanduser().is_absolute():
            kb_section["path"] = str(config_path.parent / kb_path)

    config = AppConfig(**config_data)
    logger.info(
        "config_loaded",
        log_level=config.log_level.value,
        embedding_provider=config.embedding.provider.value,
        embedding_model=config.embedding.model_name,
        similarity_threshold=config.matcher.similarity_threshold,
    )

    return config


def get_default_config_path() -> Path:
    """Get the default config file path.

    Searches in order:
    1. ./config.toml
    2. ~/.intentmatch/config.toml
    """
    search_paths = [
        Path.cwd() / "config.toml",
        Path.home() / ".intentmatch" / "config.toml",
    ]

    for path in search_paths:
        if path.exists():
            return path

    return search_paths[0]
