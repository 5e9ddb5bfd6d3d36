# agent_installer/config_loader.py
# -*- coding: utf-8 -*-
"""
Configuration loader for the installer.

Settings are resolved in the following order, later sources overriding
earlier ones:
1. Pydantic Model Defaults
2. Environment Variables (``CWAGENT_*``, loaded by Pydantic's BaseSettings)
3. YAML settings file, when one is given
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError
from pydantic_settings import SettingsError

from .config_models import AppSettings

module_logger = logging.getLogger(__name__)


def _deep_update(
    source: Dict[str, Any], overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Recursively update ``source`` with values from ``overrides``.

    Nested dictionaries are merged key by key; ``None`` values in
    ``overrides`` never replace an existing value.
    """
    for key, value in overrides.items():
        if (
            isinstance(value, dict)
            and key in source
            and isinstance(source[key], dict)
        ):
            source[key] = _deep_update(source[key], value)
        elif value is not None:
            source[key] = value
        elif key not in source:
            source[key] = value
    return source


def load_yaml_settings(
    settings_file: Union[str, Path],
    current_logger: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """
    Read a YAML settings file into a dictionary.

    A missing, unreadable, malformed, or non-mapping file yields an empty
    dictionary and a warning.
    """
    logger_to_use = current_logger if current_logger else module_logger
    yaml_config_path = Path(settings_file)

    if not yaml_config_path.is_file():
        logger_to_use.warning(
            f"Settings file '{yaml_config_path}' not found. Using defaults and environment variables."
        )
        return {}

    try:
        with open(yaml_config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger_to_use.warning(
            f"Could not parse YAML settings file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}
    except IOError as e:
        logger_to_use.warning(
            f"Could not read settings file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}

    if yaml_data is None:
        return {}
    if not isinstance(yaml_data, dict):
        logger_to_use.warning(
            f"Settings file '{yaml_config_path}' does not contain a valid YAML dictionary. Ignoring."
        )
        return {}

    logger_to_use.info(f"Loaded settings from {yaml_config_path}")
    return yaml_data


def load_app_settings(
    settings_file: Optional[Union[str, Path]] = None,
    current_logger: Optional[logging.Logger] = None,
) -> AppSettings:
    """
    Build the installer settings from defaults, environment and YAML.

    Args:
        settings_file: Optional path to a YAML settings file.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        An instance of AppSettings with the fully resolved configuration.

    Raises:
        SystemExit: If the combined values fail validation or an environment
            value cannot be decoded.
    """
    logger_to_use = current_logger if current_logger else module_logger

    try:
        current_values_dict = AppSettings().model_dump(exclude_defaults=False)
        if settings_file:
            current_values_dict = _deep_update(
                current_values_dict,
                load_yaml_settings(settings_file, logger_to_use),
            )
        final_settings = AppSettings(**current_values_dict)
    except (ValidationError, SettingsError) as e:
        logger_to_use.error(f"Configuration validation failed: {e}")
        raise SystemExit(f"Configuration error: {e}") from e

    logger_to_use.debug("Loaded and validated installer settings")
    return final_settings
