"""
Configuration validation for wallrotate.
"""

import re
from pathlib import Path
from typing import Dict, Any

from ..exceptions import ConfigError


# URL validation regex (templates are checked after placeholder expansion)
URL_PATTERN = re.compile(
    r'^https?://'  # http:// or https://
    r'(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+[A-Z]{2,6}\.?|'  # domain
    r'localhost|'  # localhost
    r'\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})'  # IP
    r'(?::\d+)?'  # optional port
    r'(?:/?|[/?]\S+)$', re.IGNORECASE)


# Valid sections and their keys
VALID_STRUCTURE = {
    'sources': {
        'urls': list,
        'tries': int,
        'timeout': int,
        'connectivity_url': str,
        'connectivity_timeout': int,
        'width': int,
        'height': int,
    },
    'cache': {
        'directory': str,
        'keep': int,
    },
    'display': {
        'command': str,
        'output': str,
    },
    'palette': {
        'enabled': bool,
        'command': str,
        'extra_args': list,
        'cache_dir': str,
    },
    'reload': {
        'waybar': bool,
        'kitty': bool,
        'waybar_command': str,
        'kitty_socket': str,
    },
    'notifications': {
        'enabled': bool,
        'show_preview': bool,
        'timeout_ms': int,
        'urgency': str,
    },
    'logging': {
        'level': str,
    },
}


def validate_toml_structure(config_dict: Dict[str, Any], config_file: Path) -> None:
    """
    Validate TOML structure before creating dataclasses.

    Checks for unknown sections and keys, providing helpful error messages.

    Args:
        config_dict: Loaded TOML configuration dictionary
        config_file: Path to config file for error messages

    Raises:
        ConfigError: If structure validation fails
    """
    # Check for unknown sections
    for section in config_dict:
        if section not in VALID_STRUCTURE:
            raise ConfigError(
                f"Unknown config section '{section}' in {config_file}. "
                f"Valid sections: {list(VALID_STRUCTURE.keys())}"
            )

    # Check each section for unknown keys and type validation
    for section_name, section_config in config_dict.items():
        if not isinstance(section_config, dict):
            raise ConfigError(
                f"Section '{section_name}' must be a dictionary in {config_file}"
            )

        valid_keys = VALID_STRUCTURE[section_name]

        for key, value in section_config.items():
            if key not in valid_keys:
                raise ConfigError(
                    f"Unknown key '{key}' in section '{section_name}' in {config_file}. "
                    f"Valid keys: {list(valid_keys.keys())}"
                )

            # bool is a subclass of int, don't let `tries = true` through
            expected_type = valid_keys[key]
            if not isinstance(value, expected_type) or (
                expected_type is int and isinstance(value, bool)
            ):
                raise ConfigError(
                    f"Key '{section_name}.{key}' must be of type {expected_type.__name__} "
                    f"in {config_file}, got {type(value).__name__}"
                )

            if expected_type is list and not all(isinstance(item, str) for item in value):
                raise ConfigError(
                    f"Key '{section_name}.{key}' must be a list of strings in {config_file}"
                )
