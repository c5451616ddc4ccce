"""
Render Option Resolution

Loads render options from a YAML config file and merges them over the
defaults in defaults.py. Only keys that exist in the defaults are accepted.

Example config (render.yaml):

    tree:
      indent: 4
    table:
      multiline_strings: true
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from marcsync.contexts.conversion.defaults import get_default_render_options

load_dotenv()
RENDER_CONFIG_ENV = "MARCSYNC_RENDER_CONFIG_PATH"


def merge_render_options(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge override sections into base options in-place.

    Args:
        base: Complete options (usually the defaults)
        overrides: Partial options keyed by format section

    Returns:
        The updated base dict

    Raises:
        ValueError: If a section or option is unknown, or a value has the wrong type
    """
    for section, options in overrides.items():
        if section not in base:
            raise ValueError(
                f"Unknown render section '{section}'. Available sections: {list(base.keys())}"
            )
        if not isinstance(options, dict):
            raise ValueError(f"Render section '{section}' must be a mapping")

        for key, value in options.items():
            if key not in base[section]:
                raise ValueError(
                    f"Unknown option '{key}' in section '{section}'. "
                    f"Available options: {list(base[section].keys())}"
                )
            expected = type(base[section][key])
            if type(value) is not expected:
                raise ValueError(
                    f"Option '{section}.{key}' must be {expected.__name__}, "
                    f"got {type(value).__name__}"
                )
            base[section][key] = value

    return base


def load_render_options(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Resolve render options.

    Args:
        config_path: Optional YAML config file. Defaults to the path in the
                     MARCSYNC_RENDER_CONFIG_PATH environment variable; when
                     neither is set the defaults are returned.

    Returns:
        Complete render options dict

    Raises:
        ValueError: If the config file contains unknown or mistyped options
    """
    options = get_default_render_options()

    if config_path is None:
        env_path = os.getenv(RENDER_CONFIG_ENV)
        if not env_path:
            return options
        config_path = Path(env_path)

    overrides = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    if not isinstance(overrides, dict):
        raise ValueError(f"Render config {config_path} must contain a mapping at the top level")

    return merge_render_options(options, overrides)
