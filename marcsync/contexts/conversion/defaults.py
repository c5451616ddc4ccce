"""
Default render options for each format.

Used by config_resolver.py as the base that user config files override.
"""

import copy
from typing import Any, Dict

# Options per format section; keys must match the keyword arguments of the
# corresponding dump function (primary: MarcGenerator).
DEFAULT_RENDER_OPTIONS = {
    "primary": {
        "separate_groups": True,
    },
    "tree": {
        "indent": 2,
    },
    "block": {
        "indent": 2,
        "width": 80,
    },
    "table": {
        "indent": 4,
        "multiline_strings": False,
    },
}


def get_default_render_options() -> Dict[str, Any]:
    """
    Get a fresh copy of the default render options.

    Returns:
        Dict of format section -> option dict, safe to mutate
    """
    return copy.deepcopy(DEFAULT_RENDER_OPTIONS)
