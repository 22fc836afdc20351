"""
Default configuration values for godecl.

Centralized defaults that can be overridden by a config file or environment variables.
"""

from typing import Any, Dict

DEFAULT_CONFIG_FILE = ".godecl.json"

# Parse option defaults: every declaration category collected,
# package qualifiers must match an import
DEFAULT_OPTIONS: Dict[str, Any] = {
    "ignore_comments": False,
    "ignore_structs": False,
    "ignore_interfaces": False,
    "ignore_functions": False,
    "ignore_methods": False,
    "ignore_types": False,
    "ignore_variables": False,
    "ignore_constants": False,
    "allow_any_import_alias": False
}

# Environment variable to option name
ENV_VAR_MAPPING = {
    'GODECL_IGNORE_COMMENTS': 'ignore_comments',
    'GODECL_IGNORE_STRUCTS': 'ignore_structs',
    'GODECL_IGNORE_INTERFACES': 'ignore_interfaces',
    'GODECL_IGNORE_FUNCTIONS': 'ignore_functions',
    'GODECL_IGNORE_METHODS': 'ignore_methods',
    'GODECL_IGNORE_TYPES': 'ignore_types',
    'GODECL_IGNORE_VARIABLES': 'ignore_variables',
    'GODECL_IGNORE_CONSTANTS': 'ignore_constants',
    'GODECL_ALLOW_ANY_IMPORT_ALIAS': 'allow_any_import_alias'
}


def get_default_options() -> Dict[str, Any]:
    """Get a mutable copy of the default parse options"""
    return dict(DEFAULT_OPTIONS)
