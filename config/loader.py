"""
Parse option loading.

Layers defaults, an optional JSON config file and environment variables
into a validated ParseOptions.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union
import logging

from pydantic import ValidationError
from pydantic.alias_generators import to_snake

from godecl.models.config import ParseOptions
from .defaults import DEFAULT_CONFIG_FILE, ENV_VAR_MAPPING, get_default_options

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Raised when a config file cannot be read or holds invalid options"""
    pass


class ConfigurationLoader:
    """Load parse options from defaults, config files and the environment"""

    def __init__(self, working_dir: Optional[Union[str, Path]] = None):
        self.working_dir = Path(working_dir) if working_dir else Path.cwd()

    def load_options(self, config_path: Optional[Union[str, Path]] = None) -> ParseOptions:
        """
        Build ParseOptions for a parse run.

        Args:
            config_path: JSON file with option overrides. Without it,
                ``.godecl.json`` in the working directory is used if present.

        Returns:
            Validated options

        Raises:
            ConfigurationError: Unreadable file, bad JSON or unknown options
        """
        data = get_default_options()

        config_file = self._find_config_file(config_path)
        if config_file is not None:
            data.update(self._load_config_file(config_file))

        data = self._apply_env_overrides(data)

        try:
            return ParseOptions(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid parse options: {e}") from e

    def _find_config_file(self, config_path: Optional[Union[str, Path]]) -> Optional[Path]:
        if config_path is not None:
            config_file = Path(config_path)
            if not config_file.is_file():
                raise ConfigurationError(f"Config file not found: {config_file}")
            return config_file

        default_file = self.working_dir / DEFAULT_CONFIG_FILE
        return default_file if default_file.is_file() else None

    def _load_config_file(self, config_file: Path) -> Dict[str, Any]:
        """Load option overrides, accepting snake_case or camelCase keys"""
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to load config from {config_file}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {config_file} must hold a JSON object")

        logger.debug(f"Loaded {len(data)} options from {config_file}")
        return {to_snake(key): value for key, value in data.items()}

    def _apply_env_overrides(self, options: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to options"""
        for env_var, option in ENV_VAR_MAPPING.items():
            env_value = os.getenv(env_var)
            if env_value is not None:
                options[option] = self._convert_env_value(env_value)
        return options

    def _convert_env_value(self, value: str) -> Any:
        """Convert environment variable string to appropriate type"""
        if value.lower() in ('true', 'yes', '1', 'on'):
            return True
        elif value.lower() in ('false', 'no', '0', 'off'):
            return False
        return value
