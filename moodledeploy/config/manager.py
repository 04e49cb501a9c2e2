"""Configuration management for moodledeploy."""

import copy
import logging
import os
from typing import Any, Dict, List, Optional

import yaml
from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .schemas import DEFAULT_CONFIG
from .validator import ConfigValidationError, ConfigValidator

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "moodledeploy.yml"


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Return base updated recursively with override; lists are replaced."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class ConfigManager:
    """Manages the deployment configuration and its templates."""

    def __init__(self, path: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            path: Optional directory searched for moodledeploy.yml
                (defaults to current directory)
        """
        self.path = path or os.getcwd()
        self.validator = ConfigValidator()
        self._config_cache: Dict[str, Dict[str, Any]] = {}

        templates_dir = os.path.join(os.path.dirname(__file__), "..", "templates")
        self.jinja_env = Environment(
            loader=FileSystemLoader(templates_dir),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def get_config_path(self) -> Optional[str]:
        """Get path to the local configuration file, if one exists."""
        config_path = os.path.join(self.path, CONFIG_FILENAME)
        if os.path.exists(config_path):
            return config_path
        return None

    def load_config(self, config_path: Optional[str] = None, validate: bool = True) -> Dict[str, Any]:
        """
        Load the effective deployment configuration.

        Built-in defaults are merged with the given YAML file, or with
        moodledeploy.yml from the working directory when present.

        Args:
            config_path: Optional explicit configuration file
            validate: Whether to validate the configuration

        Returns:
            Dict[str, Any]: Effective configuration

        Raises:
            ConfigValidationError: If validation fails
            FileNotFoundError: If an explicit config file doesn't exist
        """
        if config_path is None:
            config_path = self.get_config_path()
        elif not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        cache_key = config_path or "<defaults>"
        if cache_key in self._config_cache:
            return self._config_cache[cache_key]

        overrides: Dict[str, Any] = {}
        if config_path:
            try:
                with open(config_path, encoding="utf-8") as f:
                    overrides = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigValidationError([f"Invalid YAML in {config_path}: {e}"])

            if not isinstance(overrides, dict):
                raise ConfigValidationError([f"Configuration in {config_path} must be a mapping"])

            logger.debug("Loaded configuration overrides from %s", config_path)

        config = deep_merge(DEFAULT_CONFIG, overrides)

        if validate:
            errors = self.validate_config(config)
            if errors:
                raise ConfigValidationError(errors)

        self._config_cache[cache_key] = config
        return config

    def validate_config(self, config: Dict[str, Any]) -> List[str]:
        """Validate configuration and return list of errors."""
        return self.validator.validate_deploy_config(config)

    def render_template(self, name: str, **context: Any) -> str:
        """Render a template from the package templates directory."""
        return self.jinja_env.get_template(name).render(**context)

    def dump_config(self, config: Dict[str, Any]) -> str:
        """Serialize configuration as YAML."""
        return yaml.safe_dump(config, default_flow_style=False, sort_keys=False)
