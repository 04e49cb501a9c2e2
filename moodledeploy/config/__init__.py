"""Configuration management for moodledeploy."""

from .manager import ConfigManager
from .schemas import DEFAULT_CONFIG, DEPLOY_CONFIG_SCHEMA

__all__ = ["ConfigManager", "DEFAULT_CONFIG", "DEPLOY_CONFIG_SCHEMA"]
