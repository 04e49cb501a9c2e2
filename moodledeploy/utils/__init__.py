"""Utilities for moodledeploy."""

from .files import FileManager
from .logging import register_secret, setup_logging
from .shell import CommandRunner

__all__ = ["CommandRunner", "FileManager", "register_secret", "setup_logging"]
