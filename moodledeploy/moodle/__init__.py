"""Moodle application setup."""

from .filesystem import MoodleFilesystem
from .installer import MoodleInstaller

__all__ = ["MoodleFilesystem", "MoodleInstaller"]
