"""Git integration for moodledeploy."""

from .operations import GitOperations

__all__ = ["GitOperations"]
