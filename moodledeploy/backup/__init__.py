"""Backup setup for moodledeploy."""

from .manager import BackupManager

__all__ = ["BackupManager"]
