"""Cron scheduling for moodledeploy."""

from .crontab import CrontabManager, backup_cron_entry, cleanup_cron_entry, moodle_cron_entry

__all__ = ["CrontabManager", "backup_cron_entry", "cleanup_cron_entry", "moodle_cron_entry"]
