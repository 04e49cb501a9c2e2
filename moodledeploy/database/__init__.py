"""Database provisioning for moodledeploy."""

from .mariadb import BACKUP_PRIVILEGES, MOODLE_PRIVILEGES, MariaDBManager

__all__ = ["BACKUP_PRIVILEGES", "MOODLE_PRIVILEGES", "MariaDBManager"]
