"""Database backups for the Moodle deployment."""

import logging
from typing import Any, Dict, List

from ..config.manager import ConfigManager
from ..cron.crontab import CrontabManager, backup_cron_entry, cleanup_cron_entry
from ..database.mariadb import BACKUP_PRIVILEGES, MariaDBManager
from ..utils.files import FileManager

logger = logging.getLogger(__name__)

CLIENT_CONFIG_MODE = 0o600
BACKUP_DIR_MODE = 0o700
BACKUP_CRON_USER = "root"


class BackupManager:
    """Sets up the backup account, its client credentials and the backup jobs."""

    def __init__(
        self,
        config_manager: ConfigManager,
        config: Dict[str, Any],
        files: FileManager,
        database: MariaDBManager,
        crontab: CrontabManager,
    ):
        self.config_manager = config_manager
        self.config = config
        self.files = files
        self.database = database
        self.crontab = crontab

    @property
    def backup_user(self) -> str:
        return self.config["backup"]["user"]

    def create_backup_user(self, password: str) -> None:
        """Create a read-only account that mysqldump can lock and dump with."""
        host = self.config["database"]["host"]
        self.database.create_user(self.backup_user, password, host)
        self.database.grant(
            BACKUP_PRIVILEGES, self.config["database"]["name"], self.backup_user, host
        )
        self.database.flush_privileges()

    def render_client_config(self, password: str) -> str:
        return self.config_manager.render_template(
            "my.cnf.j2",
            user=self.backup_user,
            password=password,
            host=self.config["database"]["host"],
        )

    def write_client_config(self, password: str) -> str:
        """
        Write the MySQL client credentials read by root's mysqldump.

        Returns:
            str: Path to the credentials file (mode 0600)
        """
        path = self.config["backup"]["client_config"]
        self.files.write_file(path, self.render_client_config(password), mode=CLIENT_CONFIG_MODE)
        logger.info("Wrote MySQL client credentials to %s", path)
        return path

    def prepare_backup_dir(self) -> str:
        path = self.config["backup"]["dir"]
        self.files.ensure_directory(path, mode=BACKUP_DIR_MODE)
        return path

    def cron_entries(self) -> List[str]:
        return [backup_cron_entry(self.config), cleanup_cron_entry(self.config)]

    def schedule(self) -> List[str]:
        """Add the daily dump and weekly cleanup jobs to root's crontab."""
        entries = self.cron_entries()
        self.crontab.append(BACKUP_CRON_USER, entries)
        return entries

    def setup(self, password: str) -> Dict[str, Any]:
        """
        Run the complete backup setup.

        Args:
            password: Password for the backup account

        Returns:
            Dict[str, Any]: Setup summary
        """
        self.create_backup_user(password)
        client_config = self.write_client_config(password)
        backup_dir = self.prepare_backup_dir()
        entries = self.schedule()

        return {
            "success": True,
            "user": self.backup_user,
            "client_config": client_config,
            "backup_dir": backup_dir,
            "scheduled_jobs": entries,
        }
