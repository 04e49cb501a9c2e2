"""Moodle's command-line installer."""

import logging
from typing import Any, Dict, List

from ..utils.shell import CommandRunner

logger = logging.getLogger(__name__)


class MoodleInstaller:
    """Runs admin/cli/install.php as the web server user."""

    def __init__(self, runner: CommandRunner, config: Dict[str, Any]):
        self.runner = runner
        self.config = config

    @property
    def script_path(self) -> str:
        return f"{self.config['moodle']['dir']}/admin/cli/install.php"

    def command(self, domain: str, db_password: str, admin_password: str) -> List[str]:
        """
        Build the non-interactive installer command.

        Args:
            domain: Public domain, served over https
            db_password: Password of the Moodle database user
            admin_password: Password for the Moodle admin account

        Returns:
            List[str]: Installer argv
        """
        moodle = self.config["moodle"]
        database = self.config["database"]

        return [
            "php",
            self.script_path,
            "--non-interactive",
            f"--lang={moodle['lang']}",
            f"--wwwroot=https://{domain}",
            f"--dataroot={moodle['data_dir']}",
            f"--dbtype={database['type']}",
            f"--dbhost={database['host']}",
            f"--dbname={database['name']}",
            f"--dbuser={database['user']}",
            f"--dbpass={db_password}",
            f"--fullname={moodle['fullname']}",
            f"--shortname={moodle['shortname']}",
            f"--adminuser={moodle['admin_user']}",
            f"--adminpass={admin_password}",
            f"--adminemail={moodle['admin_email']}",
            "--agree-license",
        ]

    def run(self, domain: str, db_password: str, admin_password: str) -> None:
        """Run the installer; a failure aborts provisioning."""
        logger.info("Running Moodle CLI installer for https://%s", domain)
        self.runner.run_as(
            self.config["web"]["user"],
            self.command(domain, db_password, admin_password),
            capture=False,
            secrets=(db_password, admin_password),
        )
