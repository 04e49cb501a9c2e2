"""Crontab registration for Moodle maintenance and backups."""

import logging
from typing import Any, Dict, List

from ..utils.errors import CommandError, CronError
from ..utils.shell import CommandRunner

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "moodle-"


def moodle_cron_entry(config: Dict[str, Any]) -> str:
    """Per-minute run of Moodle's scheduled task runner."""
    return f"* * * * * /usr/bin/php {config['moodle']['dir']}/admin/cli/cron.php >/dev/null"


def backup_cron_entry(config: Dict[str, Any]) -> str:
    """Daily compressed dump of the Moodle database at 02:00."""
    backup = config["backup"]
    database = config["database"]["name"]
    # cron treats a bare % as newline
    return (
        f"0 2 * * * /usr/bin/mysqldump --single-transaction --routines --triggers {database}"
        f" | /bin/gzip > {backup['dir']}/{BACKUP_PREFIX}$(date +\\%F).sql.gz"
    )


def cleanup_cron_entry(config: Dict[str, Any]) -> str:
    """Weekly removal of dumps older than the retention period, Sundays at 03:00."""
    backup = config["backup"]
    return (
        f"0 3 * * 0 /usr/bin/find {backup['dir']} -type f -name '{BACKUP_PREFIX}*.sql.gz'"
        f" -mtime +{backup['retention_days']} -delete"
    )


class CrontabManager:
    """Reads and appends to per-user crontabs."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def read(self, user: str) -> str:
        """
        Return a user's current crontab.

        A user without a crontab yields an empty table.
        """
        result = self.runner.run(["crontab", "-u", user, "-l"], check=False)
        if result.returncode != 0:
            return ""
        return result.stdout or ""

    def append(self, user: str, entries: List[str]) -> str:
        """
        Append entries to a user's crontab.

        Entries are added as given, even if an identical line is
        already present.

        Args:
            user: Crontab owner
            entries: Cron lines to add

        Returns:
            str: The crontab that was installed
        """
        current = self.read(user).rstrip("\n")
        lines = [current] if current else []
        lines.extend(entries)
        new_crontab = "\n".join(lines) + "\n"

        try:
            self.runner.run(["crontab", "-u", user, "-"], input=new_crontab)
        except CommandError as e:
            raise CronError(f"Failed to install crontab for {user}", details=e.details) from e

        logger.info("Added %d cron entries for %s", len(entries), user)
        return new_crontab
