"""Scripted mysql_secure_installation run through expect."""

import logging
from typing import List, Tuple

from ..utils.errors import CommandError, SecurityError
from ..utils.shell import CommandRunner

logger = logging.getLogger(__name__)

# (prompt fragment, answer); prompts missing from a MariaDB release are skipped
SECURE_INSTALLATION_DIALOGUE: List[Tuple[str, str]] = [
    ("Enter current password for root", ""),
    ("Switch to unix_socket authentication", "n"),
    ("Change the root password", "n"),
    ("Set root password", "n"),
    ("Remove anonymous users", "Y"),
    ("Disallow root login remotely", "Y"),
    ("Remove test database and access to it", "Y"),
    ("Reload privilege tables now", "Y"),
]


class SecureInstallation:
    """Answers mysql_secure_installation's prompts non-interactively."""

    def __init__(self, runner: CommandRunner, timeout: int = 30):
        self.runner = runner
        self.timeout = timeout

    def script(self) -> str:
        """
        Build the expect program driving mysql_secure_installation.

        Root keeps unix_socket authentication; anonymous users, remote
        root logins and the test database are removed.
        """
        lines = [
            f"set timeout {self.timeout}",
            "spawn mysql_secure_installation",
            "expect {",
        ]
        for prompt, answer in SECURE_INSTALLATION_DIALOGUE:
            lines.append(f'    "{prompt}" {{ send "{answer}\\r"; exp_continue }}')
        lines.extend(
            [
                '    timeout { puts "mysql_secure_installation timed out"; exit 1 }',
                "    eof",
                "}",
                "catch wait result",
                "exit [lindex $result 3]",
            ]
        )
        return "\n".join(lines) + "\n"

    def run(self) -> None:
        """Run the scripted dialogue; raises SecurityError on failure."""
        logger.info("Securing MariaDB installation")
        try:
            self.runner.run(["expect", "-c", self.script()])
        except CommandError as e:
            raise SecurityError(
                "mysql_secure_installation failed",
                details=e.details,
                suggestions=["Run mysql_secure_installation manually to see the failing prompt"],
            ) from e
