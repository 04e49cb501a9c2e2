"""System package and service management."""

import logging
from typing import List

from ..utils.errors import CommandError, PackageError, create_error_suggestions
from ..utils.shell import CommandRunner

logger = logging.getLogger(__name__)

BASE_PACKAGES = [
    "nginx",
    "mariadb-server",
    "php-fpm",
    "php-intl",
    "php-mysql",
    "php-curl",
    "php-cli",
    "php-zip",
    "php-xml",
    "php-gd",
    "php-common",
    "php-mbstring",
    "php-xmlrpc",
    "php-json",
    "php-sqlite3",
    "php-soap",
    "certbot",
    "python3-certbot-nginx",
]

# Tools driven by the hardening step
HARDENING_PACKAGES = ["expect", "ufw"]


def required_packages() -> List[str]:
    """Return every package the Moodle host needs, in install order."""
    return BASE_PACKAGES + HARDENING_PACKAGES


class PackageManager:
    """Installs packages with apt."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def _apt(self, args: List[str]) -> None:
        try:
            self.runner.run(["apt"] + args, capture=False)
        except CommandError as e:
            raise PackageError(
                f"apt {' '.join(args[:1])} failed",
                details=e.details or e.message,
                suggestions=create_error_suggestions("apt_failed"),
            ) from e

    def update(self) -> None:
        """Refresh the package index."""
        self._apt(["update"])

    def upgrade(self) -> None:
        """Upgrade installed packages."""
        self._apt(["upgrade", "-y"])

    def install(self, packages: List[str]) -> None:
        """
        Install packages non-interactively.

        Args:
            packages: Package names to install
        """
        if not packages:
            return
        logger.info("Installing %d packages", len(packages))
        self._apt(["install", "-y"] + list(packages))


class ServiceManager:
    """Controls systemd units."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def _systemctl(self, action: str, service: str) -> None:
        logger.debug("systemctl %s %s", action, service)
        self.runner.run(["systemctl", action, service])

    def enable(self, service: str) -> None:
        self._systemctl("enable", service)

    def start(self, service: str) -> None:
        self._systemctl("start", service)

    def restart(self, service: str) -> None:
        self._systemctl("restart", service)

    def reload(self, service: str) -> None:
        self._systemctl("reload", service)
