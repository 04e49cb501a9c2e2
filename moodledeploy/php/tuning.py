"""PHP runtime tuning for Moodle."""

import logging
from typing import Any, Dict, List

from ..system.packages import ServiceManager
from ..utils.files import FileManager

logger = logging.getLogger(__name__)

SAPIS = ["fpm", "cli"]


def fpm_socket(version: str) -> str:
    """Unix socket PHP-FPM listens on for a PHP version."""
    return f"/run/php/php{version}-fpm.sock"


class PhpTuner:
    """Raises PHP's input and upload limits to what Moodle expects."""

    def __init__(self, files: FileManager, services: ServiceManager, config: Dict[str, Any]):
        self.files = files
        self.services = services
        self.version = config["php"]["version"]
        self.settings = {key: str(value) for key, value in config["php"]["settings"].items()}

    def ini_path(self, sapi: str) -> str:
        return f"/etc/php/{self.version}/{sapi}/php.ini"

    @property
    def fpm_service(self) -> str:
        return f"php{self.version}-fpm"

    def apply(self) -> List[str]:
        """
        Apply the configured settings to every SAPI's php.ini and restart FPM.

        Returns:
            List[str]: Edited ini files
        """
        edited = []
        for sapi in SAPIS:
            path = self.ini_path(sapi)
            self.files.replace_setting_lines(path, self.settings)
            edited.append(path)

        self.services.restart(self.fpm_service)
        logger.info("Tuned PHP %s (%s)", self.version, ", ".join(f"{k}={v}" for k, v in self.settings.items()))
        return edited
