"""nginx virtual host for Moodle."""

import logging
from typing import Any, Dict, Optional

from ..config.manager import ConfigManager
from ..php.tuning import fpm_socket
from ..system.packages import ServiceManager
from ..utils.errors import CommandError, WebServerError, create_error_suggestions
from ..utils.files import FileManager
from ..utils.shell import CommandRunner

logger = logging.getLogger(__name__)

SITES_AVAILABLE = "/etc/nginx/sites-available"
SITES_ENABLED = "/etc/nginx/sites-enabled"
SITE_NAME = "moodle.conf"

# Paths in the code tree that must never be served
DENIED_PATTERNS = [
    r"/vendor/",
    r"/node_modules/",
    r"composer\.json",
    r"/readme",
    r"/READ.*",
    r"upgrade\.txt",
    r"/UPGRADING\.md",
    r"db/install\.xml",
]


class NginxSite:
    """Renders, enables and activates the Moodle server block."""

    def __init__(
        self,
        config_manager: ConfigManager,
        config: Dict[str, Any],
        files: Optional[FileManager] = None,
        runner: Optional[CommandRunner] = None,
        services: Optional[ServiceManager] = None,
    ):
        self.config_manager = config_manager
        self.config = config
        self.files = files
        self.runner = runner
        self.services = services

    @property
    def available_path(self) -> str:
        return f"{SITES_AVAILABLE}/{SITE_NAME}"

    @property
    def enabled_path(self) -> str:
        return f"{SITES_ENABLED}/{SITE_NAME}"

    def render(self, domain: str) -> str:
        """
        Render the server block for a domain.

        Args:
            domain: Value for server_name

        Returns:
            str: nginx configuration text
        """
        return self.config_manager.render_template(
            "nginx-moodle.conf.j2",
            domain=domain,
            moodle_dir=self.config["moodle"]["dir"],
            data_dir=self.config["moodle"]["data_dir"],
            fpm_socket=fpm_socket(self.config["php"]["version"]),
            denied_patterns=DENIED_PATTERNS,
        )

    def test_configuration(self) -> None:
        """Run ``nginx -t``; raises WebServerError if the configuration is invalid."""
        try:
            self.runner.run(["nginx", "-t"])
        except CommandError as e:
            raise WebServerError(
                "nginx configuration test failed",
                details=e.details,
                suggestions=create_error_suggestions("nginx_config_invalid"),
            ) from e

    def install(self, domain: str) -> str:
        """
        Write the site, make it the only enabled site and reload nginx.

        Returns:
            str: Path of the written site file
        """
        self.files.write_file(self.available_path, self.render(domain))
        self.files.remove(f"{SITES_ENABLED}/default")
        self.files.symlink(self.available_path, self.enabled_path)

        self.test_configuration()
        self.services.reload("nginx")

        logger.info("Enabled nginx site for %s", domain)
        return self.available_path
