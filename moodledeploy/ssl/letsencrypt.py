"""Let's Encrypt integration through certbot's nginx plugin."""

import logging
from datetime import datetime
from typing import Any, Dict, List

from ..utils.errors import CommandError, SSLError, create_error_suggestions
from ..utils.shell import CommandRunner

logger = logging.getLogger(__name__)


class LetsEncryptManager:
    """Manages Let's Encrypt SSL certificates."""

    def __init__(self, runner: CommandRunner, email: str, staging: bool = False):
        """
        Initialize Let's Encrypt manager.

        Args:
            runner: Command runner
            email: Email address for Let's Encrypt registration
            staging: Use Let's Encrypt staging environment
        """
        self.runner = runner
        self.email = email
        self.staging = staging
        self.config_dir = "/etc/letsencrypt"

    def check_certbot_available(self) -> bool:
        """Check if certbot is available."""
        return self.runner.which("certbot")

    def command(self, domain: str) -> List[str]:
        """Build the certbot invocation for a domain."""
        cmd = [
            "certbot",
            "--nginx",
            "--non-interactive",
            "--agree-tos",
            "--email",
            self.email,
            "-d",
            domain,
        ]
        if self.staging:
            cmd.append("--staging")
        return cmd

    def obtain_certificate(self, domain: str) -> Dict[str, Any]:
        """
        Obtain a certificate and let certbot switch the nginx site to HTTPS.

        Args:
            domain: Domain name for certificate

        Returns:
            Dict[str, Any]: Certificate information

        Raises:
            SSLError: If certbot is missing or fails
        """
        if not self.runner.dry_run and not self.check_certbot_available():
            raise SSLError(
                "certbot is not installed",
                suggestions=["Install the certbot and python3-certbot-nginx packages"],
            )

        logger.info("Obtaining Let's Encrypt certificate for %s", domain)

        try:
            self.runner.run(self.command(domain))
        except CommandError as e:
            raise SSLError(
                f"Certbot failed for {domain}",
                details=e.details,
                suggestions=create_error_suggestions("certbot_failed", domain=domain),
            ) from e

        cert_dir = f"{self.config_dir}/live/{domain}"
        return {
            "success": True,
            "domain": domain,
            "cert_path": f"{cert_dir}/fullchain.pem",
            "key_path": f"{cert_dir}/privkey.pem",
            "staging": self.staging,
            "obtained_at": datetime.now().isoformat(),
        }
