"""The Moodle provisioning procedure."""

import logging
import os
from typing import Any, Dict, List, Optional

from ..backup.manager import BackupManager
from ..config.manager import ConfigManager
from ..config.validator import ConfigValidator
from ..cron.crontab import CrontabManager, moodle_cron_entry
from ..database.mariadb import MOODLE_PRIVILEGES, MariaDBManager
from ..git.operations import GitOperations
from ..moodle.filesystem import MoodleFilesystem
from ..moodle.installer import MoodleInstaller
from ..php.tuning import PhpTuner
from ..secrets.credentials import CredentialStore
from ..secrets.generator import SecretGenerator
from ..security.firewall import FirewallManager
from ..security.hardening import SecureInstallation
from ..ssl.letsencrypt import LetsEncryptManager
from ..system.packages import PackageManager, ServiceManager, required_packages
from ..utils.errors import SecurityError, ValidationError, create_error_suggestions
from ..utils.files import FileManager
from ..utils.logging import register_secret
from ..utils.shell import CommandRunner
from ..webserver.nginx import NginxSite
from .steps import Step, StepExecutor, StepResult

logger = logging.getLogger(__name__)


class MoodleProvisioner:
    """Provisions one Moodle site on the local host, step by step."""

    def __init__(
        self,
        domain: str,
        config_manager: ConfigManager,
        config: Dict[str, Any],
        runner: Optional[CommandRunner] = None,
        files: Optional[FileManager] = None,
        credentials: Optional[CredentialStore] = None,
        dry_run: bool = False,
    ):
        """
        Initialize provisioner.

        Args:
            domain: Public domain of the site
            config_manager: Configuration manager (template rendering)
            config: Effective deployment configuration
            runner: Command runner (defaults to one honouring dry_run)
            files: File manager (defaults to one honouring dry_run)
            credentials: Credentials file (defaults to the invoking user's home)
            dry_run: Log actions instead of performing them
        """
        self.domain = domain
        self.config = config
        self.dry_run = dry_run
        self.runner = runner or CommandRunner(dry_run=dry_run)
        self.files = files or FileManager(dry_run=dry_run)
        self._credentials = credentials
        self.secret_generator = SecretGenerator()
        self.secrets: Dict[str, str] = {}
        self.certificate: Optional[Dict[str, Any]] = None

        self.packages = PackageManager(self.runner)
        self.services = ServiceManager(self.runner)
        self.git = GitOperations(dry_run=dry_run)
        self.filesystem = MoodleFilesystem(self.files, config)
        self.php = PhpTuner(self.files, self.services, config)
        self.crontab = CrontabManager(self.runner)
        self.database = MariaDBManager(self.runner)
        self.site = NginxSite(config_manager, config, self.files, self.runner, self.services)
        self.letsencrypt = LetsEncryptManager(
            self.runner, config["ssl"]["email"], staging=config["ssl"]["staging"]
        )
        self.installer = MoodleInstaller(self.runner, config)
        self.backup = BackupManager(config_manager, config, self.files, self.database, self.crontab)
        self.secure_installation = SecureInstallation(self.runner)
        self.firewall = FirewallManager(self.runner, config["firewall"]["allow"])

    @property
    def credentials(self) -> CredentialStore:
        if self._credentials is None:
            self._credentials = CredentialStore(
                self.files,
                filename=self.config["credentials"]["filename"],
                dry_run=self.dry_run,
            )
        return self._credentials

    def _new_secret(self, key: str, label: str) -> str:
        secret = self.secret_generator.generate_password()
        register_secret(secret)
        self.secrets[key] = secret
        self.credentials.record(label, secret)
        return secret

    def install_packages(self) -> None:
        self.packages.update()
        self.packages.upgrade()
        self.packages.install(required_packages())

    def enable_services(self) -> None:
        self.services.enable("nginx")
        self.services.enable("mariadb")

    def fetch_source(self) -> None:
        moodle = self.config["moodle"]
        self.git.checkout_moodle(moodle["repository"], moodle["dir"], moodle["branch"])

    def set_permissions(self) -> None:
        self.filesystem.prepare_data_dir()
        self.filesystem.secure_code_dir()

    def register_moodle_cron(self) -> None:
        self.crontab.append(self.config["web"]["user"], [moodle_cron_entry(self.config)])

    def create_database(self) -> None:
        database = self.config["database"]
        password = self._new_secret("db_password", f"DB {database['user']} password")

        self.database.create_database(database["name"])
        self.database.create_user(database["user"], password, database["host"])
        self.database.grant(MOODLE_PRIVILEGES, database["name"], database["user"], database["host"])

    def configure_nginx(self) -> None:
        self.site.install(self.domain)

    def obtain_certificate(self) -> None:
        self.certificate = self.letsencrypt.obtain_certificate(self.domain)
        logger.info("Certificate for %s installed at %s", self.domain, self.certificate["cert_path"])

    def install_moodle(self) -> None:
        admin_password = self._new_secret("admin_password", "Moodle Admin Password")
        self.installer.run(self.domain, self.secrets["db_password"], admin_password)

    def setup_backups(self) -> None:
        password = self._new_secret(
            "backup_password", f"DB {self.config['backup']['user']} password"
        )
        self.backup.setup(password)

    def harden(self) -> None:
        self.secure_installation.run()
        self.firewall.apply()

    def steps(self) -> List[Step]:
        """Return the ordered provisioning steps."""
        moodle_dir = self.config["moodle"]["dir"]

        return [
            Step("packages", "Install system packages", self.install_packages),
            Step("services", "Enable nginx and MariaDB", self.enable_services),
            Step(
                "source",
                "Fetch Moodle source",
                self.fetch_source,
                skip_if=lambda: os.path.isdir(moodle_dir),
                verify=lambda: os.path.isdir(moodle_dir),
            ),
            Step("permissions", "Set code and data permissions", self.set_permissions),
            Step("php", "Tune PHP runtime", self.php.apply),
            Step("cron", "Register Moodle cron", self.register_moodle_cron),
            Step("database", "Create database and user", self.create_database),
            Step(
                "nginx",
                "Configure nginx virtual host",
                self.configure_nginx,
                verify=lambda: os.path.islink(self.site.enabled_path),
            ),
            Step("certificate", "Obtain TLS certificate", self.obtain_certificate),
            Step("moodle", "Run Moodle CLI installer", self.install_moodle),
            Step("backup", "Set up database backups", self.setup_backups),
            Step("hardening", "Harden MariaDB and firewall", self.harden),
        ]

    def check_prerequisites(self) -> None:
        """
        Validate the domain and require root for a real run.

        Raises:
            ValidationError: If the domain is invalid
            SecurityError: If not running as root outside dry-run mode
        """
        errors = ConfigValidator().validate_domain(self.domain)
        if errors:
            raise ValidationError(errors[0])

        if not self.dry_run and os.geteuid() != 0:
            raise SecurityError(
                "moodledeploy install must run as root",
                suggestions=create_error_suggestions("not_root"),
            )

    def plan(self) -> List[StepResult]:
        return StepExecutor(self.steps(), dry_run=True).plan()

    def provision(self) -> Dict[str, Any]:
        """
        Run the whole procedure.

        Returns:
            Dict[str, Any]: Step results and the credentials file path

        Raises:
            StepError: For the first failing step; earlier changes stay in place
        """
        self.check_prerequisites()
        logger.info("Provisioning Moodle for %s", self.domain)

        executor = StepExecutor(self.steps(), dry_run=self.dry_run)
        results = executor.run()

        logger.info(
            "Moodle CLI installation complete. Admin user: %s, password stored in %s.",
            self.config["moodle"]["admin_user"],
            self.credentials.path,
        )

        return {
            "success": True,
            "domain": self.domain,
            "results": results,
            "credentials_file": self.credentials.path,
            "certificate": self.certificate,
        }
