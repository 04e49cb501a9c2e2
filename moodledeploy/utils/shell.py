"""External command execution for moodledeploy."""

import logging
import shlex
import shutil
import subprocess
from typing import Iterable, List, Optional

from .errors import CommandError

logger = logging.getLogger(__name__)

MASK = "********"


class CommandRunner:
    """Runs external administrative tools, failing fast on errors."""

    def __init__(self, dry_run: bool = False):
        """
        Initialize command runner.

        Args:
            dry_run: Log and record commands without executing them
        """
        self.dry_run = dry_run
        self.history: List[List[str]] = []

    @staticmethod
    def mask(text: str, secrets: Iterable[str] = ()) -> str:
        """Replace every secret value in text with a fixed mask."""
        for secret in secrets:
            if secret:
                text = text.replace(secret, MASK)
        return text

    def format_command(self, cmd: List[str], secrets: Iterable[str] = ()) -> str:
        """Format an argv list for logs with secrets masked."""
        return self.mask(" ".join(shlex.quote(part) for part in cmd), secrets)

    def run(
        self,
        cmd: List[str],
        input: Optional[str] = None,
        check: bool = True,
        capture: bool = True,
        secrets: Iterable[str] = (),
    ) -> subprocess.CompletedProcess:
        """
        Run a single command.

        Args:
            cmd: Command argv
            input: Optional text fed to the command's stdin
            check: Raise CommandError on a nonzero exit status
            capture: Capture stdout/stderr instead of inheriting them
            secrets: Values to mask in logs and error messages

        Returns:
            subprocess.CompletedProcess: Result of the command

        Raises:
            CommandError: If the command cannot be started or fails
        """
        secrets = tuple(secrets)
        display = self.format_command(cmd, secrets)
        self.history.append(list(cmd))

        if self.dry_run:
            logger.info("DRY RUN: %s", display)
            return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

        logger.debug("Running: %s", display)

        try:
            result = subprocess.run(cmd, input=input, capture_output=capture, text=True)
        except FileNotFoundError:
            raise CommandError(
                f"Command not found: {cmd[0]}",
                command=cmd,
                suggestions=[f"Install the package that provides '{cmd[0]}'"],
            )

        if check and result.returncode != 0:
            stderr = self.mask(result.stderr or "", secrets)
            raise CommandError(
                f"Command failed with exit code {result.returncode}: {display}",
                command=cmd,
                returncode=result.returncode,
                stderr=stderr,
            )

        return result

    def run_as(self, user: str, cmd: List[str], **kwargs) -> subprocess.CompletedProcess:
        """Run a command as another user through sudo."""
        return self.run(["sudo", "-u", user] + list(cmd), **kwargs)

    def which(self, name: str) -> bool:
        """Check whether an executable is available on PATH."""
        return shutil.which(name) is not None
