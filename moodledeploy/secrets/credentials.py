"""Plaintext credentials file kept in the invoking user's home directory."""

import getpass
import logging
import os
import pwd
import subprocess
from typing import Optional

import click

from ..utils.files import FileManager

logger = logging.getLogger(__name__)

CREDENTIALS_MODE = 0o600
DRY_RUN_PLACEHOLDER = "<generated during install>"


def invoking_user() -> str:
    """
    Return the login behind this run.

    Prefers SUDO_USER, then logname, then the effective user.
    """
    sudo_user = os.environ.get("SUDO_USER")
    if sudo_user:
        return sudo_user

    try:
        result = subprocess.run(["logname"], capture_output=True, text=True)
        if result.returncode == 0 and result.stdout.strip():
            return result.stdout.strip()
    except FileNotFoundError:
        pass

    return getpass.getuser()


def home_directory(user: str) -> str:
    try:
        return pwd.getpwnam(user).pw_dir
    except KeyError:
        return f"/home/{user}"


class CredentialStore:
    """Records generated passwords in a file owned by the invoking user."""

    def __init__(
        self,
        files: FileManager,
        path: Optional[str] = None,
        owner: Optional[str] = None,
        filename: str = "moodlePasswords.txt",
        dry_run: bool = False,
    ):
        """
        Initialize credential store.

        Args:
            files: File manager used for writes
            path: Explicit credentials file path
            owner: Owner of the file (defaults to the invoking user)
            filename: File name inside the owner's home directory
            dry_run: Show a placeholder instead of the secret
        """
        self.files = files
        self.owner = owner or invoking_user()
        self.path = path or os.path.join(home_directory(self.owner), filename)
        self.dry_run = dry_run
        self._started = False

    def record(self, label: str, secret: str) -> None:
        """
        Store one credential and echo it to the operator.

        The first record of a run replaces any earlier file; later
        records append to it.

        Args:
            label: Human readable label, e.g. "Moodle Admin Password"
            secret: Secret value
        """
        line = f"{label}: {secret}\n"
        owner = self.owner if os.geteuid() == 0 else None

        if self._started:
            self.files.append_file(self.path, line, mode=CREDENTIALS_MODE, owner=owner)
        else:
            self.files.write_file(self.path, line, mode=CREDENTIALS_MODE, owner=owner)
            self._started = True

        if self.dry_run:
            click.echo(f"{label}: {DRY_RUN_PLACEHOLDER}")
        else:
            click.echo(line, nl=False)
        logger.debug("Recorded '%s' in %s", label, self.path)
