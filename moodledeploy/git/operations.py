"""Git operations for fetching the Moodle source tree."""

import logging
import os
import shutil

import git
from git.exc import GitCommandError

from ..utils.errors import GitError

logger = logging.getLogger(__name__)


class GitOperations:
    """Handles the Moodle source checkout."""

    def __init__(self, dry_run: bool = False):
        """
        Initialize Git operations.

        Args:
            dry_run: Log the checkout without touching the filesystem
        """
        self.dry_run = dry_run

    def checkout_moodle(self, url: str, local_path: str, branch: str) -> bool:
        """
        Clone Moodle and check out a stable branch, unless already present.

        Args:
            url: Repository URL to clone
            local_path: Target directory
            branch: Remote branch to check out (detached at origin/<branch>)

        Returns:
            bool: True if the repository was cloned, False if the clone was skipped

        Raises:
            GitError: If cloning or checkout fails
        """
        if os.path.isdir(local_path):
            logger.info("Moodle directory already exists at %s, skipping clone.", local_path)
            return False

        if self.dry_run:
            logger.info("DRY RUN: would clone %s to %s at origin/%s", url, local_path, branch)
            return True

        logger.info("Cloning %s to %s", url, local_path)

        try:
            repo = git.Repo.clone_from(url, to_path=local_path)
            repo.git.checkout(f"origin/{branch}")

            with repo.config_writer() as config:
                config.set_value("pull", "ff", "only")

        except GitCommandError as e:
            error_msg = f"Failed to clone repository {url}: {e}"
            if "did not match any" in str(e) or "unknown revision" in str(e):
                error_msg += f"\nBranch '{branch}' does not exist in the repository"

            self._remove_partial_clone(local_path)
            raise GitError(error_msg, suggestions=["Check network access to the repository host"]) from e

        except Exception as e:
            self._remove_partial_clone(local_path)
            raise GitError(f"Unexpected error cloning repository: {e}") from e

        logger.info("Checked out origin/%s in %s", branch, local_path)
        return True

    def _remove_partial_clone(self, local_path: str) -> None:
        if os.path.exists(local_path):
            shutil.rmtree(local_path, ignore_errors=True)
