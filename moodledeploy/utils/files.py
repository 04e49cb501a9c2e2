"""File operations utilities for moodledeploy."""

import logging
import os
import pwd
import re
import shutil
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class FileManager:
    """Manages file operations on the provisioned host."""

    def __init__(self, dry_run: bool = False):
        """Initialize file manager."""
        self.dry_run = dry_run

    def write_file(
        self,
        path: str,
        content: str,
        mode: Optional[int] = None,
        owner: Optional[str] = None,
    ) -> str:
        """
        Write a file, replacing any previous content.

        The mode and owner are applied before any content is written.

        Args:
            path: Destination path
            content: File content
            mode: Exact permission bits to apply (e.g. 0o600)
            owner: Optional owning user (group set to the user's primary group)

        Returns:
            str: Path to the written file
        """
        if self.dry_run:
            logger.info("DRY RUN: would write %s", path)
            return path

        with self._open(path, os.O_TRUNC, mode, owner) as f:
            f.write(content)

        logger.debug("Wrote %s", path)
        return path

    def append_file(
        self,
        path: str,
        content: str,
        mode: Optional[int] = None,
        owner: Optional[str] = None,
    ) -> str:
        """Append content to a file, creating it if needed."""
        if self.dry_run:
            logger.info("DRY RUN: would append to %s", path)
            return path

        with self._open(path, os.O_APPEND, mode, owner) as f:
            f.write(content)

        return path

    def _open(self, path: str, flags: int, mode: Optional[int], owner: Optional[str]):
        create_mode = mode if mode is not None else 0o666
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | flags, create_mode)
        try:
            # An existing file keeps its old mode through O_CREAT
            if mode is not None:
                os.fchmod(fd, mode)
            if owner:
                account = pwd.getpwnam(owner)
                os.fchown(fd, account.pw_uid, account.pw_gid)
        except Exception:
            os.close(fd)
            raise
        return os.fdopen(fd, "w", encoding="utf-8")

    def ensure_directory(self, path: str, mode: Optional[int] = None) -> str:
        """Create a directory (and parents) if it does not exist."""
        if self.dry_run:
            logger.info("DRY RUN: would create directory %s", path)
            return path

        os.makedirs(path, exist_ok=True)
        if mode is not None:
            os.chmod(path, mode)
        return path

    def set_tree_permissions(
        self,
        root: str,
        owner: Optional[str],
        group: Optional[str],
        dir_mode: int,
        file_mode: int,
    ) -> int:
        """
        Recursively set ownership and permissions below a directory.

        Args:
            root: Directory to walk (included)
            owner: Owning user, or None to leave ownership alone
            group: Owning group
            dir_mode: Mode applied to every directory
            file_mode: Mode applied to every regular file

        Returns:
            int: Number of paths updated
        """
        if self.dry_run:
            logger.info(
                "DRY RUN: would chown -R %s:%s %s and chmod %o/%o",
                owner, group, root, dir_mode, file_mode,
            )
            return 0

        count = 0
        for current, dirs, filenames in os.walk(root):
            paths = [(current, dir_mode)]
            paths.extend((os.path.join(current, name), file_mode) for name in filenames)
            for path, mode in paths:
                if os.path.islink(path):
                    continue
                if owner:
                    shutil.chown(path, user=owner, group=group or owner)
                os.chmod(path, mode)
                count += 1

        logger.debug("Updated permissions on %d paths under %s", count, root)
        return count

    def replace_setting_lines(self, path: str, settings: Dict[str, str]) -> int:
        """
        Rewrite ini-style setting lines in place.

        Every line mentioning ``key =`` (commented out or not) is replaced
        with ``key = value``.

        Args:
            path: File to edit
            settings: Mapping of setting name to value

        Returns:
            int: Number of lines replaced
        """
        if self.dry_run:
            logger.info("DRY RUN: would set %s in %s", ", ".join(settings), path)
            return 0

        with open(path, encoding="utf-8") as f:
            lines = f.read().split("\n")

        replaced = 0
        for key, value in settings.items():
            pattern = re.compile(rf".*{re.escape(key)} =.*")
            for index, line in enumerate(lines):
                if pattern.fullmatch(line):
                    lines[index] = f"{key} = {value}"
                    replaced += 1

        with open(path, "w", encoding="utf-8") as f:
            f.write("\n".join(lines))

        logger.debug("Replaced %d setting lines in %s", replaced, path)
        return replaced

    def symlink(self, target: str, link: str) -> None:
        """Point link at target, replacing any existing link or file."""
        if self.dry_run:
            logger.info("DRY RUN: would link %s -> %s", link, target)
            return

        if os.path.lexists(link):
            os.remove(link)
        os.symlink(target, link)

    def remove(self, path: str) -> bool:
        """Remove a file if present; returns whether something was removed."""
        if self.dry_run:
            logger.info("DRY RUN: would remove %s", path)
            return False

        if os.path.lexists(path):
            os.remove(path)
            return True
        return False
