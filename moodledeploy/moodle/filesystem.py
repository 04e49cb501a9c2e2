"""Ownership and permissions for the Moodle code and data directories."""

import logging
from typing import Any, Dict

from ..utils.files import FileManager

logger = logging.getLogger(__name__)

DATA_DIR_MODE = 0o700
DATA_FILE_MODE = 0o600
CODE_DIR_MODE = 0o755
CODE_FILE_MODE = 0o644


class MoodleFilesystem:
    """Applies the web server's ownership to Moodle's directories."""

    def __init__(self, files: FileManager, config: Dict[str, Any]):
        self.files = files
        self.web_user = config["web"]["user"]
        self.moodle_dir = config["moodle"]["dir"]
        self.data_dir = config["moodle"]["data_dir"]

    def prepare_data_dir(self) -> None:
        """Create moodledata and restrict it to the web server user."""
        self.files.ensure_directory(self.data_dir)
        self.files.set_tree_permissions(
            self.data_dir, self.web_user, self.web_user, DATA_DIR_MODE, DATA_FILE_MODE
        )
        logger.info("Prepared data directory %s", self.data_dir)

    def secure_code_dir(self) -> None:
        """Hand the code tree to the web server user, read-only for others."""
        self.files.set_tree_permissions(
            self.moodle_dir, self.web_user, self.web_user, CODE_DIR_MODE, CODE_FILE_MODE
        )
        logger.info("Set permissions on %s", self.moodle_dir)
