"""Logging configuration for moodledeploy."""

import logging
import sys
from typing import Optional, Set

from .shell import MASK


class SecretMaskingFilter(logging.Filter):
    """Replaces registered secrets in log records before they are emitted."""

    def __init__(self):
        super().__init__()
        self.secrets: Set[str] = set()

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.secrets:
            return True

        message = record.getMessage()
        masked = message
        for secret in self.secrets:
            masked = masked.replace(secret, MASK)

        if masked != message:
            record.msg = masked
            record.args = None
        return True


_secret_filter = SecretMaskingFilter()


def register_secret(secret: str) -> None:
    """Mask a generated secret in every log line from now on."""
    if secret:
        _secret_filter.secrets.add(secret)


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """
    Setup logging configuration for the CLI.

    Generated passwords never reach the console or the log file; both
    handlers mask anything passed to register_secret().

    Args:
        verbose: Enable verbose/debug logging
        log_file: Optional log file path
    """
    level = logging.DEBUG if verbose else logging.INFO

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(_secret_filter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(_secret_filter)
        root_logger.addHandler(file_handler)

    logging.getLogger("git").setLevel(logging.WARNING)
