"""PHP runtime configuration."""

from .tuning import PhpTuner, fpm_socket

__all__ = ["PhpTuner", "fpm_socket"]
