"""SSL certificate management for moodledeploy."""

from .letsencrypt import LetsEncryptManager

__all__ = ["LetsEncryptManager"]
