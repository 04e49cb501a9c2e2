"""Web server configuration for moodledeploy."""

from .nginx import NginxSite

__all__ = ["NginxSite"]
