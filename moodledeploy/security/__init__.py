"""Host hardening for moodledeploy."""

from .firewall import FirewallManager
from .hardening import SecureInstallation

__all__ = ["FirewallManager", "SecureInstallation"]
