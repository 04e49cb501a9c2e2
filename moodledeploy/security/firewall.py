"""ufw firewall rules for the Moodle host."""

import logging
from typing import List

from ..utils.errors import CommandError, FirewallError
from ..utils.shell import CommandRunner

logger = logging.getLogger(__name__)


class FirewallManager:
    """Applies a default-deny inbound policy with a fixed allow list."""

    def __init__(self, runner: CommandRunner, allow: List[str]):
        """
        Initialize firewall manager.

        Args:
            runner: Command runner
            allow: ufw ports or application profiles to allow inbound
        """
        self.runner = runner
        self.allow = list(allow)

    def rules(self) -> List[List[str]]:
        """Return the ufw commands, in order, that build the rule set."""
        rules = [
            ["ufw", "default", "deny", "incoming"],
            ["ufw", "default", "allow", "outgoing"],
        ]
        rules.extend(["ufw", "allow", rule] for rule in self.allow)
        return rules

    def apply(self) -> List[List[str]]:
        """
        Apply the rules and enable ufw.

        Returns:
            List[List[str]]: Commands that were run

        Raises:
            FirewallError: If any ufw command fails
        """
        commands = self.rules() + [["ufw", "--force", "enable"]]

        try:
            for command in commands:
                self.runner.run(command)
        except CommandError as e:
            raise FirewallError("Failed to configure ufw", details=e.details or e.message) from e

        logger.info("Firewall enabled; allowed inbound: %s", ", ".join(self.allow))
        return commands
