"""Tests for MariaDB hardening and the firewall."""

import pytest

from moodledeploy.security.firewall import FirewallManager
from moodledeploy.security.hardening import SecureInstallation
from moodledeploy.utils.errors import FirewallError, SecurityError


class TestFirewallManager:
    """Test firewall configuration."""

    def test_apply(self, runner, default_config):
        """Test the default policy, allow list and enable run in order."""
        FirewallManager(runner, default_config["firewall"]["allow"]).apply()

        assert runner.commands() == [
            "ufw default deny incoming",
            "ufw default allow outgoing",
            "ufw allow 22/tcp",
            "ufw allow Nginx HTTP",
            "ufw allow Nginx Full",
            "ufw --force enable",
        ]

    def test_profiles_are_single_arguments(self, runner):
        """Test application profiles with spaces stay one argument."""
        rules = FirewallManager(runner, ["Nginx Full"]).rules()

        assert rules[-1] == ["ufw", "allow", "Nginx Full"]

    def test_failure_stops_before_enable(self, runner):
        runner.failures = ["ufw allow 22/tcp"]

        with pytest.raises(FirewallError):
            FirewallManager(runner, ["22/tcp"]).apply()

        assert "ufw --force enable" not in runner.commands()


class TestSecureInstallation:
    """Test the scripted mysql_secure_installation run."""

    def test_script_answers(self, runner):
        script = SecureInstallation(runner).script()

        assert "spawn mysql_secure_installation" in script
        assert '"Enter current password for root" { send "\\r"; exp_continue }' in script
        assert '"Switch to unix_socket authentication" { send "n\\r"; exp_continue }' in script
        assert '"Remove anonymous users" { send "Y\\r"; exp_continue }' in script
        assert '"Disallow root login remotely" { send "Y\\r"; exp_continue }' in script
        assert '"Remove test database and access to it" { send "Y\\r"; exp_continue }' in script
        assert '"Reload privilege tables now" { send "Y\\r"; exp_continue }' in script
        assert script.rstrip().endswith("exit [lindex $result 3]")

    def test_timeout(self, runner):
        assert "set timeout 5" in SecureInstallation(runner, timeout=5).script()

    def test_run(self, runner):
        installation = SecureInstallation(runner)

        installation.run()

        assert runner.history == [["expect", "-c", installation.script()]]

    def test_run_failure(self, runner):
        runner.failures = ["mysql_secure_installation"]

        with pytest.raises(SecurityError):
            SecureInstallation(runner).run()
