"""Tests for configuration management."""

import os

import pytest
import yaml

from moodledeploy.config.manager import ConfigManager, deep_merge
from moodledeploy.config.validator import ConfigValidationError, ConfigValidator


class TestConfigManager:
    """Test configuration manager functionality."""

    def test_load_defaults_without_file(self, config_manager):
        """Test that defaults reproduce the standard deployment."""
        config = config_manager.load_config()

        assert config["moodle"]["dir"] == "/var/www/html/moodle"
        assert config["moodle"]["data_dir"] == "/var/www/moodledata"
        assert config["moodle"]["branch"] == "MOODLE_500_STABLE"
        assert config["php"]["version"] == "8.3"
        assert config["web"]["user"] == "www-data"
        assert config["database"]["name"] == "moodle"
        assert config["database"]["user"] == "moodleuser"
        assert config["backup"]["client_config"] == "/root/.my.cnf"

    def test_local_config_file_overrides_defaults(self, temp_directory):
        """Test moodledeploy.yml in the working directory is merged."""
        with open(os.path.join(temp_directory, "moodledeploy.yml"), "w") as f:
            yaml.safe_dump({"php": {"version": "8.2"}, "backup": {"retention_days": 14}}, f)

        config = ConfigManager(path=temp_directory).load_config()

        assert config["php"]["version"] == "8.2"
        assert config["php"]["settings"]["max_input_vars"] == "5000"
        assert config["backup"]["retention_days"] == 14
        assert config["backup"]["user"] == "backupuser"

    def test_explicit_config_file(self, temp_directory, config_manager):
        """Test loading an explicit configuration file."""
        path = os.path.join(temp_directory, "site.yml")
        with open(path, "w") as f:
            yaml.safe_dump({"ssl": {"email": "certs@example.org", "staging": True}}, f)

        config = config_manager.load_config(path)

        assert config["ssl"]["email"] == "certs@example.org"
        assert config["ssl"]["staging"] is True

    def test_missing_explicit_file(self, config_manager):
        """Test that a missing explicit file is reported."""
        with pytest.raises(FileNotFoundError):
            config_manager.load_config("/nonexistent/site.yml")

    def test_invalid_yaml(self, temp_directory, config_manager):
        """Test invalid YAML raises a validation error."""
        path = os.path.join(temp_directory, "broken.yml")
        with open(path, "w") as f:
            f.write("php: [unclosed\n")

        with pytest.raises(ConfigValidationError) as exc_info:
            config_manager.load_config(path)

        assert "Invalid YAML" in str(exc_info.value)

    def test_schema_violation(self, temp_directory, config_manager):
        """Test values of the wrong shape are rejected."""
        path = os.path.join(temp_directory, "bad.yml")
        with open(path, "w") as f:
            yaml.safe_dump({"php": {"version": "eight"}}, f)

        with pytest.raises(ConfigValidationError) as exc_info:
            config_manager.load_config(path)

        assert "php.version" in str(exc_info.value)

    def test_unknown_section_rejected(self, temp_directory, config_manager):
        """Test unknown top-level keys are rejected."""
        path = os.path.join(temp_directory, "extra.yml")
        with open(path, "w") as f:
            yaml.safe_dump({"apache": {"enabled": True}}, f)

        with pytest.raises(ConfigValidationError):
            config_manager.load_config(path)

    def test_dump_config_round_trips_sections(self, config_manager):
        """Test configuration is dumped as readable YAML."""
        dumped = config_manager.dump_config(config_manager.load_config())

        assert "moodle:" in dumped
        assert "MOODLE_500_STABLE" in dumped

    def test_deep_merge_replaces_lists(self):
        """Test lists are replaced rather than extended."""
        merged = deep_merge({"firewall": {"allow": ["22/tcp", "Nginx Full"]}}, {"firewall": {"allow": ["2222/tcp"]}})

        assert merged["firewall"]["allow"] == ["2222/tcp"]


class TestConfigValidator:
    """Test configuration validator."""

    def setup_method(self):
        """Setup test environment."""
        self.validator = ConfigValidator()

    def test_default_config_is_valid(self, default_config):
        """Test the built-in defaults validate cleanly."""
        assert self.validator.validate_deploy_config(default_config) == []

    @pytest.mark.parametrize("domain", ["moodle.example.com", "lms.school-district.edu", "a.io", "localhost", "moodle"])
    def test_valid_domains(self, domain):
        """Test domains and single-label hosts are accepted."""
        assert self.validator.validate_domain(domain) == []

    @pytest.mark.parametrize("domain", ["", "-bad.example.com", "exa mple.com", "example.com;rm", "moodle..example.com"])
    def test_invalid_domains(self, domain):
        """Test malformed domains are rejected."""
        assert self.validator.validate_domain(domain) != []

    def test_invalid_admin_email(self, default_config):
        """Test a malformed admin e-mail is reported."""
        default_config["moodle"]["admin_email"] = "not-an-email"

        errors = self.validator.validate_deploy_config(default_config)

        assert any("e-mail" in error for error in errors)

    def test_invalid_repository_url(self, default_config):
        """Test repository URLs must be git URLs."""
        default_config["moodle"]["repository"] = "ftp://example.com/moodle"

        errors = self.validator.validate_deploy_config(default_config)

        assert any("repository URL" in error for error in errors)
