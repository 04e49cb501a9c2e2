"""Tests for the nginx virtual host."""

from unittest.mock import MagicMock

import pytest

from moodledeploy.system.packages import ServiceManager
from moodledeploy.utils.errors import WebServerError
from moodledeploy.utils.files import FileManager
from moodledeploy.webserver.nginx import NginxSite


@pytest.fixture
def site(config_manager, default_config, runner):
    files = MagicMock(spec=FileManager)
    return NginxSite(config_manager, default_config, files, runner, ServiceManager(runner))


class TestNginxSite:
    """Test nginx site management."""

    def test_render(self, site):
        """Test the rendered server block."""
        content = site.render("moodle.example.com")

        assert "listen 80;" in content
        assert "listen [::]:80;" in content
        assert "server_name moodle.example.com;" in content
        assert "root /var/www/html/moodle;" in content
        assert "alias /var/www/moodledata/;" in content
        assert "fastcgi_pass unix:/run/php/php8.3-fpm.sock;" in content
        assert r"location ~ (/vendor/|/node_modules/|composer\.json|" in content
        assert "deny all;" in content

    def test_paths(self, site):
        assert site.available_path == "/etc/nginx/sites-available/moodle.conf"
        assert site.enabled_path == "/etc/nginx/sites-enabled/moodle.conf"

    def test_install(self, site, runner):
        """Test the site replaces the default site and nginx is tested then reloaded."""
        site.install("moodle.example.com")

        site.files.write_file.assert_called_once()
        path, content = site.files.write_file.call_args[0]
        assert path == "/etc/nginx/sites-available/moodle.conf"
        assert "server_name moodle.example.com;" in content
        site.files.remove.assert_called_once_with("/etc/nginx/sites-enabled/default")
        site.files.symlink.assert_called_once_with(
            "/etc/nginx/sites-available/moodle.conf", "/etc/nginx/sites-enabled/moodle.conf"
        )
        assert runner.commands() == ["nginx -t", "systemctl reload nginx"]

    def test_invalid_configuration_is_not_reloaded(self, site, runner):
        runner.failures = ["nginx -t"]

        with pytest.raises(WebServerError) as exc_info:
            site.install("moodle.example.com")

        assert exc_info.value.suggestions
        assert "systemctl reload nginx" not in runner.commands()
