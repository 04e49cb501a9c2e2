"""Tests for the Moodle CLI installer and filesystem setup."""

import os
import stat

from moodledeploy.moodle.filesystem import MoodleFilesystem
from moodledeploy.moodle.installer import MoodleInstaller
from moodledeploy.utils.files import FileManager


class TestMoodleInstaller:
    """Test Moodle installer functionality."""

    def test_command(self, runner, default_config):
        """Test every installer option is passed."""
        cmd = MoodleInstaller(runner, default_config).command("moodle.example.com", "dbpw", "adminpw")

        assert cmd[:3] == ["php", "/var/www/html/moodle/admin/cli/install.php", "--non-interactive"]
        assert "--lang=en" in cmd
        assert "--wwwroot=https://moodle.example.com" in cmd
        assert "--dataroot=/var/www/moodledata" in cmd
        assert "--dbtype=mariadb" in cmd
        assert "--dbhost=localhost" in cmd
        assert "--dbname=moodle" in cmd
        assert "--dbuser=moodleuser" in cmd
        assert "--dbpass=dbpw" in cmd
        assert "--fullname=Moodle Dev Server" in cmd
        assert "--shortname=dev-server" in cmd
        assert "--adminuser=admin" in cmd
        assert "--adminpass=adminpw" in cmd
        assert "--adminemail=amit@justuju.in" in cmd
        assert cmd[-1] == "--agree-license"

    def test_run_as_web_user(self, runner, default_config):
        MoodleInstaller(runner, default_config).run("moodle.example.com", "dbpw", "adminpw")

        assert runner.history[0][:4] == ["sudo", "-u", "www-data", "php"]


class TestMoodleFilesystem:
    """Test Moodle directory permissions."""

    def _mode(self, path):
        return stat.S_IMODE(os.stat(path).st_mode)

    def test_prepare_data_dir(self, sandbox_config):
        """Test moodledata is private to the web server user."""
        sandbox_config["web"]["user"] = None
        filesystem = MoodleFilesystem(FileManager(), sandbox_config)

        filesystem.prepare_data_dir()

        assert self._mode(sandbox_config["moodle"]["data_dir"]) == 0o700

    def test_secure_code_dir(self, sandbox_config):
        """Test the code tree is world readable but not writable."""
        moodle_dir = sandbox_config["moodle"]["dir"]
        os.makedirs(os.path.join(moodle_dir, "admin"))
        script = os.path.join(moodle_dir, "admin", "index.php")
        with open(script, "w") as f:
            f.write("<?php\n")
        os.chmod(script, 0o666)
        sandbox_config["web"]["user"] = None

        MoodleFilesystem(FileManager(), sandbox_config).secure_code_dir()

        assert self._mode(moodle_dir) == 0o755
        assert self._mode(script) == 0o644
