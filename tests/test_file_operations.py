"""Tests for file operations."""

import os
import stat
from types import SimpleNamespace
from unittest.mock import patch

from moodledeploy.utils.files import FileManager

PHP_INI = """[PHP]
; Maximum number of input variables
;max_input_vars = 1000
post_max_size = 8M
upload_max_filesize = 2M
memory_limit = 128M
"""


def _mode(path):
    return stat.S_IMODE(os.stat(path).st_mode)


class TestFileManager:
    """Test file manager functionality."""

    def setup_method(self):
        """Setup test environment."""
        self.file_manager = FileManager()

    def test_write_file_overwrites(self, temp_directory):
        """Test that rendered files replace earlier content."""
        path = os.path.join(temp_directory, "site.conf")

        self.file_manager.write_file(path, "first\n")
        self.file_manager.write_file(path, "second\n")

        with open(path) as f:
            assert f.read() == "second\n"

    def test_write_file_exact_mode(self, temp_directory):
        """Test that the requested mode is applied exactly."""
        path = os.path.join(temp_directory, "my.cnf")

        self.file_manager.write_file(path, "[client]\n", mode=0o600)

        assert _mode(path) == 0o600

    def test_append_file(self, temp_directory):
        """Test appending keeps earlier lines."""
        path = os.path.join(temp_directory, "passwords.txt")

        self.file_manager.append_file(path, "one\n")
        self.file_manager.append_file(path, "two\n", mode=0o600)

        with open(path) as f:
            assert f.read() == "one\ntwo\n"
        assert _mode(path) == 0o600

    def test_replace_setting_lines(self, temp_directory):
        """Test commented and active settings are both rewritten."""
        path = os.path.join(temp_directory, "php.ini")
        with open(path, "w") as f:
            f.write(PHP_INI)

        replaced = self.file_manager.replace_setting_lines(
            path,
            {"max_input_vars": "5000", "post_max_size": "256M", "upload_max_filesize": "256M"},
        )

        with open(path) as f:
            content = f.read()

        assert replaced == 3
        assert "max_input_vars = 5000\n" in content
        assert ";max_input_vars" not in content
        assert "post_max_size = 256M\n" in content
        assert "upload_max_filesize = 256M\n" in content
        assert "memory_limit = 128M\n" in content

    def test_set_tree_permissions(self, temp_directory):
        """Test directories and files get their own modes."""
        root = os.path.join(temp_directory, "moodledata")
        os.makedirs(os.path.join(root, "cache"))
        with open(os.path.join(root, "cache", "item"), "w") as f:
            f.write("x")

        count = self.file_manager.set_tree_permissions(root, None, None, 0o700, 0o600)

        assert count == 3
        assert _mode(root) == 0o700
        assert _mode(os.path.join(root, "cache")) == 0o700
        assert _mode(os.path.join(root, "cache", "item")) == 0o600

    def test_symlink_replaces_existing(self, temp_directory):
        """Test enabling a site replaces a stale link."""
        target = os.path.join(temp_directory, "moodle.conf")
        other = os.path.join(temp_directory, "old.conf")
        link = os.path.join(temp_directory, "enabled.conf")
        for path in (target, other):
            open(path, "w").close()
        os.symlink(other, link)

        self.file_manager.symlink(target, link)

        assert os.readlink(link) == target

    def test_remove_missing_file(self, temp_directory):
        """Test removing a missing file is not an error."""
        assert self.file_manager.remove(os.path.join(temp_directory, "default")) is False

    def test_dry_run_writes_nothing(self, temp_directory):
        """Test dry-run mode leaves the filesystem untouched."""
        dry = FileManager(dry_run=True)
        path = os.path.join(temp_directory, "site.conf")

        dry.write_file(path, "content")
        dry.ensure_directory(os.path.join(temp_directory, "newdir"))

        assert not os.path.exists(path)
        assert not os.path.exists(os.path.join(temp_directory, "newdir"))

    def test_private_file_restricted_before_content(self, temp_directory, monkeypatch):
        """Test an existing world-readable file is locked down before the secret lands."""
        path = os.path.join(temp_directory, "my.cnf")
        with open(path, "w") as f:
            f.write("old\n")
        os.chmod(path, 0o644)

        real_fdopen = os.fdopen
        modes_at_open = []

        def recording_fdopen(fd, *args, **kwargs):
            modes_at_open.append(stat.S_IMODE(os.fstat(fd).st_mode))
            return real_fdopen(fd, *args, **kwargs)

        monkeypatch.setattr(os, "fdopen", recording_fdopen)

        self.file_manager.write_file(path, "password=secret\n", mode=0o600)
        self.file_manager.append_file(path, "host=localhost\n", mode=0o600)

        assert modes_at_open == [0o600, 0o600]
        with open(path) as f:
            assert f.read() == "password=secret\nhost=localhost\n"

    def test_owner_uses_primary_group(self, temp_directory):
        """Test ownership follows the user's primary group, whatever its name."""
        path = os.path.join(temp_directory, "moodlePasswords.txt")
        account = SimpleNamespace(pw_uid=os.getuid(), pw_gid=os.getgid())

        with patch("moodledeploy.utils.files.pwd.getpwnam", return_value=account) as mock_getpwnam:
            self.file_manager.write_file(path, "secret\n", mode=0o600, owner="nobody")

        mock_getpwnam.assert_called_once_with("nobody")
        info = os.stat(path)
        assert (info.st_uid, info.st_gid) == (os.getuid(), os.getgid())
        assert _mode(path) == 0o600
