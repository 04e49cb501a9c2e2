"""Pytest configuration and shared fixtures."""

import copy
import os
import subprocess
import tempfile

import pytest

from moodledeploy.config import DEFAULT_CONFIG, ConfigManager
from moodledeploy.utils.errors import CommandError
from moodledeploy.utils.shell import CommandRunner


class RecordingRunner(CommandRunner):
    """Command runner that records commands instead of executing them.

    Commands whose joined argv contains one of ``failures`` raise
    CommandError; ``outputs`` maps a joined argv prefix to stdout.
    """

    def __init__(self):
        super().__init__(dry_run=False)
        self.inputs = []
        self.failures = []
        self.outputs = {}

    def run(self, cmd, input=None, check=True, capture=True, secrets=()):
        self.history.append(list(cmd))
        self.inputs.append(input)
        joined = " ".join(cmd)

        for failure in self.failures:
            if failure in joined:
                if check:
                    raise CommandError(
                        f"Command failed with exit code 1: {joined}",
                        command=list(cmd),
                        returncode=1,
                        stderr=f"ERROR: {failure} already exists",
                    )
                return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="")

        stdout = ""
        for prefix, output in self.outputs.items():
            if joined.startswith(prefix):
                stdout = output
        return subprocess.CompletedProcess(cmd, 0, stdout=stdout, stderr="")

    def which(self, name):
        return True

    def commands(self):
        return [" ".join(cmd) for cmd in self.history]


@pytest.fixture
def temp_directory():
    """Create a temporary directory for testing."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    # Cleanup
    import shutil
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def runner():
    """Recording command runner."""
    return RecordingRunner()


@pytest.fixture
def config_manager(temp_directory):
    """Configuration manager rooted in an empty directory."""
    return ConfigManager(path=temp_directory)


@pytest.fixture
def default_config():
    """Unmodified default deployment configuration."""
    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.fixture
def sandbox_config(temp_directory):
    """Default configuration with every writable path inside a temp directory."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    config["moodle"]["dir"] = os.path.join(temp_directory, "moodle")
    config["moodle"]["data_dir"] = os.path.join(temp_directory, "moodledata")
    config["backup"]["dir"] = os.path.join(temp_directory, "backups")
    config["backup"]["client_config"] = os.path.join(temp_directory, "my.cnf")
    return config


@pytest.fixture(autouse=True)
def isolate_filesystem(temp_directory, monkeypatch):
    """Isolate filesystem operations to temporary directory."""
    monkeypatch.chdir(temp_directory)
    monkeypatch.setenv("SUDO_USER", "tester")
    return temp_directory
