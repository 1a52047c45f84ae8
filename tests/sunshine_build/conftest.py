import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from sunshine_build.config import ConfigLoader
from sunshine_build.platform import Platform
from sunshine_build.utils import InstallRegistry, Logger


class RecordingToolchain:
    """Toolchain stub that records every call and returns canned statuses."""

    def __init__(self, statuses=None):
        self.calls = []
        self.statuses = dict(statuses or {})

    def run(self, step, args, env=None, cwd=None):
        self.calls.append((step, list(args), dict(env or {}), cwd))
        return self.statuses.get(step, 0)

    @property
    def steps(self):
        return [call[0] for call in self.calls]


class FakeLibraries:
    """Library registry backed by a set of names."""

    def __init__(self, installed=()):
        self.installed = set(installed)
        self.queries = []

    def is_installed(self, name):
        self.queries.append(name)
        return name in self.installed


@pytest.fixture(scope="session")
def config():
    return ConfigLoader()


@pytest.fixture
def linux():
    return Platform(system="linux", arch="x86_64")


@pytest.fixture
def macos_intel():
    return Platform(system="macos", arch="x86_64")


@pytest.fixture
def macos_arm():
    return Platform(system="macos", arch="arm64")


@pytest.fixture
def logger():
    return Logger(verbose=True)


@pytest.fixture
def toolchain():
    return RecordingToolchain()


@pytest.fixture
def libraries():
    return FakeLibraries()


@pytest.fixture
def registry(tmp_path):
    return InstallRegistry(tmp_path / "state")
