"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from fakes import FakeProc
from restartmonkey.adapters.init.systemd import SystemdServiceManager
from restartmonkey.adapters.mock import MockCommandRunner
from restartmonkey.adapters.packages.rpm import RPMPackageBackend
from restartmonkey.core.config.loader import merge_defaults
from restartmonkey.core.models.policy import PolicyConfig
from restartmonkey.core.services.policy import Policy

CENTOS7 = ["CentOS.7", "CentOS", "default"]


@pytest.fixture
def fake_proc(tmp_path: Path) -> FakeProc:
    return FakeProc(tmp_path / "proc")


@pytest.fixture
def libdir(tmp_path: Path) -> Path:
    """A directory holding the 'installed' libraries."""
    path = tmp_path / "usr" / "lib64"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def policy() -> Policy:
    """Built-in defaults on CentOS 7, whitelisting a few services."""
    config = merge_defaults(PolicyConfig(whitelist=["nginx", "sshd", "network", "crond"]))
    return Policy(config, CENTOS7)


@pytest.fixture
def runner() -> MockCommandRunner:
    return MockCommandRunner()


@pytest.fixture
def systemd(runner: MockCommandRunner, policy: Policy) -> SystemdServiceManager:
    return SystemdServiceManager(runner, policy)


@pytest.fixture
def rpm(runner: MockCommandRunner) -> RPMPackageBackend:
    return RPMPackageBackend(runner)


@pytest.fixture(autouse=True)
def _restore_logging():
    """The CLI reconfigures the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.raiseExceptions = True
