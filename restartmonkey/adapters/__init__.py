"""Adapters — bindings for the host's init system and package database.

Public re-exports for convenient access.
"""

from restartmonkey.adapters.base import Adapter
from restartmonkey.adapters.init.base import ServiceManager
from restartmonkey.adapters.mock import MockCommandRunner
from restartmonkey.adapters.packages.base import PackageBackend
from restartmonkey.adapters.registry import select_package_backend, select_service_manager
from restartmonkey.adapters.shell.command import CommandRunner

__all__ = [
    "Adapter",
    "CommandRunner",
    "MockCommandRunner",
    "PackageBackend",
    "ServiceManager",
    "select_package_backend",
    "select_service_manager",
]
