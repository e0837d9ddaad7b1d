"""
Adapter registry — pick the init system and package backend for this host.

Selection happens once at startup.  Candidates are probed in priority
order; the first available variant wins.  A host with no supported
variant is a fatal environment error raised before anything runs.
"""

from __future__ import annotations

import logging

from restartmonkey.adapters.init.base import ServiceManager
from restartmonkey.adapters.init.systemd import SystemdServiceManager
from restartmonkey.adapters.init.sysvinit import SysVInitServiceManager
from restartmonkey.adapters.packages.base import PackageBackend
from restartmonkey.adapters.packages.dpkg import DPKGPackageBackend
from restartmonkey.adapters.packages.rpm import RPMPackageBackend
from restartmonkey.adapters.shell.command import CommandRunner
from restartmonkey.core.errors import UnsupportedHostError
from restartmonkey.core.services.policy import Policy

logger = logging.getLogger(__name__)

SERVICE_MANAGERS: tuple[type[ServiceManager], ...] = (
    SystemdServiceManager,
    SysVInitServiceManager,
)

PACKAGE_BACKENDS: tuple[type[PackageBackend], ...] = (
    RPMPackageBackend,
    DPKGPackageBackend,
)


def select_service_manager(
    runner: CommandRunner,
    policy: Policy,
    candidates: tuple[type[ServiceManager], ...] = SERVICE_MANAGERS,
) -> ServiceManager:
    """Instantiate the first service manager available on this host.

    Raises:
        UnsupportedHostError: If no candidate applies.
    """
    for cls in candidates:
        if cls.is_available():
            manager = cls(runner, policy)
            logger.debug("Using service manager: %s", manager.name)
            return manager
    raise UnsupportedHostError("Can't detect a supported init system (systemd or sysvinit)")


def select_package_backend(
    runner: CommandRunner,
    candidates: tuple[type[PackageBackend], ...] = PACKAGE_BACKENDS,
) -> PackageBackend:
    """Instantiate the first package backend available on this host.

    Raises:
        UnsupportedHostError: If no candidate applies.
    """
    for cls in candidates:
        if cls.is_available():
            backend = cls(runner)
            logger.debug("Using package backend: %s", backend.name)
            return backend
    raise UnsupportedHostError("Can't detect the right service guesser (no rpm or dpkg)")
