"""
Service manager contract — what the pipeline needs from an init system.

Variants only decide how commands are spelled and where unit files
live.  The shared behaviour here applies the operator's per-service
command overrides, which always take precedence over the variant's own
command, and turns failing commands into log lines.
"""

from __future__ import annotations

import logging
from abc import abstractmethod

from restartmonkey.adapters.base import Adapter
from restartmonkey.adapters.shell.command import Command, CommandRunner
from restartmonkey.core.models.action import Receipt
from restartmonkey.core.services.policy import Policy

logger = logging.getLogger(__name__)


class ServiceManager(Adapter):
    """Abstract init system: enumerate, restart, start and query services."""

    def __init__(self, runner: CommandRunner, policy: Policy):
        super().__init__(runner)
        self._policy = policy
        self._services: list[str] | None = None

    # ── Variant contract ─────────────────────────────────────────

    @abstractmethod
    def restart_command(self, name: str) -> Command:
        """Default command restarting ``name``."""

    @abstractmethod
    def start_command(self, name: str) -> Command:
        """Default command starting ``name``."""

    @abstractmethod
    def status_command(self, name: str) -> Command:
        """Default command exiting 0 iff ``name`` is running."""

    @abstractmethod
    def unit_search_paths(self) -> list[str]:
        """Directories holding unit files or init scripts, with trailing slash."""

    @abstractmethod
    def _find_services(self) -> list[str]:
        """Enumerate service names known to the init system."""

    def unit_suffix(self) -> str:
        return ""

    def sanitize_name(self, name: str) -> str:
        return name

    def expand(self, name: str) -> list[str]:
        return [name]

    # ── Shared behaviour ─────────────────────────────────────────

    def list_services(self) -> list[str]:
        """Known services, enumerated once per run and sorted."""
        if self._services is None:
            self._services = sorted(set(self._find_services()))
            logger.debug("Found %d services", len(self._services))
        return list(self._services)

    def restart(self, name: str) -> Receipt:
        command = self._policy.restart_cmd(name) or self.restart_command(name)
        receipt = self.runner.run(command)
        if receipt.failed:
            logger.error("Failed to restart '%s': %s", name, receipt.error)
        return receipt

    def start(self, name: str) -> Receipt:
        receipt = self.runner.run(self.start_command(name))
        if receipt.failed:
            logger.error("Failed to start '%s': %s", name, receipt.error)
        return receipt

    def is_active(self, name: str) -> bool:
        command = self._policy.status_cmd(name) or self.status_command(name)
        return self.runner.query(command).ok

    def expand_all(self, names: list[str]) -> list[str]:
        expanded: list[str] = []
        for name in names:
            for concrete in self.expand(name):
                if concrete not in expanded:
                    expanded.append(concrete)
        return expanded

    def owns_unit_file(self, path: str) -> bool:
        """Whether ``path`` is a unit file / init script of this init system."""
        suffix = self.unit_suffix()
        return path.endswith(suffix) and any(
            path.startswith(p) for p in self.unit_search_paths()
        )

    def unit_name(self, path: str) -> str:
        """Service name of a unit file path."""
        base = path.rstrip("/").rsplit("/", 1)[-1]
        suffix = self.unit_suffix()
        if suffix and base.endswith(suffix):
            base = base[: -len(suffix)]
        return base
