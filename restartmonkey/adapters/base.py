"""
Adapter base — the contract every host-facing variant implements.

restartmonkey talks to two families of host tooling, each with
interchangeable variants picked once at startup by probing the host:

    - init systems:      systemd, sysvinit         (adapters/init/)
    - package databases: rpm, dpkg                 (adapters/packages/)

Adapters perform external calls through a CommandRunner and return
plain values or Receipts.  They NEVER raise for a failing command.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from restartmonkey.adapters.shell.command import CommandRunner


class Adapter(ABC):
    """Abstract base class for all adapters."""

    def __init__(self, runner: CommandRunner):
        self._runner = runner

    @property
    def runner(self) -> CommandRunner:
        return self._runner

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'systemd', 'rpm')."""

    @classmethod
    @abstractmethod
    def is_available(cls) -> bool:
        """Check whether this variant applies to the current host.

        Should be fast and never raise.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
