"""
Package backend contract — "who owns this file" and "what does it ship".

The guesser uses the native package database as its most precise
signal: the package owning an affected executable usually also ships
the unit file or init script of the service running it.
"""

from __future__ import annotations

import logging
from abc import abstractmethod

from restartmonkey.adapters.base import Adapter
from restartmonkey.adapters.shell.command import Command

logger = logging.getLogger(__name__)


class PackageBackend(Adapter):
    """Abstract package database."""

    @abstractmethod
    def owner_command(self, path: str) -> Command:
        """Command printing the package that owns ``path``."""

    @abstractmethod
    def files_command(self, package: str) -> Command:
        """Command listing the files of ``package``, one per line."""

    def parse_owner(self, output: str) -> str | None:
        line = output.strip().splitlines()[0] if output.strip() else ""
        return line.strip() or None

    def owner(self, path: str) -> str | None:
        """The package owning ``path``, or None if unowned."""
        receipt = self.runner.query(self.owner_command(path))
        if not receipt.ok:
            logger.debug("Could not find package for %s", path)
            return None
        return self.parse_owner(receipt.output)

    def files(self, package: str) -> list[str]:
        """Files shipped by ``package``; empty on failure."""
        receipt = self.runner.query(self.files_command(package))
        if not receipt.ok:
            logger.debug("Could not list files of package %s: %s", package, receipt.error)
            return []
        return [line.strip() for line in receipt.output.splitlines() if line.strip()]
