"""RPM package backend (RHEL, CentOS, Fedora …)."""

from __future__ import annotations

from pathlib import Path

from restartmonkey.adapters.packages.base import PackageBackend
from restartmonkey.adapters.shell.command import Command

RELEASE_FILE = Path("/etc/redhat-release")


class RPMPackageBackend(PackageBackend):

    @property
    def name(self) -> str:
        return "rpm"

    @classmethod
    def is_available(cls) -> bool:
        return RELEASE_FILE.is_file()

    def owner_command(self, path: str) -> Command:
        return ["rpm", "-qf", path]

    def files_command(self, package: str) -> Command:
        return ["rpm", "-ql", package]
