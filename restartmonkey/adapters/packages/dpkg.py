"""DPKG package backend (Debian, Ubuntu …)."""

from __future__ import annotations

from pathlib import Path

from restartmonkey.adapters.packages.base import PackageBackend
from restartmonkey.adapters.shell.command import Command

RELEASE_FILE = Path("/etc/debian_version")


class DPKGPackageBackend(PackageBackend):

    @property
    def name(self) -> str:
        return "dpkg"

    @classmethod
    def is_available(cls) -> bool:
        return RELEASE_FILE.is_file()

    def owner_command(self, path: str) -> Command:
        return ["dpkg", "-S", path]

    def files_command(self, package: str) -> Command:
        return ["dpkg", "-L", package]

    def parse_owner(self, output: str) -> str | None:
        # "openssh-server: /usr/sbin/sshd"; multi-arch adds ":amd64"
        owner = super().parse_owner(output)
        if owner is None:
            return None
        return owner.split(":", 1)[0].strip() or None
