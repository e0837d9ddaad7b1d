"""
SysV init service manager.

Every script in the init directory is a known service; control commands
call the script directly.  There are no template units.
"""

from __future__ import annotations

from pathlib import Path

from restartmonkey.adapters.init.base import ServiceManager
from restartmonkey.adapters.shell.command import Command, CommandRunner
from restartmonkey.core.services.policy import Policy

INIT_DIR = Path("/etc/init.d")


class SysVInitServiceManager(ServiceManager):
    """Service manager backed by /etc/init.d scripts."""

    def __init__(self, runner: CommandRunner, policy: Policy, init_dir: Path = INIT_DIR):
        super().__init__(runner, policy)
        self._init_dir = init_dir

    @property
    def name(self) -> str:
        return "sysvinit"

    @classmethod
    def is_available(cls) -> bool:
        return INIT_DIR.is_dir()

    def restart_command(self, name: str) -> Command:
        return [str(self._init_dir / name), "restart"]

    def start_command(self, name: str) -> Command:
        return [str(self._init_dir / name), "start"]

    def status_command(self, name: str) -> Command:
        return [str(self._init_dir / name), "status"]

    def unit_search_paths(self) -> list[str]:
        return ["/etc/rc.d/init.d/", "/etc/init.d/"]

    def _find_services(self) -> list[str]:
        if not self._init_dir.is_dir():
            return []
        return [p.name for p in self._init_dir.iterdir() if not p.name.startswith(".")]
