"""
systemd service manager.

Known services are the units systemd currently reports as running.
Restarts prefer ``reload-or-restart`` so daemons that support a graceful
reload keep their connections.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from restartmonkey.adapters.init.base import ServiceManager
from restartmonkey.adapters.shell.command import Command

logger = logging.getLogger(__name__)

SYSTEMD_RUNTIME_DIR = Path("/run/systemd/system")
_LIST_RUNNING = [
    "systemctl", "list-units",
    "--type=service", "--state=running",
    "--no-legend", "--plain", "--no-pager",
]


class SystemdServiceManager(ServiceManager):
    """Service manager backed by systemctl."""

    @property
    def name(self) -> str:
        return "systemd"

    @classmethod
    def is_available(cls) -> bool:
        return SYSTEMD_RUNTIME_DIR.is_dir() or shutil.which("systemctl") is not None

    def restart_command(self, name: str) -> Command:
        return ["systemctl", "reload-or-restart", name]

    def start_command(self, name: str) -> Command:
        return ["systemctl", "start", name]

    def status_command(self, name: str) -> Command:
        return ["systemctl", "is-active", "--quiet", name]

    def unit_search_paths(self) -> list[str]:
        # init script dirs are kept for units generated by systemd-sysv-generator
        return [
            "/lib/systemd/system/",
            "/usr/lib/systemd/system/",
            "/etc/rc.d/init.d/",
            "/etc/init.d/",
        ]

    def unit_suffix(self) -> str:
        return ".service"

    def sanitize_name(self, name: str) -> str:
        return name.split("@", 1)[0]

    def expand(self, name: str) -> list[str]:
        """Expand a template (``getty@``) into its running instances."""
        if not name.endswith("@"):
            return [name]
        template = self.sanitize_name(name)
        return [
            s for s in self.list_services()
            if s.startswith(name)
            and not self._policy.blacklisted(template)
            and not self._policy.blacklisted(s)
            and self.is_active(s)
        ]

    def _find_services(self) -> list[str]:
        receipt = self.runner.query(_LIST_RUNNING)
        if receipt.failed:
            logger.error("Cannot list systemd units: %s", receipt.error)
            return []

        services = []
        for line in receipt.output.splitlines():
            fields = line.split()
            if not fields or not fields[0].endswith(self.unit_suffix()):
                continue
            services.append(fields[0][: -len(self.unit_suffix())])
        return services
