"""
Facts use case — the reboot marker as external monitoring sees it.

The fact collector publishes ``reboot_monkey_services`` as a
comma-separated list, empty when no reboot is pending.
"""

from __future__ import annotations

from pathlib import Path

from restartmonkey.core.persistence.reboot_marker import read_reboot_marker, reboot_file_path

FACT_NAME = "reboot_monkey_services"


def reboot_fact(reboot_file: Path | None = None) -> dict[str, str]:
    services = read_reboot_marker(reboot_file_path(reboot_file))
    return {FACT_NAME: ",".join(services)}
