"""
Scan use case — report affected processes without touching anything.

Needs no init system or package database: it only reads the proc
filesystem, so it also works inside containers and on unsupported hosts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from restartmonkey.core.models.process import ScanResult
from restartmonkey.core.persistence.reboot_marker import read_reboot_marker, reboot_file_path
from restartmonkey.core.services.report import report_lines
from restartmonkey.core.services.scanner import PROC_ROOT, ProcessScanner

logger = logging.getLogger(__name__)


@dataclass
class ScanReport:
    """Result of the scan use case."""

    scan: ScanResult | None = None
    reboot_services: list[str] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        result = self.scan.to_dict() if self.scan else {}
        result["reboot_services"] = self.reboot_services
        return result


def run_scan(proc_root: Path = PROC_ROOT, reboot_file: Path | None = None) -> ScanReport:
    """Scan the process table and build the problem report."""
    scan = ProcessScanner(proc_root).scan()
    reboot_services = read_reboot_marker(reboot_file_path(reboot_file))
    return ScanReport(
        scan=scan,
        reboot_services=reboot_services,
        lines=report_lines(scan, reboot_services),
    )
