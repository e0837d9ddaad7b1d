"""Verification report — what is still affected after a run."""

from __future__ import annotations

import posixpath

from restartmonkey.core.models.process import ScanResult


def report_lines(scan: ScanResult, reboot_services: list[str] | None = None) -> list[str]:
    """Human-readable summary of a scan; empty when nothing is affected."""
    if scan.clean:
        return []

    lines = ["", "Currently the following problems persist:"]
    if reboot_services:
        lines.append(f"Reboot pending! (Services: {', '.join(reboot_services)})")

    if scan.vanished_libraries:
        lines.append("Updated Libraries:")
        for library in sorted(scan.vanished_libraries):
            lines.append(f"* {posixpath.basename(library)}")

    if scan.affected:
        lines.append("Affected Exes:")
        for item in scan.affected:
            lines.append(f"* {item.resolved_path} [{item.pid}] ({' '.join(item.command_line)})")

    return lines
