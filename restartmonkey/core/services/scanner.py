"""
Process scanner — find processes still using replaced files.

Reads the proc filesystem directly:

    /proc/<pid>/maps      mapped libraries
    /proc/<pid>/exe       executable link, " (deleted)" once unlinked
    /proc/<pid>/cmdline   NUL-separated argv

A library is *vanished* when a process maps it but the path no longer
exists.  Processes come and go during a scan; a PID that disappears or
denies access is skipped.  The existence check races with concurrent
package installs; results are a best-effort diagnostic.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path

from restartmonkey.core.models.process import AffectedExecutable, ProcessRecord, ScanResult
from restartmonkey.core.services import resolver

logger = logging.getLogger(__name__)

PROC_ROOT = Path("/proc")


class ProcessScanner:
    """Scan the process table for stale library and executable usage.

    Args:
        proc_root: Mount point of the proc filesystem.
        exists: Existence check for library paths.
    """

    def __init__(
        self,
        proc_root: Path = PROC_ROOT,
        exists: Callable[[str], bool] = os.path.exists,
    ):
        self._proc_root = proc_root
        self._exists = exists

    # ── Reading ──────────────────────────────────────────────────

    def pids(self) -> list[int]:
        """All numeric process directories, sorted."""
        try:
            return sorted(int(p.name) for p in self._proc_root.iterdir() if p.name.isdigit())
        except OSError as e:
            logger.error("Cannot list %s: %s", self._proc_root, e)
            return []

    def read_libraries(self, pid: int) -> frozenset[str]:
        """Library paths mapped by ``pid``. Raises OSError if unreadable."""
        libraries: set[str] = set()
        maps = (self._proc_root / str(pid) / "maps").read_text(errors="replace")
        for line in maps.splitlines():
            fields = line.split(maxsplit=5)
            if len(fields) < 6:
                continue
            path = resolver.strip_deleted(fields[5].strip())
            if path.startswith("/") and "lib" in path:
                libraries.add(path)
        return frozenset(libraries)

    def read_executable(self, pid: int) -> str:
        """Raw exe link target of ``pid``. Raises OSError if unreadable."""
        return os.readlink(self._proc_root / str(pid) / "exe")

    def read_command_line(self, pid: int) -> tuple[str, ...]:
        try:
            raw = (self._proc_root / str(pid) / "cmdline").read_bytes()
        except OSError:
            return ()
        return tuple(
            arg.decode(errors="replace") for arg in raw.split(b"\0") if arg
        )

    def read_process(self, pid: int) -> ProcessRecord | None:
        """Snapshot one process, or None if it vanished or is unreadable."""
        try:
            libraries = self.read_libraries(pid)
        except OSError as e:
            logger.debug("Skipping pid %d: %s", pid, e)
            return None

        try:
            exe = self.read_executable(pid)
        except OSError:
            # kernel threads and foreign-namespace processes have no exe link
            exe = ""

        return ProcessRecord(
            pid=pid,
            mapped_libraries=libraries,
            executable_path=resolver.strip_deleted(exe),
            executable_deleted=exe.endswith(resolver.DELETED_MARKER),
            command_line=self.read_command_line(pid),
        )

    # ── Scanning ─────────────────────────────────────────────────

    def snapshot(self) -> list[ProcessRecord]:
        records = []
        for pid in self.pids():
            record = self.read_process(pid)
            if record is not None:
                records.append(record)
        return records

    def scan(self) -> ScanResult:
        """One full pass: vanished libraries, updated executables, resolution."""
        records = self.snapshot()
        by_pid = {r.pid: r for r in records}

        vanished = vanished_libraries(library_index(records), self._exists)
        updated = sorted(r.pid for r in records if r.executable_deleted)

        affected_pids: set[int] = set(updated)
        for pids in vanished.values():
            affected_pids.update(pids)

        # one entry per pid; ScanResult.affected_executables dedups by path
        affected: list[AffectedExecutable] = []
        for pid in sorted(affected_pids):
            record = by_pid[pid]
            path = resolver.resolve(record.executable_path, record.command_line)
            if not path:
                continue
            affected.append(
                AffectedExecutable(pid=pid, resolved_path=path, command_line=record.command_line)
            )

        result = ScanResult(
            vanished_libraries=vanished,
            updated_pids=updated,
            affected=affected,
            pids_scanned=len(records),
        )
        logger.debug(
            "Scanned %d processes: %d vanished libraries, %d affected executables",
            len(records), len(vanished), len(result.affected_executables),
        )
        return result


def library_index(records: list[ProcessRecord]) -> dict[str, set[int]]:
    """Map every mapped library to the PIDs mapping it."""
    index: dict[str, set[int]] = {}
    for record in records:
        for library in record.mapped_libraries:
            index.setdefault(library, set()).add(record.pid)
    return index


def vanished_libraries(
    index: dict[str, set[int]],
    exists: Callable[[str], bool] = os.path.exists,
) -> dict[str, set[int]]:
    """Libraries from ``index`` that are gone from the filesystem."""
    return {lib: set(pids) for lib, pids in index.items() if not exists(lib)}
