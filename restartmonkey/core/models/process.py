"""
Process models — what one scan of the process table observed.

A ProcessRecord is a frozen snapshot of one PID.  Records are created
fresh on every scan and thrown away when the scan completes; nothing
about a process outlives the scan that saw it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict


class ProcessRecord(BaseModel):
    """Snapshot of one process, as read from the proc filesystem."""

    model_config = ConfigDict(frozen=True)

    pid: int
    mapped_libraries: frozenset[str] = frozenset()
    executable_path: str = ""
    executable_deleted: bool = False
    command_line: tuple[str, ...] = ()

    @property
    def command(self) -> str:
        """The command line joined for display."""
        return " ".join(self.command_line)


class AffectedExecutable(BaseModel):
    """An affected process, with its interpreter-corrected executable."""

    model_config = ConfigDict(frozen=True)

    pid: int
    resolved_path: str
    command_line: tuple[str, ...] = ()


@dataclass
class ScanResult:
    """Outcome of one pass over the process table."""

    vanished_libraries: dict[str, set[int]] = field(default_factory=dict)
    updated_pids: list[int] = field(default_factory=list)
    affected: list[AffectedExecutable] = field(default_factory=list)
    pids_scanned: int = 0

    @property
    def affected_executables(self) -> list[str]:
        """Resolved executable paths, deduplicated and sorted."""
        return sorted({a.resolved_path for a in self.affected})

    @property
    def clean(self) -> bool:
        """True when nothing uses a replaced library or executable."""
        return not self.vanished_libraries and not self.affected

    def to_dict(self) -> dict:
        return {
            "pids_scanned": self.pids_scanned,
            "affected_executables": self.affected_executables,
            "vanished_libraries": {
                lib: sorted(pids) for lib, pids in sorted(self.vanished_libraries.items())
            },
            "updated_pids": self.updated_pids,
            "processes": [
                {
                    "pid": a.pid,
                    "executable": a.resolved_path,
                    "command_line": " ".join(a.command_line),
                }
                for a in self.affected
            ],
        }
