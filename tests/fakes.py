"""
Test doubles for the host: a fake /proc tree and systemctl output.
"""

from __future__ import annotations

from pathlib import Path


class FakeProc:
    """A throwaway /proc tree: maps, exe link and cmdline per pid."""

    def __init__(self, root: Path):
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)
        (self.root / "self").mkdir()

    def add(
        self,
        pid: int,
        exe: str,
        libraries: tuple[str, ...] | list[str] = (),
        cmdline: tuple[str, ...] | list[str] = (),
        deleted: bool = False,
        deleted_libraries: tuple[str, ...] | list[str] = (),
    ) -> Path:
        pid_dir = self.root / str(pid)
        pid_dir.mkdir()

        lines = ["55d0c0a00000-55d0c0a21000 r--p 00000000 08:01 131 " + exe]
        for i, lib in enumerate(libraries):
            lines.append(f"7f1c2a{i:06x}-7f1c2b000000 r-xp 00000000 08:01 {1000 + i} {lib}")
        for i, lib in enumerate(deleted_libraries):
            lines.append(
                f"7f1d2a{i:06x}-7f1d2b000000 r-xp 00000000 08:01 {2000 + i} {lib} (deleted)"
            )
        lines.append("7ffd5e1f3000-7ffd5e214000 rw-p 00000000 00:00 0 [stack]")
        lines.append("7ffd5e3f3000-7ffd5e3f5000 rw-p 00000000 00:00 0")
        (pid_dir / "maps").write_text("\n".join(lines) + "\n")

        (pid_dir / "exe").symlink_to(exe + (" (deleted)" if deleted else ""))

        argv = list(cmdline) or [exe]
        (pid_dir / "cmdline").write_bytes(b"\0".join(a.encode() for a in argv) + b"\0")
        return pid_dir

    def add_vanished_process(self, pid: int) -> Path:
        """A pid directory whose process exited: nothing readable inside."""
        pid_dir = self.root / str(pid)
        pid_dir.mkdir()
        return pid_dir


def list_units_output(*names: str) -> str:
    """Fake ``systemctl list-units --state=running --plain --no-legend`` output."""
    return "\n".join(
        f"{name}.service loaded active running {name} daemon" for name in names
    )
