"""
Reboot registry — services that need a full reboot, not a restart.

The registry collects names during one run and writes them, one per
line, to the marker file at the end, replacing whatever the previous run
wrote.  The marker file is the only contract with the external fact
collector that reports pending reboots to monitoring.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_REBOOT_FILE = Path("/var/run/reboot-monkey")
REBOOT_FILE_ENV_VAR = "RESTARTMONKEY_REBOOT_FILE"


def reboot_file_path(explicit: Path | None = None) -> Path:
    """Resolve the marker file: explicit path, then env var, then /var/run."""
    if explicit is not None:
        return explicit
    from_env = os.environ.get(REBOOT_FILE_ENV_VAR)
    return Path(from_env) if from_env else DEFAULT_REBOOT_FILE


def read_reboot_marker(path: Path) -> list[str]:
    """Service names in the marker file; empty if there is none."""
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return []
    except OSError as e:
        logger.warning("Cannot read reboot marker %s: %s", path, e)
        return []
    return [line.strip() for line in raw.splitlines() if line.strip()]


class RebootRegistry:
    """In-memory set of reboot-requiring services, flushed once per run."""

    def __init__(self, path: Path = DEFAULT_REBOOT_FILE, dry_run: bool = False):
        self._path = path
        self._dry_run = dry_run
        self._services: list[str] = []

    @property
    def path(self) -> Path:
        return self._path

    @property
    def services(self) -> list[str]:
        return list(self._services)

    @property
    def pending(self) -> bool:
        return bool(self._services)

    def register(self, name: str) -> None:
        if self._dry_run:
            logger.debug("Would register reboot for '%s'", name)
            return
        logger.debug("Register '%s' for reboot", name)
        if name not in self._services:
            self._services.append(name)

    def flush(self) -> None:
        """Replace the marker file with this run's services (never in dry-run)."""
        if self._dry_run:
            return

        self._path.parent.mkdir(parents=True, exist_ok=True)
        content = "\n".join(self._services)

        fd, tmp_path = tempfile.mkstemp(dir=self._path.parent, prefix=".reboot_", suffix=".tmp")
        tmp = Path(tmp_path)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.chmod(tmp, 0o644)
            tmp.replace(self._path)
        except Exception:
            tmp.unlink(missing_ok=True)
            logger.error("Failed to write reboot marker %s", self._path)
            raise
        logger.debug("Reboot marker written to %s (%d services)", self._path, len(self._services))
