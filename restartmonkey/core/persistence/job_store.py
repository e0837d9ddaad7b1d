"""
Job store persistence — atomic read/write for the JobTable.

The table is stored as JSON in the spool directory.  Writes are atomic
(write to temp file, then rename) so a crash mid-write never leaves a
truncated schedule behind.  The spool is private to root.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from restartmonkey.core.models.jobs import JobTable

logger = logging.getLogger(__name__)

DEFAULT_SPOOL_DIR = Path("/var/spool/restartmonkey")
DEFAULT_JOB_FILE = DEFAULT_SPOOL_DIR / "jobs.json"
JOB_FILE_ENV_VAR = "RESTARTMONKEY_JOB_FILE"


def job_file_path(explicit: Path | None = None) -> Path:
    """Resolve the job file: explicit path, then env var, then the spool default."""
    if explicit is not None:
        return explicit
    from_env = os.environ.get(JOB_FILE_ENV_VAR)
    return Path(from_env) if from_env else DEFAULT_JOB_FILE


def load_jobs(path: Path) -> JobTable:
    """Load the job table from a JSON file.

    Returns:
        JobTable. If the file doesn't exist or is corrupt, an empty table.
    """
    if not path.is_file():
        logger.debug("No job file at %s — starting fresh", path)
        return JobTable()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        table = JobTable.model_validate(data)
        logger.debug("Loaded %d jobs from %s", len(table.jobs), path)
        return table
    except json.JSONDecodeError as e:
        logger.warning("Corrupt job file %s: %s — starting fresh", path, e)
        return JobTable()
    except Exception as e:
        logger.warning("Cannot load jobs from %s: %s — starting fresh", path, e)
        return JobTable()


def save_jobs(table: JobTable, path: Path) -> None:
    """Save the job table (atomic write, mode 0600 in a 0700 directory)."""
    table.touch()

    path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

    data = table.model_dump(mode="json")
    content = json.dumps(data, indent=2, sort_keys=True) + "\n"

    try:
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".jobs_", suffix=".tmp")
        tmp = Path(tmp_path)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.chmod(tmp, 0o600)
            tmp.replace(path)
            logger.debug("Jobs saved to %s", path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise
    except Exception as e:
        logger.error("Failed to save jobs to %s: %s", path, e)
        raise
