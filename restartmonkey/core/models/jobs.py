"""
JobTable — the persisted restart schedule.

One entry per deferred service: the number of runs left before the
restart is executed.  Serialized to the job file and fully rewritten at
the end of every non-dry run.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field, NonNegativeInt


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class JobTable(BaseModel):
    """Root model of the job file."""

    schema_version: int = 1
    updated_at: str = Field(default_factory=_now_iso)
    jobs: dict[str, NonNegativeInt] = Field(default_factory=dict)

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = _now_iso()

    def get(self, name: str) -> int | None:
        return self.jobs.get(name)
