"""
Job scheduler — restart now, or count down over several runs.

Each service carries a wait-count: the number of runs left before it is
restarted.  A service at 0 is restarted immediately and dropped from
the table; otherwise its count is decremented and the restart waits for
a later run.  This spreads restarts over time and gives operators a
window to veto them.

The scheduler only mutates its in-memory view; ``table()`` builds the
JobTable the caller persists once, at the end of the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from restartmonkey.core.engine.restart import RestartAttempt, RestartMachine
from restartmonkey.core.models.jobs import JobTable
from restartmonkey.core.observability.logging_config import NOTICE

logger = logging.getLogger(__name__)

Action = Literal["restarted", "would_restart", "deferred", "would_defer"]


@dataclass
class ScheduleDecision:
    """What the scheduler did with one service this run."""

    service: str
    action: Action
    wait_count: int
    attempt: RestartAttempt | None = None

    def to_dict(self) -> dict:
        result: dict = {
            "service": self.service,
            "action": self.action,
            "wait_count": self.wait_count,
        }
        if self.attempt is not None:
            result["restart"] = self.attempt.to_dict()
        return result


class JobScheduler:
    """Per-service countdown backed by a loaded JobTable.

    Args:
        jobs: The table loaded at the start of the run.
        machine: Performs the actual restart.
        default_wait: Initial wait-count for services without an entry.
        dry_run: Report decisions without restarting or counting down.
    """

    def __init__(
        self,
        jobs: JobTable,
        machine: RestartMachine,
        default_wait: int | None = None,
        dry_run: bool = False,
    ):
        self._loaded = dict(jobs.jobs)
        self._machine = machine
        self._default_wait = default_wait or 0
        self._dry_run = dry_run
        self._wait: dict[str, int] = {}
        self._pending: dict[str, int] = {}

    def wait_count(self, name: str) -> int:
        if name not in self._wait:
            stored = self._loaded.get(name)
            self._wait[name] = stored if stored is not None else self._default_wait
        return self._wait[name]

    def due(self, name: str) -> bool:
        return self.wait_count(name) == 0

    def schedule(self, name: str) -> ScheduleDecision:
        count = self.wait_count(name)
        if self._dry_run:
            if count == 0:
                logger.log(NOTICE, "Would restart service '%s'", name)
                return ScheduleDecision(name, "would_restart", count)
            logger.log(
                NOTICE, "Would schedule service '%s' to be restarted in %d runs", name, count,
            )
            return ScheduleDecision(name, "would_defer", count)

        if count == 0:
            attempt = self._machine.run(name)
            self._pending.pop(name, None)
            return ScheduleDecision(name, "restarted", count, attempt)

        logger.log(
            NOTICE,
            "Probably affected service '%s' is scheduled to be restarted in %d runs",
            name, count,
        )
        self._pending[name] = count - 1
        return ScheduleDecision(name, "deferred", count)

    def table(self) -> JobTable:
        """The job table to persist for the next run.

        Only services deferred this run keep an entry.  Restarted services
        and services not evaluated this run are dropped, so their counter
        starts over from the default next time.
        """
        return JobTable(jobs=dict(sorted(self._pending.items())))
