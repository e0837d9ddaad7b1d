"""
Restart state machine — restart, verify, fall back to start.

    NOT_ATTEMPTED ──restart──▶ RESTARTED ──check──▶ HEALTHY
                                          └──────▶ UNHEALTHY ──start──▶ STARTED
                                                                  └───▶ FAILED

The restart outcome itself does not pick the branch: some init scripts
exit non-zero on restart yet leave the daemon running, so the health
check after a short settle delay is the source of truth.  Nothing is
retried within a run.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from restartmonkey.adapters.init.base import ServiceManager
from restartmonkey.core.models.action import Receipt

logger = logging.getLogger(__name__)

SETTLE_SECONDS = 1.0


class RestartState(str, Enum):
    NOT_ATTEMPTED = "not_attempted"
    RESTARTED = "restarted"
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    STARTED = "started"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (RestartState.HEALTHY, RestartState.STARTED, RestartState.FAILED)


@dataclass
class RestartAttempt:
    """Trace of one service's walk through the state machine."""

    service: str
    state: RestartState = RestartState.NOT_ATTEMPTED
    history: list[RestartState] = field(default_factory=list)
    receipts: list[Receipt] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state in (RestartState.HEALTHY, RestartState.STARTED)

    def to_dict(self) -> dict:
        return {
            "service": self.service,
            "state": self.state.value,
            "history": [s.value for s in self.history],
            "commands": [
                {"command": r.command, "status": r.status, "error": r.error}
                for r in self.receipts
            ],
        }


class RestartMachine:
    """Drive a RestartAttempt through its transitions."""

    def __init__(
        self,
        services: ServiceManager,
        settle_seconds: float = SETTLE_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._services = services
        self._settle_seconds = settle_seconds
        self._sleep = sleep

    def run(self, service: str) -> RestartAttempt:
        attempt = RestartAttempt(service=service)
        attempt.history.append(attempt.state)
        while not attempt.state.terminal:
            attempt.state = self._step(attempt)
            attempt.history.append(attempt.state)
        logger.debug("Restart of '%s' finished: %s", service, attempt.state.value)
        return attempt

    def _step(self, attempt: RestartAttempt) -> RestartState:
        service = attempt.service

        if attempt.state is RestartState.NOT_ATTEMPTED:
            logger.info("Restarting service '%s'", service)
            attempt.receipts.append(self._services.restart(service))
            return RestartState.RESTARTED

        if attempt.state is RestartState.RESTARTED:
            self._sleep(self._settle_seconds)
            if self._services.is_active(service):
                return RestartState.HEALTHY
            logger.warning("Service '%s' is not running after restart, starting it", service)
            return RestartState.UNHEALTHY

        if attempt.state is RestartState.UNHEALTHY:
            receipt = self._services.start(service)
            attempt.receipts.append(receipt)
            return RestartState.STARTED if receipt.ok else RestartState.FAILED

        raise ValueError(f"No transition from terminal state {attempt.state.value}")
