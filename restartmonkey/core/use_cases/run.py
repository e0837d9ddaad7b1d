"""
Run use case — the full detection-to-remediation pipeline.

This is the top-level orchestrator:

    privilege check → config → host probing → scan → guess → decide
    (reboot / schedule / skip) → re-scan → persist jobs + reboot marker

Fatal problems (privileges, config, unsupported host) stop the run
before anything is restarted and come back as ``RunResult.error``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from restartmonkey.core.context import RunContext, RunOptions, build_context, check_privileges
from restartmonkey.core.errors import RestartMonkeyError
from restartmonkey.core.models.process import ScanResult
from restartmonkey.core.observability.logging_config import NOTICE
from restartmonkey.core.persistence.job_store import save_jobs
from restartmonkey.core.services.guesser import GuessResult
from restartmonkey.core.services.policy import Classification
from restartmonkey.core.services.report import report_lines
from restartmonkey.core.services.scheduler import ScheduleDecision

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Result of one restartmonkey run."""

    dry_run: bool = False
    scan: ScanResult | None = None
    guess: GuessResult | None = None
    decisions: list[ScheduleDecision] = field(default_factory=list)
    skipped: dict[str, str] = field(default_factory=dict)
    reboot_services: list[str] = field(default_factory=list)
    verification: ScanResult | None = None
    report: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def restarted(self) -> list[str]:
        return [d.service for d in self.decisions if d.action == "restarted"]

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            if self.scan is None:
                return result

        result["dry_run"] = self.dry_run
        if self.scan:
            result["scan"] = self.scan.to_dict()
        if self.guess:
            result["services"] = self.guess.to_dict()
        result["decisions"] = [d.to_dict() for d in self.decisions]
        result["skipped"] = self.skipped
        result["reboot_services"] = self.reboot_services
        if self.verification:
            result["verification"] = self.verification.to_dict()
        return result


def decide(ctx: RunContext, result: RunResult) -> None:
    """Route every affected service to reboot, schedule or skip."""
    for name in result.guess.affected if result.guess else []:
        lookup = ctx.services.sanitize_name(name)
        classification = ctx.policy.classify(name, lookup)

        if classification is Classification.MUST_REBOOT:
            ctx.reboots.register(name)
        elif classification is Classification.BLACKLISTED:
            logger.debug("Skipping blacklisted service '%s' (Lookup: %s)", name, lookup)
            result.skipped[name] = classification.value
        elif classification is Classification.IGNORED:
            logger.debug("Skipping ignored service '%s' (Lookup: %s)", name, lookup)
            result.skipped[name] = classification.value
        elif classification is Classification.WHITELISTED:
            result.decisions.append(ctx.scheduler.schedule(name))
        else:
            message = (
                "Skipping restart of probably affected service '%s' "
                "since it's not whitelisted (Lookup: %s)"
            )
            # A due restart that policy blocks deserves attention even in cron mode
            level = logging.WARNING if ctx.scheduler.due(name) else NOTICE
            logger.log(level, message, name, lookup)
            result.skipped[name] = classification.value

    result.reboot_services = ctx.reboots.services


def execute(ctx: RunContext) -> RunResult:
    """Run the pipeline on an already-built context."""
    result = RunResult(dry_run=ctx.options.dry_run)

    result.scan = ctx.scanner.scan()
    executables = result.scan.affected_executables

    if executables:
        logger.info("Affected executables: %s", ", ".join(executables))
        result.guess = ctx.guesser.guess(executables)
        decide(ctx, result)

        result.verification = ctx.scanner.scan()
        result.report = report_lines(result.verification, result.reboot_services)
        for line in result.report:
            logger.log(NOTICE, line)
    else:
        logger.info("No processes use replaced libraries or executables")

    if not ctx.options.dry_run:
        persist(ctx, result)

    return result


def persist(ctx: RunContext, result: RunResult) -> None:
    """Write the job table and the reboot marker.

    The writes are independent: a broken spool must not cost the reboot
    flag.  Failures are reported through ``result.error``.
    """
    failures: list[str] = []

    try:
        save_jobs(ctx.scheduler.table(), ctx.job_path)
    except OSError as e:
        failures.append(f"Cannot write job file {ctx.job_path}: {e}")

    try:
        ctx.reboots.flush()
    except OSError as e:
        failures.append(f"Cannot write reboot marker {ctx.reboots.path}: {e}")

    for failure in failures:
        logger.error(failure)
    if failures:
        result.error = "; ".join(failures)


def run_restartmonkey(
    options: RunOptions,
    context: RunContext | None = None,
    euid: int | None = None,
) -> RunResult:
    """Run restartmonkey once.

    Args:
        options: Parsed command-line options.
        context: Pre-built context (tests). Built from ``options`` if None.
        euid: Effective uid override for the privilege check.

    Returns:
        RunResult; ``error`` is set for fatal configuration or
        environment problems, and when the job table or reboot marker
        could not be written.
    """
    try:
        check_privileges(options.dry_run, euid)
        ctx = context or build_context(options)
    except RestartMonkeyError as e:
        return RunResult(dry_run=options.dry_run, error=str(e))

    return execute(ctx)
