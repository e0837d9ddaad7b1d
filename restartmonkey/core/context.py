"""
Run context — every collaborator of one run, built once at startup.

The loaded policy, the selected init system and package backend, the
job table and the reboot registry are plain objects owned by a
RunContext and handed to the components that need them.  Nothing is
module-global, so tests build a context around a fake proc tree and a
scripted command runner.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field

from restartmonkey.adapters.init.base import ServiceManager
from restartmonkey.adapters.packages.base import PackageBackend
from restartmonkey.adapters.registry import select_package_backend, select_service_manager
from restartmonkey.adapters.shell.command import CommandRunner
from restartmonkey.core.config.loader import load_config
from restartmonkey.core.config.os_release import os_levels
from restartmonkey.core.engine.restart import SETTLE_SECONDS, RestartMachine
from restartmonkey.core.errors import PrivilegeError
from restartmonkey.core.models.jobs import JobTable
from restartmonkey.core.persistence.job_store import job_file_path, load_jobs
from restartmonkey.core.persistence.reboot_marker import RebootRegistry, reboot_file_path
from restartmonkey.core.services.guesser import ServiceGuesser
from restartmonkey.core.services.policy import Policy
from restartmonkey.core.services.scanner import PROC_ROOT, ProcessScanner
from restartmonkey.core.services.scheduler import JobScheduler

logger = logging.getLogger(__name__)


class RunOptions(BaseModel):
    """Options of one invocation, as given on the command line."""

    dry_run: bool = False
    wait_count: int | None = Field(default=None, ge=0)
    config_path: Path | None = None
    job_file: Path | None = None
    reboot_file: Path | None = None
    proc_root: Path = PROC_ROOT
    settle_seconds: float = SETTLE_SECONDS


@dataclass
class RunContext:
    """The explicit object graph of one run."""

    options: RunOptions
    policy: Policy
    runner: CommandRunner
    services: ServiceManager
    backend: PackageBackend
    scanner: ProcessScanner
    guesser: ServiceGuesser
    jobs: JobTable
    job_path: Path
    scheduler: JobScheduler
    reboots: RebootRegistry


def check_privileges(dry_run: bool, euid: int | None = None) -> None:
    """Refuse a mutating run without root.

    Raises:
        PrivilegeError: If not root and not in dry-run.
    """
    if euid is None:
        euid = os.geteuid()
    if euid == 0:
        return
    if not dry_run:
        raise PrivilegeError("Must run as root")
    logger.warning("not running as root. Not all processes shown")


def build_context(
    options: RunOptions,
    runner: CommandRunner | None = None,
    levels: list[str] | None = None,
    service_manager: Callable[[CommandRunner, Policy], ServiceManager] | None = None,
    package_backend: Callable[[CommandRunner], PackageBackend] | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> RunContext:
    """Load configuration, probe the host and wire every component.

    Args:
        options: Parsed command-line options.
        runner: Command runner (default: a real one honouring dry-run).
        levels: OS levels override (default: detected).
        service_manager: Factory overriding init system detection.
        package_backend: Factory overriding package backend detection.
        sleep: Settle-delay function used between restart and health check.

    Raises:
        ConfigError: If the configuration file is invalid.
        UnsupportedHostError: If the host has no supported init system
            or package database.
    """
    policy = Policy(load_config(options.config_path), levels or os_levels())
    runner = runner or CommandRunner(dry_run=options.dry_run)

    if service_manager is not None:
        services = service_manager(runner, policy)
    else:
        services = select_service_manager(runner, policy)

    if package_backend is not None:
        backend = package_backend(runner)
    else:
        backend = select_package_backend(runner)

    job_path = job_file_path(options.job_file)
    jobs = load_jobs(job_path)
    machine = RestartMachine(services, settle_seconds=options.settle_seconds, sleep=sleep)

    return RunContext(
        options=options,
        policy=policy,
        runner=runner,
        services=services,
        backend=backend,
        scanner=ProcessScanner(options.proc_root),
        guesser=ServiceGuesser(backend, services, policy),
        jobs=jobs,
        job_path=job_path,
        scheduler=JobScheduler(
            jobs, machine, default_wait=options.wait_count, dry_run=options.dry_run,
        ),
        reboots=RebootRegistry(reboot_file_path(options.reboot_file), dry_run=options.dry_run),
    )
