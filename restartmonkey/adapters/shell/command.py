"""
Shell command runner — execute external commands and capture output.

This is the most fundamental adapter: every service-control and
package-database call goes through it.  Commands given as a string are
operator overrides and run through the shell; built-in commands are
argument lists and never touch a shell.

Every command has a bounded timeout: a hung init script fails its own
Receipt instead of stalling the run.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import time
from collections.abc import Sequence

from restartmonkey.core.models.action import Receipt
from restartmonkey.core.observability.logging_config import NOTICE

logger = logging.getLogger(__name__)

Command = str | Sequence[str]

# Service control can legitimately take a while (stop + start)
CONTROL_TIMEOUT = 120
# Package and status queries should be quick
QUERY_TIMEOUT = 30


def render(command: Command) -> str:
    """Printable form of a command."""
    if isinstance(command, str):
        return command
    return shlex.join(command)


class CommandRunner:
    """Run commands, honouring dry-run for anything that mutates.

    Args:
        dry_run: If True, mutating commands are logged and skipped.
        timeout: Default timeout in seconds for mutating commands.
    """

    def __init__(self, dry_run: bool = False, timeout: int = CONTROL_TIMEOUT):
        self._dry_run = dry_run
        self._timeout = timeout

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    def query(self, command: Command, timeout: int = QUERY_TIMEOUT) -> Receipt:
        """Run a read-only command. Always executed, even in dry-run."""
        return self._execute(command, timeout)

    def run(self, command: Command, timeout: int | None = None) -> Receipt:
        """Run a mutating command. Skipped in dry-run."""
        if self._dry_run:
            logger.log(NOTICE, "Would run: %s", render(command))
            return Receipt.skip(render(command), reason="dry-run")
        return self._execute(command, timeout or self._timeout)

    def _execute(self, command: Command, timeout: int) -> Receipt:
        printable = render(command)
        use_shell = isinstance(command, str)

        logger.debug("Run: %s", printable)
        start = time.monotonic()

        try:
            result = subprocess.run(
                command if use_shell else list(command),
                shell=use_shell,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                printable,
                error=f"Command timed out after {timeout}s",
                metadata={"timeout": timeout},
            )
        except OSError as e:
            return Receipt.failure(printable, error=f"Command execution error: {e}")

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = result.stdout.strip()
        stderr = result.stderr.strip()
        logger.debug("Output: %s", output)

        if result.returncode == 0:
            return Receipt.success(
                printable,
                output=output,
                return_code=0,
                duration_ms=elapsed_ms,
                metadata={"stderr": stderr},
            )
        return Receipt.failure(
            printable,
            error=stderr or f"Command exited with code {result.returncode}",
            output=output,
            return_code=result.returncode,
            duration_ms=elapsed_ms,
        )
