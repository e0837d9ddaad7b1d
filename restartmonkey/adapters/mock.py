"""
Mock command runner — scripted test double for every external command.

Used by the tests to simulate systemctl, init scripts and package
databases without touching the host.  Responses are matched on the command's rendered prefix; anything
unscripted succeeds with empty output.
"""

from __future__ import annotations

from restartmonkey.adapters.shell.command import Command, CommandRunner, render
from restartmonkey.core.models.action import Receipt


class MockCommandRunner(CommandRunner):
    """Universal mock runner for testing.

    By default, returns success for everything. Can be configured with
    custom responses per command prefix; the longest matching prefix wins.
    """

    def __init__(self, dry_run: bool = False, default_output: str = ""):
        super().__init__(dry_run=dry_run)
        self._default_output = default_output
        self._responses: dict[str, list[Receipt]] = {}
        self._call_log: list[str] = []

    @property
    def call_log(self) -> list[str]:
        """Every command this mock executed, in order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def calls_to(self, prefix: str) -> list[str]:
        """Executed commands starting with ``prefix``."""
        return [c for c in self._call_log if c.startswith(prefix)]

    def set_output(self, prefix: str, output: str) -> None:
        """Make commands starting with ``prefix`` succeed with ``output``."""
        self._responses[prefix] = [Receipt.success(prefix, output=output, return_code=0)]

    def set_failure(self, prefix: str, error: str = "Mock failure", code: int = 1) -> None:
        """Make commands starting with ``prefix`` fail."""
        self._responses[prefix] = [
            Receipt.failure(prefix, error=error, return_code=code),
        ]

    def set_sequence(self, prefix: str, receipts: list[Receipt]) -> None:
        """Return ``receipts`` one per call; the last one repeats."""
        self._responses[prefix] = list(receipts)

    def reset(self) -> None:
        """Clear call log and custom responses."""
        self._call_log.clear()
        self._responses.clear()

    def _execute(self, command: Command, timeout: int) -> Receipt:
        printable = render(command)
        self._call_log.append(printable)

        matches = [p for p in self._responses if printable.startswith(p)]
        if not matches:
            return Receipt.success(printable, output=self._default_output, return_code=0)

        queue = self._responses[max(matches, key=len)]
        scripted = queue.pop(0) if len(queue) > 1 else queue[0]
        return scripted.model_copy(update={"command": printable})
