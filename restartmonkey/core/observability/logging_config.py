"""
Logging configuration — central setup for the CLI entrypoint.

Called once at startup by main.py.  Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

Levels are resolved in precedence order:
    --debug  >  --verbose  >  --cron  >  RESTARTMONKEY_LOG_LEVEL  >  NOTICE

NOTICE sits between INFO and WARNING.  It carries the operator-facing
lines ("Would restart ...", "scheduled to be restarted in N runs", the
verification report) that a cron run suppresses and an interactive run
shows without the INFO narration of every filtering decision.

Optional file output via RESTARTMONKEY_LOG_FILE / RESTARTMONKEY_LOG_FILE_LEVEL.
"""

from __future__ import annotations

import logging
import sys

NOTICE = 25
logging.addLevelName(NOTICE, "NOTICE")

# ── Format strings ──────────────────────────────────────────────

# (threshold, format, datefmt): the first threshold >= level applies
_CONSOLE_FORMATS: tuple[tuple[int, str, str | None], ...] = (
    # full diagnostic with file:line
    (logging.DEBUG, "%(asctime)s %(levelname)-6s %(name)s:%(lineno)d  %(message)s", "%H:%M:%S"),
    # level-tagged, like the classic cron mail
    (logging.INFO, "%(levelname)s: %(message)s", None),
    # NOTICE and above: the message alone
    (logging.CRITICAL, "%(message)s", None),
)

_FILE_FORMAT = "%(asctime)s %(levelname)-6s [%(process)d] %(name)s  %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def resolve_level(
    verbose: bool = False,
    debug: bool = False,
    cron: bool = False,
    env_level: str | None = None,
) -> str:
    """Pick the console level name from the CLI flags.

    Verbose and debug win over cron: ``--cron`` only silences a run
    nobody asked to narrate.
    """
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if cron:
        return "WARNING"
    return env_level or "NOTICE"


def setup_logging(
    level: str = "NOTICE",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure Python logging for the entire process.

    Args:
        level: Console level name (DEBUG, INFO, NOTICE, WARNING, ERROR).
        log_file: Optional path to a log file, appended to.
        log_file_level: Optional separate level for the log file.
            Defaults to the same as ``level``.
    """
    console_level = _parse_level(level)
    handlers = [_console_handler(console_level)]

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handlers.append(_file_handler(log_file, file_level))

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    # The root passes everything any handler wants; handlers filter
    root.setLevel(min(h.level for h in handlers))

    # A broken stderr (closed cron pipe) must not abort a restart run
    logging.raiseExceptions = False


def _console_handler(level: int) -> logging.Handler:
    _, fmt, datefmt = _CONSOLE_FORMATS[-1]
    for threshold, candidate, candidate_datefmt in _CONSOLE_FORMATS:
        if level <= threshold:
            fmt, datefmt = candidate, candidate_datefmt
            break

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
    return handler


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant (NOTICE if unknown)."""
    if not level:
        return NOTICE
    numeric = logging.getLevelName(level.upper())
    return numeric if isinstance(numeric, int) else NOTICE
