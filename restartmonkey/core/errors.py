"""
Fatal error taxonomy.

Only configuration and environment problems are raised as exceptions;
they abort the run before anything is restarted.  Per-item failures
(a vanished PID, an unowned file, a failing restart) are never raised —
they surface as log lines and failed Receipts.
"""

from __future__ import annotations


class RestartMonkeyError(Exception):
    """Base class for every fatal restartmonkey error."""


class ConfigError(RestartMonkeyError):
    """Raised when the configuration file is invalid."""


class UnsupportedHostError(RestartMonkeyError):
    """Raised when no supported init system or package backend is found."""


class PrivilegeError(RestartMonkeyError):
    """Raised when a mutating run is started without root privileges."""
