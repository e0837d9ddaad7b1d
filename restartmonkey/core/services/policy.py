"""
Policy engine — pure lookups over the merged PolicyConfig.

OS-scoped values are resolved by walking the host's OS levels
most-specific first (``CentOS.7`` → ``CentOS`` → ``default``).  Service
list membership is true if the name appears at *any* level; override
maps return the value of the first level that defines the key.
"""

from __future__ import annotations

import logging
from enum import Enum

from restartmonkey.core.models.policy import DEFAULT_LEVEL, PolicyConfig

logger = logging.getLogger(__name__)


class Classification(str, Enum):
    """How the policy treats an affected service."""

    BLACKLISTED = "blacklisted"
    IGNORED = "ignored"
    MUST_REBOOT = "must_reboot"
    WHITELISTED = "whitelisted"
    UNCLASSIFIED = "unclassified"


class Policy:
    """Read-only view of a PolicyConfig for one host."""

    def __init__(self, config: PolicyConfig, levels: list[str] | None = None):
        self._config = config
        self._levels = list(levels) if levels else [DEFAULT_LEVEL]

    @property
    def config(self) -> PolicyConfig:
        return self._config

    @property
    def levels(self) -> list[str]:
        return list(self._levels)

    # ── Membership ───────────────────────────────────────────────

    def blacklisted(self, name: str) -> bool:
        hit = self._in_scoped(self._config.blacklist, name)
        if hit:
            logger.debug("Service %s is blacklisted", name)
        return hit

    def must_reboot(self, name: str) -> bool:
        return self._in_scoped(self._config.must_reboot, name)

    def ignored(self, name: str) -> bool:
        return name in self._config.ignore

    def whitelisted(self, name: str) -> bool:
        return name in self._config.whitelist

    # ── Overrides ────────────────────────────────────────────────

    def bin_to_service(self, executable: str) -> str | None:
        return self._first_scoped(self._config.bin_to_service, executable)

    def restart_cmd(self, name: str) -> str | None:
        return self._first_scoped(self._config.restart_cmd, name)

    def status_cmd(self, name: str) -> str | None:
        return self._first_scoped(self._config.status_cmd, name)

    # ── Effective lists (config check / reporting) ───────────────

    def effective_blacklist(self) -> list[str]:
        return self._effective(self._config.blacklist)

    def effective_must_reboot(self) -> list[str]:
        return self._effective(self._config.must_reboot)

    def classify(self, name: str, lookup: str | None = None) -> Classification:
        """Classify a service.

        ``lookup`` is the sanitized name (template instance stripped);
        both it and the raw name are checked.  Must-reboot comes first so
        a reboot flag is never lost; blacklisting wins over the
        whitelist, so a blacklisted service can never be whitelisted
        into a restart.
        """
        names = [n for n in (lookup, name) if n]
        if any(self.must_reboot(n) for n in names):
            return Classification.MUST_REBOOT
        if any(self.blacklisted(n) for n in names):
            return Classification.BLACKLISTED
        if any(self.ignored(n) for n in names):
            return Classification.IGNORED
        if any(self.whitelisted(n) for n in names):
            return Classification.WHITELISTED
        return Classification.UNCLASSIFIED

    # ── Internals ────────────────────────────────────────────────

    def _in_scoped(self, table: dict[str, list[str]], name: str) -> bool:
        return any(name in table.get(level, []) for level in self._levels)

    def _first_scoped(self, table: dict[str, dict[str, str]], key: str) -> str | None:
        for level in self._levels:
            value = table.get(level, {}).get(key)
            if value:
                return value
        return None

    def _effective(self, table: dict[str, list[str]]) -> list[str]:
        names: set[str] = set()
        for level in self._levels:
            names.update(table.get(level, []))
        return sorted(names)
