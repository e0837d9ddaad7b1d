"""
Service guesser — map affected executables to the services running them.

Three strategies, tried in order per executable; the first non-empty
answer wins:

    1. explicit override   policy ``bin_to_service`` (exact path)
    2. package ownership   owning package → its unit files / init scripts
    3. name heuristic      longest common substring against every service

The raw candidates are then partitioned by ``filter_services`` into the
services to restart, the ones needing a reboot and the ones dropped.
"""

from __future__ import annotations

import logging
import posixpath
import re
from dataclasses import dataclass, field

from restartmonkey.adapters.init.base import ServiceManager
from restartmonkey.adapters.packages.base import PackageBackend
from restartmonkey.core.config.defaults import NOISE_PATTERN, SERVICE_ALIASES
from restartmonkey.core.services.policy import Policy

logger = logging.getLogger(__name__)

NOISE_RE = re.compile(NOISE_PATTERN)
# A shared run of more than this many characters counts as a match
MIN_MATCH_LENGTH = 3


@dataclass
class GuessResult:
    """Candidate services, partitioned by what should happen to them."""

    restart: list[str] = field(default_factory=list)
    must_reboot: list[str] = field(default_factory=list)
    blacklisted: list[str] = field(default_factory=list)
    not_running: list[str] = field(default_factory=list)

    @property
    def affected(self) -> list[str]:
        """Restart candidates plus reboot-requiring services."""
        return sorted(set(self.restart) | set(self.must_reboot))

    def to_dict(self) -> dict:
        return {
            "restart": self.restart,
            "must_reboot": self.must_reboot,
            "blacklisted": self.blacklisted,
            "not_running": self.not_running,
        }


def longest_common_substring(a: str, b: str) -> str:
    """Longest contiguous run shared by ``a`` and ``b`` (first found on ties)."""
    if not a or not b:
        return ""
    best_len, best_end = 0, 0
    previous = [0] * (len(b) + 1)
    for i in range(1, len(a) + 1):
        current = [0] * (len(b) + 1)
        for j in range(1, len(b) + 1):
            if a[i - 1] == b[j - 1]:
                current[j] = previous[j - 1] + 1
                if current[j] > best_len:
                    best_len, best_end = current[j], i
        previous = current
    return a[best_end - best_len:best_end]


def strip_noise(name: str) -> str:
    """Drop generic tokens ("daemon", "service", ".sh" …) from a name."""
    return NOISE_RE.sub("", name)


def match_length(
    executable: str,
    service: str,
    aliases: dict[str, str] = SERVICE_ALIASES,
) -> int:
    """How strongly an executable name resembles a service name.

    Both names are stripped of noise; if the executable has a known
    rename alias the alias is compared as well and the longer run wins.
    """
    base = posixpath.basename(executable)
    stripped_service = strip_noise(service)
    length = len(longest_common_substring(strip_noise(base), stripped_service))

    alias = aliases.get(base)
    if alias:
        length = max(length, len(longest_common_substring(alias, stripped_service)))
    return length


class ServiceGuesser:
    """Resolve affected executables to filtered service names."""

    def __init__(self, backend: PackageBackend, services: ServiceManager, policy: Policy):
        self._backend = backend
        self._services = services
        self._policy = policy

    def guess(self, executables: list[str]) -> GuessResult:
        candidates: list[str] = []
        for exe in executables:
            for service in self.candidates_for(exe):
                if service not in candidates:
                    candidates.append(service)
        return self.filter_services(sorted(candidates))

    def candidates_for(self, executable: str) -> list[str]:
        override = self._policy.bin_to_service(executable)
        if override:
            logger.debug("Explicit service for %s: %s", executable, override)
            return [override]

        by_package = self.services_by_package(executable)
        if by_package:
            return by_package

        return self.guess_by_name(executable)

    def services_by_package(self, executable: str) -> list[str]:
        package = self._backend.owner(executable)
        if not package:
            return []

        possible: list[str] = []
        for path in self._backend.files(package):
            if self._services.owns_unit_file(path):
                name = self._services.unit_name(path)
                if name not in possible:
                    possible.append(name)
        logger.debug("Possible services for %s: %s", executable, ", ".join(possible))

        active = [
            s for s in possible
            if self.must_reboot(s)
            or (not self.blacklisted(s) and (s.endswith("@") or self._services.is_active(s)))
        ]
        logger.debug("Active services for %s: %s", executable, ", ".join(active))
        return self._services.expand_all(active)

    def guess_by_name(self, executable: str, services: list[str] | None = None) -> list[str]:
        if services is None:
            services = self._services.list_services()
        matches = [s for s in services if match_length(executable, s) > MIN_MATCH_LENGTH]
        logger.debug("Guessed services for %s: %s", executable, ", ".join(matches))
        return matches

    def filter_services(self, candidates: list[str]) -> GuessResult:
        result = GuessResult()
        for service in candidates:
            if self.must_reboot(service):
                result.must_reboot.append(service)
            elif self.blacklisted(service):
                result.blacklisted.append(service)
            elif not self._services.is_active(service):
                result.not_running.append(service)
            else:
                result.restart.append(service)

        for title, names in (
            ("Requiring reboot", result.must_reboot),
            ("Probably affected", result.restart),
            ("Ignoring blacklisted", result.blacklisted),
            ("Ignoring non-running", result.not_running),
        ):
            if names:
                logger.info("%s services:", title)
                for name in names:
                    logger.info("* %s", name)
        return result

    def blacklisted(self, service: str) -> bool:
        return (
            self._policy.blacklisted(self._services.sanitize_name(service))
            or self._policy.blacklisted(service)
        )

    def must_reboot(self, service: str) -> bool:
        return (
            self._policy.must_reboot(self._services.sanitize_name(service))
            or self._policy.must_reboot(service)
        )
