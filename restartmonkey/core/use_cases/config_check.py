"""
Config check use case — validate restartmonkey.conf and show the result.

Reports the effective policy for this host after the built-in defaults
have been merged in, so an operator can see exactly which services are
protected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from restartmonkey.core.config.loader import config_path, load_config
from restartmonkey.core.config.os_release import os_levels
from restartmonkey.core.errors import ConfigError
from restartmonkey.core.services.policy import Policy

logger = logging.getLogger(__name__)


@dataclass
class ConfigCheckResult:
    """Result of validating the configuration."""

    path: Path | None = None
    exists: bool = False
    valid: bool = False
    levels: list[str] = field(default_factory=list)
    policy: Policy | None = None
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        result: dict = {
            "path": str(self.path) if self.path else None,
            "exists": self.exists,
            "valid": self.valid,
            "levels": self.levels,
        }
        if self.errors:
            result["errors"] = self.errors
        if self.policy:
            result["blacklist"] = self.policy.effective_blacklist()
            result["must_reboot"] = self.policy.effective_must_reboot()
            result["whitelist"] = sorted(self.policy.config.whitelist)
            result["ignore"] = sorted(self.policy.config.ignore)
        return result


def check_config(path: Path | None = None, levels: list[str] | None = None) -> ConfigCheckResult:
    """Validate the configuration file and compute the effective policy."""
    resolved = config_path(path)
    result = ConfigCheckResult(path=resolved, exists=resolved.is_file())
    result.levels = levels or os_levels()

    try:
        config = load_config(resolved)
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    result.valid = True
    result.policy = Policy(config, result.levels)
    return result
