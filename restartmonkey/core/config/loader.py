"""
Configuration loader — reads restartmonkey.conf into a PolicyConfig.

It reads YAML, validates against the Pydantic schema, and merges the
operator's settings over the built-in defaults.  A missing file is not
an error: the defaults alone are a complete, safe policy.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

from restartmonkey.core.config.defaults import (
    DEFAULT_BIN_TO_SERVICE,
    DEFAULT_MUST_REBOOT,
    DEFAULT_RESTART_CMD,
    DEFAULT_STATUS_CMD,
    SAFETY_BLACKLIST,
)
from restartmonkey.core.errors import ConfigError
from restartmonkey.core.models.policy import DEFAULT_LEVEL, PolicyConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("/etc/restartmonkey.conf")
CONFIG_ENV_VAR = "RESTARTMONKEY_CONFIG"


def config_path(explicit: Path | None = None) -> Path:
    """Resolve the config file: explicit path, then env var, then /etc."""
    if explicit is not None:
        return explicit
    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env)
    return DEFAULT_CONFIG_FILE


def read_config(path: Path) -> PolicyConfig:
    """Parse and validate the config file without merging defaults.

    Raises:
        ConfigError: If the file is unreadable or invalid.
    """
    if not path.is_file():
        logger.debug("No config file at %s — using built-in defaults", path)
        return PolicyConfig()

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return PolicyConfig()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        return PolicyConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e


def merge_defaults(user: PolicyConfig) -> PolicyConfig:
    """Merge the operator's policy over the built-in defaults.

    Lists are unioned (defaults first), maps are overlaid per OS level
    with the operator's entries winning.
    """
    blacklist = _union_lists({DEFAULT_LEVEL: list(SAFETY_BLACKLIST)}, user.blacklist)

    return PolicyConfig(
        whitelist=list(user.whitelist),
        ignore=list(user.ignore),
        blacklist=blacklist,
        must_reboot=_union_lists(DEFAULT_MUST_REBOOT, user.must_reboot),
        bin_to_service=_overlay_maps(DEFAULT_BIN_TO_SERVICE, user.bin_to_service),
        restart_cmd=_overlay_maps(DEFAULT_RESTART_CMD, user.restart_cmd),
        status_cmd=_overlay_maps(DEFAULT_STATUS_CMD, user.status_cmd),
    )


def load_config(path: Path | None = None) -> PolicyConfig:
    """Load the effective policy for this run.

    Args:
        path: Explicit config path. If None, see ``config_path``.

    Returns:
        The merged PolicyConfig.

    Raises:
        ConfigError: If the file exists but is invalid.
    """
    resolved = config_path(path)
    config = merge_defaults(read_config(resolved))
    logger.debug(
        "Policy: %d whitelisted, %d ignored, %d blacklist levels",
        len(config.whitelist), len(config.ignore), len(config.blacklist),
    )
    return config


def _union_lists(
    defaults: dict[str, list[str]],
    user: dict[str, list[str]],
) -> dict[str, list[str]]:
    merged: dict[str, list[str]] = {}
    for level in {**defaults, **user}:
        names = list(defaults.get(level, []))
        for name in user.get(level, []):
            if name not in names:
                names.append(name)
        merged[level] = names
    return merged


def _overlay_maps(
    defaults: dict[str, dict[str, str]],
    user: dict[str, dict[str, str]],
) -> dict[str, dict[str, str]]:
    merged: dict[str, dict[str, str]] = {}
    for level in {**defaults, **user}:
        merged[level] = {**defaults.get(level, {}), **user.get(level, {})}
    return merged
