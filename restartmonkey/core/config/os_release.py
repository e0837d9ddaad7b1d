"""
OS release levels — the keys OS-scoped policy maps are resolved by.

The host is described by three levels, most specific first::

    ["CentOS.7", "CentOS", "default"]

Distribution detection is delegated to the ``distro`` library; its
lowercase ids are mapped to the capitalized names operators already use
in their config files.
"""

from __future__ import annotations

import logging

import distro

from restartmonkey.core.models.policy import DEFAULT_LEVEL

logger = logging.getLogger(__name__)

_OS_NAMES: dict[str, str] = {
    "almalinux": "AlmaLinux",
    "amzn": "Amazon",
    "centos": "CentOS",
    "debian": "Debian",
    "fedora": "Fedora",
    "ol": "OracleLinux",
    "opensuse-leap": "OpenSuSE",
    "rhel": "RedHat",
    "rocky": "Rocky",
    "scientific": "Scientific",
    "sles": "SLES",
    "ubuntu": "Ubuntu",
}


def os_name(distro_id: str) -> str:
    """Map a distro id to its conventional capitalized name."""
    if not distro_id:
        return ""
    return _OS_NAMES.get(distro_id.lower(), distro_id.capitalize())


def os_levels(distro_id: str | None = None, major_version: str | None = None) -> list[str]:
    """Build the OS level list for this host.

    Args:
        distro_id: Override the detected distro id (tests, config check).
        major_version: Override the detected major version.

    Returns:
        Levels most-specific first, always ending with ``"default"``.
    """
    if distro_id is None:
        distro_id = distro.id()
    if major_version is None:
        major_version = distro.major_version()

    name = os_name(distro_id)
    levels: list[str] = []
    if name and major_version:
        levels.append(f"{name}.{major_version}")
    if name:
        levels.append(name)
    levels.append(DEFAULT_LEVEL)

    logger.debug("OS levels: %s", ", ".join(levels))
    return levels
