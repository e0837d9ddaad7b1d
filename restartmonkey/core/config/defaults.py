"""
Built-in policy defaults.

These tables are merged under whatever the operator configures.  The
blacklist and must-reboot lists are safety nets: configuration can add
to them but never remove an entry.

Several mappings point an executable at a pseudo-service (``vm-reboot``,
``systemd-daemon-reexec`` …) that exists only so the policy can route it
to a reboot flag or a special restart command.
"""

from __future__ import annotations

# Never restarted, whatever the configuration says.
SAFETY_BLACKLIST: tuple[str, ...] = (
    "halt",
    "reboot",
    "libvirt-guests",
    "cryptdisks",
    "functions",
    "qemu-kvm",
    "rc",
    "netconsole",
    "network",
    "networking",
    "killprocs",
    "mountall",
    "sendsigs",
    "xendomains",
    "sshd",
)

DEFAULT_MUST_REBOOT: dict[str, list[str]] = {
    "CentOS.7": [],
    "CentOS.6": ["udev-post", "getty-reboot"],
    "CentOS.5": ["xend-reboot"],
    "Debian.7": ["dbus", "screen-cleanup"],
    "default": ["systemd-reboot", "vm-reboot"],
}

DEFAULT_BIN_TO_SERVICE: dict[str, dict[str, str]] = {
    "CentOS.7": {
        "/usr/sbin/rpcbind": "rpcbind",
        "/usr/sbin/rpc.statd": "rpc-statd",
    },
    "CentOS.6": {
        "/sbin/mingetty": "getty-reboot",
        "/sbin/agetty": "getty-reboot",
    },
    "CentOS.5": {
        "/usr/sbin/xenconsoled": "xend-reboot",
        "/usr/sbin/xenstored": "xend-reboot",
        "/usr/sbin/blktapctrl": "xend-reboot",
    },
    "default": {
        "/usr/libexec/qemu-kvm": "vm-reboot",
        "/usr/lib/systemd/systemd-machined": "systemd-reboot",
        "/usr/lib/systemd/systemd": "systemd-daemon-reexec",
    },
}

DEFAULT_STATUS_CMD: dict[str, dict[str, str]] = {
    "default": {
        # pseudo-service, always healthy
        "systemd-daemon-reexec": "/usr/bin/true",
    },
}

DEFAULT_RESTART_CMD: dict[str, dict[str, str]] = {
    "CentOS.7": {
        # auditd refuses systemctl restart (RHBZ#973697)
        "auditd": "/sbin/service auditd restart",
    },
    "default": {
        "systemd-daemon-reexec": "/usr/bin/systemctl daemon-reexec",
    },
}

# Longest-common-substring noise and renamed packages
NOISE_PATTERN = r"daemon|service|common|finish|dispatcher|system|\.sh|boot|setup|support"

SERVICE_ALIASES: dict[str, str] = {
    "mysqld": "mariadb",
}
