"""
Filesystem surface read by the posture checks.

This module centralizes every pseudo-file location the checks depend on
behind a small path model, plus the read helpers that turn a missing or
unreadable source into ``None`` instead of an exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import os
from typing import Optional


class NamespaceKind(Enum):
    """Namespace kinds compared between PID 1 and the current process.

    Iteration order is the report order.
    """

    CGROUP = "cgroup"
    IPC = "ipc"
    MNT = "mnt"
    NET = "net"
    PID = "pid"
    UTS = "uts"


@dataclass(frozen=True)
class ProbePaths:
    """Locations of the procfs, sysfs and boot trees.

    The defaults describe the live system. ``from_root`` re-bases all
    three trees under one directory, which is how a captured snapshot
    (or a test fixture) is inspected.
    """

    proc: str = "/proc"
    sys: str = "/sys"
    boot: str = "/boot"

    @classmethod
    def from_root(cls, root: str) -> ProbePaths:
        """Build paths for a filesystem tree mounted at ``root``.

        Args:
            root: Directory holding proc/, sys/ and boot/

        Returns:
            ProbePaths re-based under root
        """
        return cls(
            proc=os.path.join(root, "proc"),
            sys=os.path.join(root, "sys"),
            boot=os.path.join(root, "boot"),
        )

    def proc_available(self) -> bool:
        """Check whether the proc tree exists at all."""
        return os.path.isdir(self.proc)

    def init_namespace(self, kind: NamespaceKind) -> str:
        """Namespace link of the init process for ``kind``."""
        return os.path.join(self.proc, "1", "ns", kind.value)

    def self_namespace(self, kind: NamespaceKind) -> str:
        """Namespace link of the current process for ``kind``."""
        return os.path.join(self.proc, "self", "ns", kind.value)

    @property
    def self_status(self) -> str:
        return os.path.join(self.proc, "self", "status")

    @property
    def self_attr_current(self) -> str:
        return os.path.join(self.proc, "self", "attr", "current")

    @property
    def cmdline(self) -> str:
        return os.path.join(self.proc, "cmdline")

    @property
    def config_gz(self) -> str:
        return os.path.join(self.proc, "config.gz")

    @property
    def osrelease(self) -> str:
        return os.path.join(self.proc, "sys", "kernel", "osrelease")

    def boot_config(self, release: str) -> str:
        """Plain-text kernel config installed for ``release``."""
        return os.path.join(self.boot, f"config-{release}")

    @property
    def selinux_enforce(self) -> str:
        return os.path.join(self.sys, "fs", "selinux", "enforce")

    @property
    def apparmor_enabled(self) -> str:
        return os.path.join(self.sys, "module", "apparmor", "parameters", "enabled")


def read_text(file_path: str) -> Optional[str]:
    """Read a small text file.

    Args:
        file_path: File to read

    Returns:
        File contents, or None if the file is missing or unreadable
    """
    try:
        with open(file_path, "r", encoding="utf-8", errors="replace") as f:
            return f.read()
    except OSError:
        return None


def read_link(link_path: str) -> Optional[str]:
    """Resolve a symlink target without following it.

    Args:
        link_path: Symlink to read

    Returns:
        Link target, or None if it is missing or not a link
    """
    try:
        return os.readlink(link_path)
    except OSError:
        return None


def strip_attr_value(raw: str) -> str:
    """Strip the trailing NUL and newline bytes LSM attributes carry."""
    return raw.rstrip("\x00\n")
