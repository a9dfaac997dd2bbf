"""
Shared test fixtures and configuration.

Probes are pointed at a fake proc/sys/boot tree under tmp_path, so no
test depends on the pseudo-files of the machine running the suite.
"""

import gzip
import os
import sys
from pathlib import Path
from typing import Optional

import pytest

# Add project root to import path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from cagescan.core.sources import ProbePaths


class FakeSystem:
    """Builder for a fake filesystem snapshot holding proc/, sys/ and boot/."""

    def __init__(self, root: Path) -> None:
        self.root = root
        (root / "proc").mkdir()
        (root / "sys").mkdir()
        (root / "boot").mkdir()
        self.paths = ProbePaths.from_root(str(root))

    def write(self, relative: str, content: str) -> Path:
        """Write a text file below the root, creating parents."""
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def write_bytes(self, relative: str, content: bytes) -> Path:
        """Write a binary file below the root, creating parents."""
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path

    def link(self, relative: str, target: str) -> Path:
        """Create a (possibly dangling) symlink below the root."""
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        os.symlink(target, path)
        return path

    def namespaces(
        self,
        init: dict[str, str],
        current: dict[str, str],
    ) -> None:
        """Create ns links for PID 1 and self; kinds left out stay missing."""
        for kind, target in init.items():
            self.link(f"proc/1/ns/{kind}", target)
        for kind, target in current.items():
            self.link(f"proc/self/ns/{kind}", target)

    def status(self, seccomp: Optional[str] = "2", extra: str = "") -> Path:
        """Write proc/self/status, optionally with a Seccomp line."""
        lines = ["Name:\tpython3", "State:\tR (running)", "Pid:\t42"]
        if seccomp is not None:
            lines.append(f"Seccomp:\t{seccomp}")
            lines.append("Seccomp_filters:\t1")
        lines.append("Speculation_Store_Bypass:\tthread force mitigated")
        return self.write("proc/self/status", "\n".join(lines) + "\n" + extra)

    def config_gz(self, text: str) -> Path:
        """Write a gzip-compressed proc/config.gz."""
        path = self.root / "proc" / "config.gz"
        with gzip.open(path, "wt", encoding="utf-8") as f:
            f.write(text)
        return path

    def boot_config(self, text: str, release: str = "6.8.0-45-generic") -> Path:
        """Write proc/sys/kernel/osrelease and the matching boot/config-<release>."""
        self.write("proc/sys/kernel/osrelease", release + "\n")
        return self.write(f"boot/config-{release}", text)


@pytest.fixture
def fake_system(tmp_path: Path) -> FakeSystem:
    """Return an empty fake snapshot rooted in a temporary directory."""
    return FakeSystem(tmp_path)
