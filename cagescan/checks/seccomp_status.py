"""
CageScan Check: Seccomp Status

Reads the Seccomp field of /proc/self/status and reports whether the
current process runs with seccomp disabled (0), in strict mode (1) or
in filter mode (2).
"""

from typing import Optional

from cagescan.core.check import BaseCheck, Finding, FindingStatus, Severity
from cagescan.core.sources import read_text


SECCOMP_FIELD = "Seccomp:"


def parse_seccomp_mode(status_text: str) -> tuple[bool, Optional[str]]:
    """Extract the seccomp mode token from /proc/<pid>/status content.

    Only the first line starting with ``Seccomp:`` is considered.

    Args:
        status_text: Full status file content

    Returns:
        (field_present, mode_token). The token is None when the field is
        absent or its line is malformed.
    """
    for line in status_text.splitlines():
        if line.startswith(SECCOMP_FIELD):
            parts = line.split()
            if len(parts) < 2:
                return True, None
            return True, parts[1]
    return False, None


class SeccompStatusCheck(BaseCheck):
    """Check the seccomp mode of the current process."""

    id = "seccomp_status"
    name = "Seccomp Status"
    description = "Check Seccomp status"
    severity = Severity.HIGH
    remediation = (
        "Run the container with a seccomp profile. Docker and containerd "
        "apply their default profile unless --security-opt seccomp=unconfined "
        "is set; in Kubernetes set securityContext.seccompProfile.type to "
        "RuntimeDefault."
    )

    MODES = {
        "0": (FindingStatus.WARNING, "disabled"),
        "1": (FindingStatus.OK, "strict mode (1)"),
        "2": (FindingStatus.OK, "filter mode (2)"),
    }

    def collect(self) -> list[Finding]:
        status_path = self.paths.self_status
        status_text = read_text(status_path)
        if status_text is None:
            return [Finding(
                kind="mode",
                status=FindingStatus.UNKNOWN,
                message=f"Seccomp: unable to read {status_path}",
            )]

        present, mode = parse_seccomp_mode(status_text)
        if not present:
            return [Finding(
                kind="mode",
                status=FindingStatus.WARNING,
                message=f"Seccomp: field not found in {status_path} (kernel may not support Seccomp)",
            )]
        if mode is None:
            return [Finding(
                kind="mode",
                status=FindingStatus.UNKNOWN,
                message="Seccomp: malformed Seccomp line",
            )]

        if mode in self.MODES:
            status, label = self.MODES[mode]
            return [Finding(kind="mode", status=status, message=f"Seccomp: {label}", value=mode)]

        return [Finding(
            kind="mode",
            status=FindingStatus.UNKNOWN,
            message=f"Seccomp: unknown value {mode}",
            value=mode,
        )]
