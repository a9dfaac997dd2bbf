"""
CageScan Check: SELinux Status

Detects whether SELinux is present and enforcing, and shows the SELinux
label of the current process. /sys/fs/selinux/enforce exists only when
SELinux is compiled in and selinuxfs is mounted.
"""

from cagescan.core.check import BaseCheck, Finding, FindingStatus, Severity
from cagescan.core.sources import read_text, strip_attr_value


class SELinuxStatusCheck(BaseCheck):
    """Check SELinux enforcement and the container label."""

    id = "selinux_status"
    name = "SELinux Status"
    description = "Check SELinux status"
    severity = Severity.MEDIUM
    remediation = (
        "Put SELinux in enforcing mode: set SELINUX=enforcing in "
        "/etc/selinux/config and run 'sudo setenforce 1'."
    )

    def collect(self) -> list[Finding]:
        raw = read_text(self.paths.selinux_enforce)
        if raw is None:
            # No selinuxfs means no label worth reading either.
            return [Finding(
                kind="enforce",
                status=FindingStatus.INFO,
                message="SELinux: not detected (no SELinux filesystem mounted)",
            )]

        value = raw.strip()
        if value == "1":
            findings = [Finding(kind="enforce", status=FindingStatus.OK,
                                message="SELinux: enforcing", value=value)]
        elif value == "0":
            findings = [Finding(kind="enforce", status=FindingStatus.WARNING,
                                message="SELinux: permissive (loaded but not enforcing)",
                                value=value)]
        else:
            findings = [Finding(kind="enforce", status=FindingStatus.UNKNOWN,
                                message=f"SELinux: unexpected enforce value {value!r}",
                                value=value)]

        label = read_text(self.paths.self_attr_current)
        if label is not None:
            trimmed = strip_attr_value(label)
            findings.append(Finding(
                kind="label",
                status=FindingStatus.INFO,
                message=f"SELinux: container label: {trimmed}",
                value=trimmed,
            ))

        return findings
