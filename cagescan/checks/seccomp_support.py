"""
CageScan Check: Seccomp Kernel Support

Reports whether the running kernel was built with seccomp support. The
presence of the Seccomp field in /proc/self/status is the primary
signal; CONFIG_SECCOMP from the kernel config corroborates it.
"""

from cagescan.core.check import BaseCheck, Finding, FindingStatus, Severity
from cagescan.core.kconfig import KernelConfigResolver
from cagescan.core.sources import read_text

from .seccomp_status import SECCOMP_FIELD


class SeccompKernelSupportCheck(BaseCheck):
    """Check kernel Seccomp support."""

    id = "seccomp_support"
    name = "Seccomp Kernel Support"
    description = "Check kernel Seccomp support"
    severity = Severity.MEDIUM
    remediation = (
        "Boot a kernel built with CONFIG_SECCOMP=y and CONFIG_SECCOMP_FILTER=y. "
        "All mainstream distribution kernels enable both."
    )

    CONFIG_KEY = "CONFIG_SECCOMP"

    def _status_signal(self) -> Finding:
        status_path = self.paths.self_status
        status_text = read_text(status_path)
        if status_text is None:
            return Finding(
                kind="status_field",
                status=FindingStatus.UNKNOWN,
                message=f"Seccomp: unable to read {status_path}",
            )
        if SECCOMP_FIELD in status_text:
            return Finding(
                kind="status_field",
                status=FindingStatus.OK,
                message="Seccomp: kernel supports Seccomp",
            )
        return Finding(
            kind="status_field",
            status=FindingStatus.WARNING,
            message="Seccomp: kernel does NOT support Seccomp",
        )

    def collect(self) -> list[Finding]:
        findings = [self._status_signal()]

        option = KernelConfigResolver(self.paths).resolve(self.CONFIG_KEY)
        if option.found:
            findings.append(Finding(
                kind="kernel_config",
                status=FindingStatus.WARNING if option.value == "n" else FindingStatus.INFO,
                message=f"Seccomp: kernel config {option.key}={option.value}",
                value=option.value,
            ))

        return findings
