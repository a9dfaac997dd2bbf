"""
CageScan Check: Namespace Isolation

Compares the namespace links of PID 1 and the current process. When the
targets differ the namespace is isolated; when they match, the process
shares that namespace with the host's init.
"""

from cagescan.core.check import BaseCheck, Finding, FindingStatus, Severity
from cagescan.core.sources import NamespaceKind, read_link


class NamespaceIsolationCheck(BaseCheck):
    """Check container namespace isolation."""

    id = "namespace_isolation"
    name = "Namespace Isolation"
    description = "Check container namespace isolation"
    severity = Severity.HIGH
    remediation = (
        "Run the workload with its own namespaces. Avoid --net=host, "
        "--pid=host, --ipc=host and --uts=host (or hostNetwork, hostPID "
        "and hostIPC in Kubernetes pod specs)."
    )

    def _compare(self, kind: NamespaceKind) -> Finding:
        """Classify one namespace kind."""
        init_target = read_link(self.paths.init_namespace(kind))
        self_target = read_link(self.paths.self_namespace(kind))

        if init_target is None or self_target is None:
            return Finding(
                kind=kind.value,
                status=FindingStatus.UNKNOWN,
                message=f"{kind.value}: unable to determine (namespace links unreadable)",
            )

        if init_target != self_target:
            return Finding(
                kind=kind.value,
                status=FindingStatus.OK,
                message=f"{kind.value}: isolated ({self_target})",
                value=self_target,
            )

        return Finding(
            kind=kind.value,
            status=FindingStatus.WARNING,
            message=f"{kind.value}: NOT isolated (shared with host, {self_target})",
            value=self_target,
        )

    def collect(self) -> list[Finding]:
        return [self._compare(kind) for kind in NamespaceKind]
