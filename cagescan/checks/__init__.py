"""
CageScan - Checks Package

This package contains the container isolation probes. Each module holds
one check class inheriting from cagescan.core.check.BaseCheck; the
ALL_CHECKS table below is what the registry is built from.
"""

# Export base classes for check implementations
from cagescan.core.check import BaseCheck, CheckResult, Finding, FindingStatus, Severity

# Security category
from cagescan.checks.namespace_isolation import NamespaceIsolationCheck
from cagescan.checks.seccomp_status import SeccompStatusCheck
from cagescan.checks.seccomp_support import SeccompKernelSupportCheck
from cagescan.checks.selinux_status import SELinuxStatusCheck
from cagescan.checks.apparmor_status import AppArmorStatusCheck

# Report order
ALL_CHECKS = [
    NamespaceIsolationCheck,
    SeccompStatusCheck,
    SeccompKernelSupportCheck,
    SELinuxStatusCheck,
    AppArmorStatusCheck,
]

__all__ = [
    "BaseCheck",
    "CheckResult",
    "Finding",
    "FindingStatus",
    "Severity",
    "ALL_CHECKS",
    "NamespaceIsolationCheck",
    "SeccompStatusCheck",
    "SeccompKernelSupportCheck",
    "SELinuxStatusCheck",
    "AppArmorStatusCheck",
]
