"""
CageScan

A read-only container security-posture inspector for Linux.
Reports whether namespace, seccomp, SELinux and AppArmor isolation
is present and active for the current process.
"""

__version__ = "1.0.0"
__author__ = "CageScan Project"

from .core.check import (
    BaseCheck,
    CheckResult,
    Finding,
    FindingStatus,
    Severity,
)
from .core.kconfig import (
    ConfigOption,
    KernelConfigResolver,
    match_config_line,
    resolve_config_option,
)
from .core.registry import CheckRegistry, build_default_registry
from .core.sources import NamespaceKind, ProbePaths

__all__ = [
    "BaseCheck",
    "CheckResult",
    "Finding",
    "FindingStatus",
    "Severity",
    "ConfigOption",
    "KernelConfigResolver",
    "match_config_line",
    "resolve_config_option",
    "CheckRegistry",
    "build_default_registry",
    "NamespaceKind",
    "ProbePaths",
]
