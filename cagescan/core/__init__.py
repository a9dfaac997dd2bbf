"""
CageScan - Core Module

This module contains the check framework, the check registry, the
filesystem surface and the kernel config resolver.
"""

from .check import (
    BaseCheck,
    CheckResult,
    Finding,
    FindingStatus,
    Severity,
)
from .registry import (
    CheckRegistry,
    build_default_registry,
)
from .sources import (
    NamespaceKind,
    ProbePaths,
    read_link,
    read_text,
    strip_attr_value,
)
from .kconfig import (
    BootConfigSource,
    CompressedConfigSource,
    ConfigOption,
    ConfigSource,
    ConfigSourceUnavailable,
    KernelConfigResolver,
    match_config_line,
    read_kernel_release,
    resolve_config_option,
)

__all__ = [
    "BaseCheck",
    "CheckResult",
    "Finding",
    "FindingStatus",
    "Severity",
    "CheckRegistry",
    "build_default_registry",
    "NamespaceKind",
    "ProbePaths",
    "read_link",
    "read_text",
    "strip_attr_value",
    "BootConfigSource",
    "CompressedConfigSource",
    "ConfigOption",
    "ConfigSource",
    "ConfigSourceUnavailable",
    "KernelConfigResolver",
    "match_config_line",
    "read_kernel_release",
    "resolve_config_option",
]
