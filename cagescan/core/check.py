"""
CageScan - Base Check Class

This module provides the abstract base class for all posture probes,
the CheckResult dataclass for storing check results and the Finding
dataclass for the individual observations a probe makes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .sources import ProbePaths


class Severity(Enum):
    """Severity levels for checks.

    Attributes:
        CRITICAL: Isolation is missing in a way that directly exposes the host
        HIGH: High priority isolation weakness
        MEDIUM: Medium priority hardening recommendation
        LOW: Low priority informational finding
    """
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class FindingStatus(Enum):
    """Verdict attached to a single finding.

    Attributes:
        OK: The mechanism is present and active
        WARNING: The mechanism is missing, disabled or shared with the host
        UNKNOWN: The source could not be read or held unexpected data
        INFO: Informational observation with no verdict
    """
    OK = "ok"
    WARNING = "warning"
    UNKNOWN = "unknown"
    INFO = "info"


@dataclass(frozen=True)
class Finding:
    """One human-readable observation made by a check.

    Attributes:
        kind: Short label for what was observed (e.g. "net", "boot_params")
        status: Verdict for this observation
        message: Human-readable status line
        value: Raw datum behind the message, if any
    """
    kind: str
    status: FindingStatus
    message: str
    value: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert the finding to a dictionary for JSON serialization."""
        return {
            "kind": self.kind,
            "status": self.status.value,
            "message": self.message,
            "value": self.value,
        }


@dataclass
class CheckResult:
    """Result of a check execution.

    Attributes:
        check_id: Unique identifier for the check
        check_name: Human-readable name of the check
        passed: True if no finding reported a weakness
        skipped: True if the check was skipped (e.g., no procfs)
        message: Explanation of the result
        remediation: Instructions on how to harden if failed
        severity: Severity level of the check
        category: Category the check is registered under
        findings: Ordered observations made by the check
        details: Optional additional details (e.g., paths, values found)
    """
    check_id: str
    check_name: str
    passed: bool
    skipped: bool = False
    message: str = ""
    remediation: str = ""
    severity: Severity = Severity.MEDIUM
    category: str = "security"
    findings: list[Finding] = field(default_factory=list)
    details: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate the result after initialization."""
        if not self.check_id:
            raise ValueError("check_id cannot be empty")
        if not self.check_name:
            raise ValueError("check_name cannot be empty")
        if self.skipped and self.passed:
            raise ValueError("A skipped check cannot be marked as passed")

    def to_dict(self) -> dict[str, Any]:
        """Convert the result to a dictionary for JSON serialization.

        Returns:
            Dictionary representation of the check result
        """
        return {
            "check_id": self.check_id,
            "check_name": self.check_name,
            "category": self.category,
            "passed": self.passed,
            "skipped": self.skipped,
            "message": self.message,
            "remediation": self.remediation,
            "severity": self.severity.value,
            "findings": [finding.to_dict() for finding in self.findings],
            "details": self.details,
        }

    def findings_with_status(self, status: FindingStatus) -> list[Finding]:
        """Return the findings carrying the given status, in emission order."""
        return [finding for finding in self.findings if finding.status == status]

    @classmethod
    def passed_result(
        cls,
        check_id: str,
        check_name: str,
        message: str = "Check passed",
        severity: Severity = Severity.MEDIUM,
        category: str = "security",
        findings: Optional[list[Finding]] = None,
        details: Optional[dict[str, Any]] = None
    ) -> "CheckResult":
        """Create a passed check result.

        Args:
            check_id: Unique identifier for the check
            check_name: Human-readable name of the check
            message: Explanation of the result
            severity: Severity level of the check
            category: Category the check belongs to
            findings: Observations made by the check
            details: Optional additional details

        Returns:
            CheckResult with passed=True
        """
        return cls(
            check_id=check_id,
            check_name=check_name,
            passed=True,
            skipped=False,
            message=message,
            remediation="",
            severity=severity,
            category=category,
            findings=findings or [],
            details=details or {},
        )

    @classmethod
    def failed_result(
        cls,
        check_id: str,
        check_name: str,
        message: str = "Check failed",
        remediation: str = "",
        severity: Severity = Severity.MEDIUM,
        category: str = "security",
        findings: Optional[list[Finding]] = None,
        details: Optional[dict[str, Any]] = None
    ) -> "CheckResult":
        """Create a failed check result.

        Args:
            check_id: Unique identifier for the check
            check_name: Human-readable name of the check
            message: Explanation of the failure
            remediation: Instructions on how to harden
            severity: Severity level of the check
            category: Category the check belongs to
            findings: Observations made by the check
            details: Optional additional details

        Returns:
            CheckResult with passed=False
        """
        return cls(
            check_id=check_id,
            check_name=check_name,
            passed=False,
            skipped=False,
            message=message,
            remediation=remediation,
            severity=severity,
            category=category,
            findings=findings or [],
            details=details or {},
        )

    @classmethod
    def skipped_result(
        cls,
        check_id: str,
        check_name: str,
        message: str = "Check skipped - procfs not available",
        severity: Severity = Severity.MEDIUM,
        category: str = "security",
        details: Optional[dict[str, Any]] = None
    ) -> "CheckResult":
        """Create a skipped check result.

        Args:
            check_id: Unique identifier for the check
            check_name: Human-readable name of the check
            message: Explanation of why the check was skipped
            severity: Severity level of the check
            category: Category the check belongs to
            details: Optional additional details

        Returns:
            CheckResult with skipped=True
        """
        return cls(
            check_id=check_id,
            check_name=check_name,
            passed=False,
            skipped=True,
            message=message,
            remediation="Run on a Linux host or container with /proc mounted",
            severity=severity,
            category=category,
            details=details or {},
        )


class BaseCheck(ABC):
    """Abstract base class for all posture checks.

    All checks must inherit from this class and implement the
    required attributes and the collect() method. A check is a
    pure function of the filesystem: it reads through ``self.paths``
    and returns findings, it never prints.

    Example:
        class SeccompStatusCheck(BaseCheck):
            id = "seccomp_status"
            name = "Seccomp Status"
            description = "Check Seccomp status"
            severity = Severity.HIGH

            def collect(self) -> list[Finding]:
                status = read_text(self.paths.self_status)
                ...
    """

    # Check metadata - must be overridden by subclasses
    id: str = ""  # Unique identifier (e.g., "seccomp_status")
    name: str = ""  # Human-readable name
    description: str = ""  # What this check does
    category: str = "security"  # Registry category
    severity: Severity = Severity.MEDIUM  # Severity level
    remediation: str = ""  # Shown when the check fails

    def __init_subclass__(cls, **kwargs: Any) -> None:
        """Validate that subclasses define required attributes."""
        super().__init_subclass__(**kwargs)

        # Validate required attributes are set
        if not cls.id:
            raise ValueError(f"Check class {cls.__name__} must define 'id'")
        if not cls.name:
            raise ValueError(f"Check class {cls.__name__} must define 'name'")
        if not cls.description:
            raise ValueError(f"Check class {cls.__name__} must define 'description'")
        if not cls.category:
            raise ValueError(f"Check class {cls.__name__} must define 'category'")

        # Validate id format (lowercase with underscores)
        if not cls.id.replace("_", "").isalnum() or not cls.id.islower():
            raise ValueError(
                f"Check id '{cls.id}' must be lowercase alphanumeric with underscores only"
            )

    def __init__(self, paths: Optional["ProbePaths"] = None) -> None:
        """Initialize the check.

        Args:
            paths: Filesystem locations to read (defaults to the live system)
        """
        self._paths = paths

    @property
    def paths(self) -> "ProbePaths":
        """Get the filesystem locations this check reads.

        Returns:
            ProbePaths for the live system unless one was injected
        """
        if self._paths is None:
            from .sources import ProbePaths

            self._paths = ProbePaths()
        return self._paths

    @abstractmethod
    def collect(self) -> list[Finding]:
        """Gather the findings for this check.

        This method must be implemented by all check subclasses.
        Read failures are reported as findings, never raised.

        Returns:
            Findings in emission order
        """
        pass

    def run(self) -> CheckResult:
        """Execute the check and classify its findings.

        The check passes when none of its findings is a warning.

        Returns:
            CheckResult containing the outcome of the check
        """
        findings = self.collect()
        warnings = [f for f in findings if f.status == FindingStatus.WARNING]
        unknown = [f for f in findings if f.status == FindingStatus.UNKNOWN]
        details = {"unknown_count": len(unknown)}

        if not warnings:
            message = f"{self.name}: no weaknesses found"
            if unknown:
                message += f" ({len(unknown)} source(s) unavailable)"
            return CheckResult.passed_result(
                check_id=self.id,
                check_name=self.name,
                message=message,
                severity=self.severity,
                category=self.category,
                findings=findings,
                details=details,
            )

        return CheckResult.failed_result(
            check_id=self.id,
            check_name=self.name,
            message="; ".join(f.message for f in warnings),
            remediation=self.remediation,
            severity=self.severity,
            category=self.category,
            findings=findings,
            details=details,
        )

    def should_skip(self) -> bool:
        """Determine if this check should be skipped.

        Every probe reads procfs, so checks are skipped when the
        configured proc root does not exist (e.g., not on Linux).

        Returns:
            True if the check should be skipped, False otherwise
        """
        return not self.paths.proc_available()

    def execute(self) -> CheckResult:
        """Execute the check with availability checking.

        This is the main entry point for running a check. It handles
        the procfs availability test and delegates to run() if appropriate.

        Returns:
            CheckResult - either from the check execution or a skip result
        """
        if self.should_skip():
            return CheckResult.skipped_result(
                check_id=self.id,
                check_name=self.name,
                message=f"Check '{self.name}' skipped - {self.paths.proc} is not available",
                severity=self.severity,
                category=self.category,
            )

        try:
            return self.run()
        except Exception as e:
            return CheckResult.failed_result(
                check_id=self.id,
                check_name=self.name,
                message=f"Check execution failed with error: {str(e)}",
                remediation="Report this error together with the verbose output",
                severity=self.severity,
                category=self.category,
                details={"error": str(e), "error_type": type(e).__name__},
            )

    def get_metadata(self) -> dict[str, Any]:
        """Get check metadata as a dictionary.

        Returns:
            Dictionary containing check metadata
        """
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "severity": self.severity.value,
        }
