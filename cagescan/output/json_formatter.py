"""
CageScan - JSON Output Formatter

This module provides JSON formatting capabilities for posture results.
"""

import json
import socket
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from ..core.check import CheckResult, FindingStatus, Severity
from ..core.kconfig import read_kernel_release
from ..core.sources import ProbePaths


class DateTimeEncoder(json.JSONEncoder):
    """Custom JSON encoder to handle datetime and enum serialization."""

    def default(self, o: Any) -> Any:
        """Convert datetime objects to ISO format strings."""
        if isinstance(o, datetime):
            return o.isoformat()
        if isinstance(o, Severity):
            return o.value.upper()
        if isinstance(o, FindingStatus):
            return o.value
        return super().default(o)


class JSONFormatter:
    """Formatter for posture results in JSON format.

    This class takes check results and produces structured JSON output
    with metadata, summary statistics, and detailed check results.

    Example:
        formatter = JSONFormatter()
        results = registry.run_all()

        json_output = formatter.format(results)
        print(json_output)
    """

    # Severity levels in order
    SEVERITY_LEVELS = [Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW]
    SCHEMA_VERSION = "1.0"

    def __init__(self, pretty: bool = False) -> None:
        """Initialize the JSON formatter.

        Args:
            pretty: If True, output formatted JSON with indentation
        """
        self._pretty = pretty

    def format(
        self,
        results: list[CheckResult],
        privileged: bool = False,
        paths: Optional[ProbePaths] = None,
    ) -> str:
        """Format check results as JSON.

        Args:
            results: List of CheckResult objects from the run
            privileged: Whether the run had root privileges
            paths: Filesystem locations that were inspected

        Returns:
            JSON string containing formatted results
        """
        output = self._build_output(results, privileged, paths or ProbePaths())

        if self._pretty:
            return json.dumps(output, cls=DateTimeEncoder, indent=2, sort_keys=False)
        else:
            return json.dumps(output, cls=DateTimeEncoder, separators=(',', ':'))

    def _build_output(
        self,
        results: list[CheckResult],
        privileged: bool,
        paths: ProbePaths,
    ) -> dict[str, Any]:
        """Build the output dictionary structure.

        Returns:
            Dictionary with metadata, summary, and checks
        """
        return {
            "metadata": self._build_metadata(privileged, paths),
            "summary": self._build_summary(results),
            "checks": self._build_checks(results),
        }

    def _build_metadata(self, privileged: bool, paths: ProbePaths) -> dict[str, Any]:
        """Build the metadata section.

        Args:
            privileged: Whether running with root privileges
            paths: Filesystem locations that were inspected

        Returns:
            Dictionary containing run metadata
        """
        return {
            "schema_version": self.SCHEMA_VERSION,
            "timestamp": datetime.now(timezone.utc),
            "hostname": socket.gethostname(),
            "kernel_release": read_kernel_release(paths) or "unknown",
            "privileged": privileged,
            "proc_root": paths.proc,
            "sys_root": paths.sys,
            "boot_dir": paths.boot,
        }

    def _build_summary(self, results: list[CheckResult]) -> dict[str, Any]:
        """Build the summary section with statistics.

        Args:
            results: List of CheckResult objects

        Returns:
            Dictionary containing summary statistics
        """
        total = len(results)
        passed = sum(1 for r in results if r.passed)
        failed = sum(1 for r in results if not r.passed and not r.skipped)
        skipped = sum(1 for r in results if r.skipped)

        # Build severity breakdown
        by_severity: dict[str, dict[str, int]] = {}
        for severity in self.SEVERITY_LEVELS:
            severity_results = [r for r in results if r.severity == severity]
            by_severity[severity.value.upper()] = {
                "total": len(severity_results),
                "passed": sum(1 for r in severity_results if r.passed),
                "failed": sum(1 for r in severity_results if not r.passed and not r.skipped),
            }

        by_category: dict[str, dict[str, int]] = {}
        for result in results:
            counts = by_category.setdefault(
                result.category, {"total": 0, "passed": 0, "failed": 0}
            )
            counts["total"] += 1
            if result.passed:
                counts["passed"] += 1
            elif not result.skipped:
                counts["failed"] += 1

        return {
            "total_checks": total,
            "passed": passed,
            "failed": failed,
            "skipped": skipped,
            "by_severity": by_severity,
            "by_category": by_category,
        }

    def _build_checks(self, results: list[CheckResult]) -> list[dict[str, Any]]:
        """Build the checks array with detailed results.

        Args:
            results: List of CheckResult objects

        Returns:
            List of dictionaries containing check details
        """
        return [
            {
                "id": result.check_id,
                "name": result.check_name,
                "category": result.category,
                "passed": result.passed,
                "skipped": result.skipped,
                "severity": result.severity.value.upper(),
                "message": result.message,
                "remediation": result.remediation,
                "findings": [finding.to_dict() for finding in result.findings],
                "details": result.details if result.details else None,
            }
            for result in results
        ]

    def write_to_file(
        self,
        results: list[CheckResult],
        output_path: Path,
        privileged: bool = False,
        paths: Optional[ProbePaths] = None,
    ) -> None:
        """Write formatted JSON results to a file."""
        json_content = self.format(results, privileged, paths)
        output_path.write_text(json_content, encoding='utf-8')

    def write_to_stdout(
        self,
        results: list[CheckResult],
        privileged: bool = False,
        paths: Optional[ProbePaths] = None,
    ) -> None:
        """Write formatted JSON results to stdout."""
        json_content = self.format(results, privileged, paths)
        sys.stdout.write(json_content)
        if self._pretty:
            sys.stdout.write('\n')
