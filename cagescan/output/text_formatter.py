"""
CageScan - Text Output Formatter

Renders posture results as a plain-text report: one section per check,
one indented line per finding, and a summary block.
"""

import sys
from pathlib import Path
from typing import Optional

from ..core.check import CheckResult, FindingStatus
from ..core.kconfig import read_kernel_release
from ..core.sources import ProbePaths


SEP = "=" * 72
SUB_SEP = "-" * 72


class TextFormatter:
    """Formatter for posture results as a human-readable report.

    Example:
        formatter = TextFormatter(color=sys.stdout.isatty())
        print(formatter.format(results))
    """

    # Finding status markers
    MARKERS = {
        FindingStatus.OK: "+",
        FindingStatus.WARNING: "!",
        FindingStatus.UNKNOWN: "?",
        FindingStatus.INFO: "*",
    }

    # ANSI color codes
    COLORS = {
        "green": "\033[92m",
        "red": "\033[91m",
        "yellow": "\033[93m",
        "gray": "\033[90m",
        "reset": "\033[0m",
        "bold": "\033[1m",
    }

    STATUS_COLORS = {
        FindingStatus.OK: "green",
        FindingStatus.WARNING: "red",
        FindingStatus.UNKNOWN: "yellow",
        FindingStatus.INFO: "gray",
    }

    def __init__(self, color: bool = False) -> None:
        """Initialize the text formatter.

        Args:
            color: If True, wrap verdicts in ANSI color codes
        """
        self._color_enabled = color

    def _color(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled."""
        if self._color_enabled:
            return f"{self.COLORS.get(color, '')}{text}{self.COLORS['reset']}"
        return text

    def _verdict(self, result: CheckResult) -> str:
        if result.skipped:
            return self._color("[SKIP]", "yellow")
        if result.passed:
            return self._color("[PASS]", "green")
        return self._color("[FAIL]", "red")

    def format(
        self,
        results: list[CheckResult],
        privileged: bool = False,
        paths: Optional[ProbePaths] = None,
    ) -> str:
        """Format check results as a text report.

        Args:
            results: List of CheckResult objects from the run
            privileged: Whether the run had root privileges
            paths: Filesystem locations that were inspected

        Returns:
            Multi-line report ending with a newline
        """
        paths = paths or ProbePaths()
        lines: list[str] = [
            SEP,
            "CageScan - Container Security Posture",
            f"Kernel: {read_kernel_release(paths) or 'unknown'}",
            f"Privileged: {'yes' if privileged else 'no'}",
            SEP,
        ]

        for result in results:
            lines.append("")
            lines.append(
                f"{self._verdict(result)} {result.check_name} "
                f"({result.category}/{result.check_id}, {result.severity.value})"
            )
            lines.append(SUB_SEP)
            for finding in result.findings:
                marker = self.MARKERS[finding.status]
                color = self.STATUS_COLORS[finding.status]
                lines.append(f"  {self._color(f'[{marker}]', color)} {finding.message}")
            if not result.findings or result.skipped:
                lines.append(f"  {result.message}")
            if not result.passed and result.remediation:
                lines.append(f"  Remediation: {result.remediation}")

        passed = sum(1 for r in results if r.passed)
        failed = sum(1 for r in results if not r.passed and not r.skipped)
        skipped = sum(1 for r in results if r.skipped)
        lines.extend([
            "",
            SEP,
            f"Checks: {len(results)}  Passed: {passed}  Failed: {failed}  Skipped: {skipped}",
            SEP,
        ])
        return "\n".join(lines) + "\n"

    def write_to_file(
        self,
        results: list[CheckResult],
        output_path: Path,
        privileged: bool = False,
        paths: Optional[ProbePaths] = None,
    ) -> None:
        """Write the text report to a file."""
        output_path.write_text(self.format(results, privileged, paths), encoding='utf-8')

    def write_to_stdout(
        self,
        results: list[CheckResult],
        privileged: bool = False,
        paths: Optional[ProbePaths] = None,
    ) -> None:
        """Write the text report to stdout."""
        sys.stdout.write(self.format(results, privileged, paths))
