"""
CageScan - Command Line Interface

This module provides the CLI argument parsing, privilege handling,
and main entry point for the posture inspector.
"""

import argparse
import os
import sys
import traceback
from pathlib import Path
from typing import Optional, Union

from cagescan import __version__
from cagescan.core.check import CheckResult
from cagescan.core.registry import CheckRegistry, build_default_registry
from cagescan.core.sources import ProbePaths
from cagescan.output.json_formatter import JSONFormatter
from cagescan.output.text_formatter import TextFormatter


class PrivilegeChecker:
    """Handles privilege checking and warnings for the inspector.

    None of the probes require root, but some sources are only readable
    by root on hardened distributions.
    """

    # Checks whose sources may be root-only
    PRIVILEGE_SENSITIVE_CHECKS: list[str] = [
        "seccomp_support",
        "apparmor_status",
    ]

    def __init__(self) -> None:
        """Initialize the privilege checker."""
        self._has_root = False
        self._warnings: list[str] = []

    def check_privileges(self) -> bool:
        """Check if the process is running as root.

        Returns:
            True if running as root (uid 0), False otherwise
        """
        self._has_root = os.geteuid() == 0

        if not self._has_root:
            self._warnings.append(
                "Not running as root. Kernel config files under /boot may be "
                "unreadable and reported as not available."
            )
            self._warnings.append(
                f"Affected checks: {', '.join(self.PRIVILEGE_SENSITIVE_CHECKS)}"
            )

        return self._has_root

    def print_warnings(self) -> None:
        """Print any privilege-related warnings to stderr."""
        for warning in self._warnings:
            print(f"WARNING: {warning}", file=sys.stderr)

    @property
    def has_warnings(self) -> bool:
        """Check if any warnings were generated."""
        return len(self._warnings) > 0


class CLI:
    """Command Line Interface for CageScan.

    Handles argument parsing, privilege checking, and orchestrates
    the execution of the registered checks.
    """

    def __init__(self, registry: Optional[CheckRegistry] = None) -> None:
        """Initialize the CLI.

        Args:
            registry: Check table to run (defaults to every shipped check)
        """
        self.args: Optional[argparse.Namespace] = None
        self.registry = registry if registry is not None else build_default_registry()
        self.privilege_checker = PrivilegeChecker()

    def parse_args(self, argv: Optional[list[str]] = None) -> argparse.Namespace:
        """Parse command line arguments.

        Args:
            argv: Command line arguments (defaults to sys.argv[1:])

        Returns:
            Parsed arguments namespace
        """
        parser = argparse.ArgumentParser(
            prog="cagescan",
            description="Container security posture inspector",
            epilog="Exit codes: 0=all checks passed, 1=error, 2=isolation weaknesses found"
        )

        parser.add_argument(
            "--output", "-o",
            type=str,
            default=None,
            help="Output file path (default: stdout)"
        )

        parser.add_argument(
            "--format", "-f",
            choices=["text", "json"],
            default="text",
            help="Report format (default: text)"
        )

        parser.add_argument(
            "--pretty",
            action="store_true",
            help="Pretty-print JSON output with indentation"
        )

        parser.add_argument(
            "--no-color",
            action="store_true",
            help="Disable ANSI colors in the text report"
        )

        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Enable verbose output on stderr"
        )

        parser.add_argument(
            "--root",
            type=str,
            default=None,
            help=(
                "Inspect a filesystem snapshot holding proc/, sys/ and boot/ "
                "under this directory instead of the live system"
            ),
        )

        parser.add_argument(
            "--check", "-c",
            dest="check_ids",
            action="append",
            default=None,
            metavar="ID",
            help="Run only this check (may be repeated)"
        )

        parser.add_argument(
            "--category",
            type=str,
            default=None,
            help="Run only checks registered under this category"
        )

        parser.add_argument(
            "--list",
            action="store_true",
            help="List registered checks and exit"
        )

        parser.add_argument(
            "--version",
            action="version",
            version=f"%(prog)s {__version__}"
        )

        self.args = parser.parse_args(argv)
        return self.args

    def _probe_paths(self) -> ProbePaths:
        """Build the filesystem locations selected on the command line.

        Raises:
            ValueError: If --root does not name a directory
        """
        if self.args is None or not self.args.root:
            return ProbePaths()
        if not os.path.isdir(self.args.root):
            raise ValueError(f"--root '{self.args.root}' is not a directory")
        return ProbePaths.from_root(self.args.root)

    def _verbose(self, message: str) -> None:
        if self.args and self.args.verbose:
            print(message, file=sys.stderr)

    def list_checks(self) -> int:
        """Print the registered checks grouped by category.

        Returns:
            Exit code (always 0)
        """
        for category in self.registry.get_categories():
            print(f"{category}:")
            for check_class in self.registry.get_checks(category=category):
                print(f"  {check_class.id:<22} {check_class.description}")
        return 0

    def run_audit(self, privileged: bool = False) -> int:
        """Run the selected checks and write the report.

        Args:
            privileged: Whether the process runs as root

        Returns:
            Exit code (0=success, 1=error, 2=weaknesses found)
        """
        paths = self._probe_paths()
        category = self.args.category if self.args else None
        check_ids = self.args.check_ids if self.args else None

        if category and category not in self.registry.get_categories():
            available = ", ".join(self.registry.get_categories())
            raise ValueError(
                f"Unknown category '{category}'. Available categories: {available}"
            )

        self._verbose(f"Inspecting proc={paths.proc} sys={paths.sys} boot={paths.boot}")
        self._verbose(f"Registered checks: {len(self.registry)}")

        def progress_callback(event_type: str, check_id: str, check_name: str, result: Optional[CheckResult]) -> None:
            if event_type == 'start':
                self._verbose(f"Running {check_id} ({check_name})")
            elif event_type == 'complete' and result:
                state = "skipped" if result.skipped else ("passed" if result.passed else "failed")
                self._verbose(f"  {check_id}: {state}, {len(result.findings)} finding(s)")

        results = self.registry.run_all(
            check_ids=check_ids,
            category=category,
            progress_callback=progress_callback,
            paths=paths,
        )

        formatter: Union[JSONFormatter, TextFormatter]
        if self.args and self.args.format == "json":
            formatter = JSONFormatter(pretty=self.args.pretty)
        else:
            use_color = bool(
                self.args
                and not self.args.no_color
                and not self.args.output
                and sys.stdout.isatty()
            )
            formatter = TextFormatter(color=use_color)

        # Output to file or stdout
        try:
            if self.args and self.args.output:
                output_path = Path(self.args.output)
                formatter.write_to_file(results, output_path, privileged=privileged, paths=paths)
                self._verbose(f"Results written to {output_path}")
            else:
                formatter.write_to_stdout(results, privileged=privileged, paths=paths)
        except BrokenPipeError:
            # Common when piping to tools like `head`; treat as graceful termination.
            return 0
        except (OSError, UnicodeError) as e:
            print(f"Error writing report: {e}", file=sys.stderr)
            return 1

        failed_count = sum(1 for r in results if not r.passed and not r.skipped)
        if failed_count > 0:
            return 2

        return 0

    def main(self, argv: Optional[list[str]] = None) -> int:
        """Main entry point for the CLI.

        Args:
            argv: Command line arguments (defaults to sys.argv[1:])

        Returns:
            Exit code (0=success, 1=error, 2=weaknesses found)
        """
        try:
            self.parse_args(argv)

            if self.args.list:
                return self.list_checks()

            privileged = self.privilege_checker.check_privileges()
            if self.args.verbose:
                self.privilege_checker.print_warnings()

            return self.run_audit(privileged=privileged)

        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        except KeyboardInterrupt:
            print("\nInspection interrupted by user", file=sys.stderr)
            return 1
        except Exception as e:
            print(f"Unexpected error: {e}", file=sys.stderr)
            if self.args and self.args.verbose:
                traceback.print_exc()
            return 1


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the CageScan CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=weaknesses found)
    """
    cli = CLI()
    return cli.main(argv)


if __name__ == "__main__":
    sys.exit(main())
