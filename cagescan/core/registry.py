"""
CageScan - Check Registry

This module provides the explicit table of registered checks. The table
is built once at start-up and handed to whatever drives execution.
"""

import inspect
from typing import Type, Optional, Callable, Iterable, TYPE_CHECKING

from .check import BaseCheck, CheckResult, Severity

if TYPE_CHECKING:
    from .sources import ProbePaths


class CheckRegistry:
    """Registry for check classes, grouped by category.

    The registry manages the collection of check classes and provides
    methods for registration, lookup, and execution of checks.

    Example:
        registry = CheckRegistry.from_checks(ALL_CHECKS)

        # Get all checks in the security category
        security_checks = registry.get_checks(category="security")

        # Run every registered check
        results = registry.run_all()
    """

    def __init__(self) -> None:
        """Initialize an empty check registry."""
        self._checks: dict[str, Type[BaseCheck]] = {}

    @classmethod
    def from_checks(cls, check_classes: Iterable[Type[BaseCheck]]) -> "CheckRegistry":
        """Build a registry holding the given check classes.

        Args:
            check_classes: Check classes to register, in any order

        Returns:
            Populated CheckRegistry
        """
        registry = cls()
        for check_class in check_classes:
            registry.register(check_class)
        return registry

    def register(self, check_class: Type[BaseCheck]) -> None:
        """Register a check class with the registry.

        Args:
            check_class: A class that inherits from BaseCheck

        Raises:
            TypeError: If check_class is not a subclass of BaseCheck
            ValueError: If a check with the same id is already registered
        """
        if not inspect.isclass(check_class):
            raise TypeError(f"Expected a class, got {type(check_class).__name__}")

        if not issubclass(check_class, BaseCheck):
            raise TypeError(
                f"Check class must inherit from BaseCheck, "
                f"got {check_class.__name__}"
            )

        if inspect.isabstract(check_class):
            raise TypeError(f"Check class {check_class.__name__} is abstract")

        check_id = check_class.id

        if check_id in self._checks:
            raise ValueError(
                f"Check with id '{check_id}' is already registered "
                f"({self._checks[check_id].__name__})"
            )

        self._checks[check_id] = check_class

    def get_check(self, check_id: str) -> Optional[Type[BaseCheck]]:
        """Get a registered check class by id.

        Args:
            check_id: The unique identifier of the check

        Returns:
            The check class if found, None otherwise
        """
        return self._checks.get(check_id)

    def get_checks(self, category: Optional[str] = None) -> list[Type[BaseCheck]]:
        """Get registered check classes, optionally filtered by category.

        Args:
            category: If specified, only checks registered under it

        Returns:
            Check classes in registration order
        """
        checks = list(self._checks.values())

        if category is not None:
            checks = [check for check in checks if check.category == category]

        return checks

    def get_categories(self) -> list[str]:
        """Get the distinct categories of registered checks, sorted."""
        return sorted({check.category for check in self._checks.values()})

    def run_all(
        self,
        check_ids: Optional[list[str]] = None,
        category: Optional[str] = None,
        progress_callback: Optional[Callable[[str, str, str, Optional[CheckResult]], None]] = None,
        paths: Optional["ProbePaths"] = None,
    ) -> list[CheckResult]:
        """Execute all applicable checks.

        Args:
            check_ids: Optional list of specific check ids to run
            category: Optional category filter (ignored when check_ids is given)
            progress_callback: Optional callback function called before and after
                each check. Called with (event_type, check_id, check_name, result) where
                event_type is 'start' or 'complete', and result is the CheckResult
                (only provided for 'complete' events).
            paths: Optional filesystem locations to inspect

        Returns:
            List of CheckResult objects from all executed checks
        """
        results: list[CheckResult] = []

        # Get checks to run
        if check_ids:
            check_classes = []
            for cid in check_ids:
                check_class = self.get_check(cid)
                if check_class:
                    check_classes.append(check_class)
                else:
                    # Create a failed result for unknown check ids
                    results.append(CheckResult(
                        check_id=cid,
                        check_name="Unknown Check",
                        passed=False,
                        skipped=False,
                        message=f"Check '{cid}' is not registered",
                        remediation="Run with --list to see the registered check ids",
                        severity=Severity.MEDIUM,
                        category="unknown",
                    ))
        else:
            check_classes = self.get_checks(category=category)

        # Execute each check
        for check_class in check_classes:
            check_id = check_class.id
            check_name = check_class.name

            if progress_callback:
                progress_callback('start', check_id, check_name, None)

            check_instance = check_class(paths=paths)
            result = check_instance.execute()
            results.append(result)

            if progress_callback:
                progress_callback('complete', check_id, check_name, result)

        return results

    def __len__(self) -> int:
        """Return the number of registered checks."""
        return len(self._checks)

    def __contains__(self, check_id: str) -> bool:
        """Check if a check id is registered."""
        return check_id in self._checks


def build_default_registry() -> CheckRegistry:
    """Build the registry holding every check shipped with CageScan."""
    from ..checks import ALL_CHECKS

    return CheckRegistry.from_checks(ALL_CHECKS)
