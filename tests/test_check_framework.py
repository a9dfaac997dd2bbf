"""
CageScan - Check Framework Tests

Tests for the check framework, the registry, and the result types.
"""

import pytest

from cagescan.core.check import BaseCheck, CheckResult, Finding, FindingStatus, Severity
from cagescan.core.registry import CheckRegistry, build_default_registry


def _finding(status: FindingStatus, message: str = "observed") -> Finding:
    return Finding(kind="test", status=status, message=message)


class TestSeverity:
    """Tests for the Severity enum."""

    def test_severity_values(self) -> None:
        """Test that Severity enum has expected values."""
        assert Severity.CRITICAL.value == "critical"
        assert Severity.HIGH.value == "high"
        assert Severity.MEDIUM.value == "medium"
        assert Severity.LOW.value == "low"


class TestFinding:
    """Tests for the Finding dataclass."""

    def test_to_dict(self) -> None:
        finding = Finding(kind="net", status=FindingStatus.OK, message="net: isolated", value="net:[1]")
        assert finding.to_dict() == {
            "kind": "net",
            "status": "ok",
            "message": "net: isolated",
            "value": "net:[1]",
        }

    def test_is_immutable(self) -> None:
        finding = _finding(FindingStatus.INFO)
        with pytest.raises(AttributeError):
            finding.message = "changed"  # type: ignore[misc]


class TestCheckResult:
    """Tests for the CheckResult dataclass."""

    def test_basic_result_creation(self) -> None:
        """Test creating a basic CheckResult."""
        result = CheckResult(
            check_id="test_check",
            check_name="Test Check",
            passed=True,
            message="Test passed",
            severity=Severity.HIGH,
        )
        assert result.check_id == "test_check"
        assert result.passed is True
        assert result.skipped is False
        assert result.category == "security"
        assert result.findings == []

    def test_result_validation_empty_id(self) -> None:
        """Test that empty check_id raises ValueError."""
        with pytest.raises(ValueError, match="check_id cannot be empty"):
            CheckResult(check_id="", check_name="Test", passed=True)

    def test_result_validation_empty_name(self) -> None:
        """Test that empty check_name raises ValueError."""
        with pytest.raises(ValueError, match="check_name cannot be empty"):
            CheckResult(check_id="test", check_name="", passed=True)

    def test_result_validation_skipped_and_passed(self) -> None:
        """Test that skipped=True with passed=True raises ValueError."""
        with pytest.raises(ValueError, match="skipped check cannot be marked as passed"):
            CheckResult(check_id="test", check_name="Test", passed=True, skipped=True)

    def test_failed_result_factory(self) -> None:
        """Test the failed_result factory method."""
        findings = [_finding(FindingStatus.WARNING)]
        result = CheckResult.failed_result(
            check_id="test_id",
            check_name="Test Name",
            message="Something failed",
            remediation="Fix it by doing X",
            severity=Severity.CRITICAL,
            findings=findings,
        )
        assert result.passed is False
        assert result.skipped is False
        assert result.remediation == "Fix it by doing X"
        assert result.findings == findings

    def test_skipped_result_factory(self) -> None:
        """Test the skipped_result factory method."""
        result = CheckResult.skipped_result(check_id="test_id", check_name="Test Name")
        assert result.passed is False
        assert result.skipped is True
        assert "/proc" in result.remediation

    def test_to_dict(self) -> None:
        """Test conversion to dictionary."""
        result = CheckResult(
            check_id="test",
            check_name="Test",
            passed=True,
            severity=Severity.HIGH,
            findings=[_finding(FindingStatus.OK, "fine")],
            details={"key": "value"},
        )
        d = result.to_dict()
        assert d["check_id"] == "test"
        assert d["severity"] == "high"
        assert d["category"] == "security"
        assert d["findings"][0]["status"] == "ok"
        assert d["details"] == {"key": "value"}

    def test_findings_with_status(self) -> None:
        ok = _finding(FindingStatus.OK)
        warn = _finding(FindingStatus.WARNING)
        result = CheckResult(check_id="t", check_name="T", passed=False, findings=[ok, warn, ok])
        assert result.findings_with_status(FindingStatus.OK) == [ok, ok]
        assert result.findings_with_status(FindingStatus.WARNING) == [warn]


class TestBaseCheck:
    """Tests for the BaseCheck abstract class."""

    def test_valid_check_subclass(self, fake_system) -> None:
        """Test creating a valid check subclass."""
        class ValidCheck(BaseCheck):
            id = "test_valid"
            name = "Valid Test Check"
            description = "A valid test check"

            def collect(self) -> list[Finding]:
                return []

        check = ValidCheck(paths=fake_system.paths)
        assert check.id == "test_valid"
        assert check.category == "security"
        assert check.paths is fake_system.paths

    def test_missing_id_raises(self) -> None:
        """Test that missing id raises ValueError."""
        with pytest.raises(ValueError, match="must define 'id'"):
            class BadCheck(BaseCheck):
                name = "Bad Check"
                description = "Missing id"

                def collect(self) -> list[Finding]:
                    return []

    def test_missing_description_raises(self) -> None:
        """Test that missing description raises ValueError."""
        with pytest.raises(ValueError, match="must define 'description'"):
            class BadCheck(BaseCheck):
                id = "bad_check"
                name = "Bad Check"

                def collect(self) -> list[Finding]:
                    return []

    def test_empty_category_raises(self) -> None:
        """Test that an empty category raises ValueError."""
        with pytest.raises(ValueError, match="must define 'category'"):
            class BadCheck(BaseCheck):
                id = "bad_check"
                name = "Bad Check"
                description = "No category"
                category = ""

                def collect(self) -> list[Finding]:
                    return []

    def test_invalid_id_format(self) -> None:
        """Test that invalid id format raises ValueError."""
        with pytest.raises(ValueError, match="lowercase alphanumeric"):
            class BadCheck(BaseCheck):
                id = "security.Bad-Check"
                name = "Bad Check"
                description = "Invalid id format"

                def collect(self) -> list[Finding]:
                    return []

    def test_run_passes_without_warnings(self, fake_system) -> None:
        """Unknown and info findings do not fail a check."""
        class QuietCheck(BaseCheck):
            id = "quiet_check"
            name = "Quiet Check"
            description = "No warnings"

            def collect(self) -> list[Finding]:
                return [_finding(FindingStatus.OK), _finding(FindingStatus.UNKNOWN),
                        _finding(FindingStatus.INFO)]

        result = QuietCheck(paths=fake_system.paths).execute()
        assert result.passed is True
        assert len(result.findings) == 3
        assert "1 source(s) unavailable" in result.message

    def test_run_fails_on_warning(self, fake_system) -> None:
        """A warning finding fails the check and becomes its message."""
        class LoudCheck(BaseCheck):
            id = "loud_check"
            name = "Loud Check"
            description = "One warning"
            severity = Severity.HIGH
            remediation = "Do the thing"

            def collect(self) -> list[Finding]:
                return [_finding(FindingStatus.OK), _finding(FindingStatus.WARNING, "bad thing")]

        result = LoudCheck(paths=fake_system.paths).execute()
        assert result.passed is False
        assert result.message == "bad thing"
        assert result.remediation == "Do the thing"
        assert result.severity == Severity.HIGH

    def test_execute_skips_without_procfs(self, tmp_path) -> None:
        """Test that execute() returns a skip result when proc is missing."""
        from cagescan.core.sources import ProbePaths

        class AnyCheck(BaseCheck):
            id = "any_check"
            name = "Any Check"
            description = "Needs procfs"

            def collect(self) -> list[Finding]:
                return []

        result = AnyCheck(paths=ProbePaths.from_root(str(tmp_path / "nowhere"))).execute()
        assert result.skipped is True
        assert "not available" in result.message

    def test_execute_handles_exception(self, fake_system) -> None:
        """Test that execute() handles exceptions gracefully."""
        class FailCheck(BaseCheck):
            id = "fail_check"
            name = "Fail Check"
            description = "Always raises"

            def collect(self) -> list[Finding]:
                raise RuntimeError("Something went wrong")

        result = FailCheck(paths=fake_system.paths).execute()
        assert result.passed is False
        assert result.skipped is False
        assert "error" in result.message.lower()
        assert result.details.get("error_type") == "RuntimeError"

    def test_get_metadata(self) -> None:
        """Test getting check metadata."""
        class MetaCheck(BaseCheck):
            id = "meta_check"
            name = "Meta Check"
            description = "Returns metadata"
            category = "hardening"
            severity = Severity.HIGH

            def collect(self) -> list[Finding]:
                return []

        meta = MetaCheck().get_metadata()
        assert meta == {
            "id": "meta_check",
            "name": "Meta Check",
            "description": "Returns metadata",
            "category": "hardening",
            "severity": "high",
        }


def _make_check(check_id: str, category_name: str = "security", status: FindingStatus = FindingStatus.OK):
    """Build a throwaway check class."""
    class _Check(BaseCheck):
        id = check_id
        name = check_id.replace("_", " ").title()
        description = f"Test check {check_id}"
        category = category_name

        def collect(self) -> list[Finding]:
            return [_finding(status)]

    return _Check


class TestCheckRegistry:
    """Tests for the CheckRegistry class."""

    def test_empty_registry(self) -> None:
        """Test that a new registry is empty."""
        registry = CheckRegistry()
        assert len(registry) == 0
        assert registry.get_checks() == []

    def test_from_checks_keeps_order(self) -> None:
        """Checks come back in registration order."""
        second = _make_check("b_check")
        first = _make_check("a_check")
        registry = CheckRegistry.from_checks([second, first])
        assert registry.get_checks() == [second, first]
        assert "a_check" in registry

    def test_register_non_class_raises(self) -> None:
        """Test that registering a non-class raises TypeError."""
        with pytest.raises(TypeError, match="Expected a class"):
            CheckRegistry().register("not a class")  # type: ignore[arg-type]

    def test_register_non_basecheck_raises(self) -> None:
        """Test that registering a non-BaseCheck class raises TypeError."""
        class NotACheck:
            pass

        with pytest.raises(TypeError, match="must inherit from BaseCheck"):
            CheckRegistry().register(NotACheck)  # type: ignore[arg-type]

    def test_register_duplicate_raises(self) -> None:
        """Test that registering a duplicate id raises ValueError."""
        registry = CheckRegistry()
        registry.register(_make_check("dup_check"))
        with pytest.raises(ValueError, match="already registered"):
            registry.register(_make_check("dup_check"))

    def test_filter_by_category(self) -> None:
        sec = _make_check("sec_check", category_name="security")
        hard = _make_check("hard_check", category_name="hardening")
        registry = CheckRegistry.from_checks([sec, hard])
        assert registry.get_checks(category="security") == [sec]
        assert registry.get_categories() == ["hardening", "security"]

    def test_run_all(self, fake_system) -> None:
        """Test running all checks with a progress callback."""
        registry = CheckRegistry.from_checks([
            _make_check("pass_check"),
            _make_check("fail_check", status=FindingStatus.WARNING),
        ])
        events: list[tuple[str, str]] = []

        results = registry.run_all(
            paths=fake_system.paths,
            progress_callback=lambda event, cid, name, result: events.append((event, cid)),
        )

        assert [r.passed for r in results] == [True, False]
        assert events == [
            ("start", "pass_check"), ("complete", "pass_check"),
            ("start", "fail_check"), ("complete", "fail_check"),
        ]

    def test_run_all_with_check_ids(self, fake_system) -> None:
        registry = CheckRegistry.from_checks([_make_check("check_a"), _make_check("check_b")])
        results = registry.run_all(check_ids=["check_b"], paths=fake_system.paths)
        assert [r.check_id for r in results] == ["check_b"]

    def test_run_all_with_category(self, fake_system) -> None:
        registry = CheckRegistry.from_checks([
            _make_check("check_a", category_name="security"),
            _make_check("check_b", category_name="hardening"),
        ])
        results = registry.run_all(category="hardening", paths=fake_system.paths)
        assert [r.check_id for r in results] == ["check_b"]

    def test_run_all_unknown_check_id(self, fake_system) -> None:
        """Unknown ids produce a failed result instead of raising."""
        results = CheckRegistry().run_all(check_ids=["nope"], paths=fake_system.paths)
        assert len(results) == 1
        assert results[0].passed is False
        assert "not registered" in results[0].message


class TestDefaultRegistry:
    """Tests for the registry built from the shipped checks."""

    def test_contains_every_check_in_report_order(self) -> None:
        registry = build_default_registry()
        assert [check.id for check in registry.get_checks()] == [
            "namespace_isolation",
            "seccomp_status",
            "seccomp_support",
            "selinux_status",
            "apparmor_status",
        ]
        assert registry.get_categories() == ["security"]

    def test_builds_independent_tables(self) -> None:
        first = build_default_registry()
        first.register(_make_check("extra_check"))
        assert len(first) == 6
        assert len(build_default_registry()) == 5
