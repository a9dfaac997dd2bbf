"""
CageScan Check: AppArmor Status

Inspects four independent AppArmor signals: the kernel build option,
the boot parameters, the runtime status of the apparmor module and the
profile attached to the current process. A failure to read one signal
never hides the others.
"""

from cagescan.core.check import BaseCheck, Finding, FindingStatus, Severity
from cagescan.core.kconfig import KernelConfigResolver
from cagescan.core.sources import read_text, strip_attr_value


def classify_boot_params(cmdline: str) -> FindingStatus:
    """Classify a kernel command line by its AppArmor parameters.

    Plain substring tests, checked in priority order: an enabling
    parameter wins over ``apparmor=0``.

    Returns:
        OK when enabled, WARNING when disabled, INFO when not specified
    """
    if "apparmor=1" in cmdline or "security=apparmor" in cmdline:
        return FindingStatus.OK
    if "apparmor=0" in cmdline:
        return FindingStatus.WARNING
    return FindingStatus.INFO


class AppArmorStatusCheck(BaseCheck):
    """Check AppArmor status and container profile."""

    id = "apparmor_status"
    name = "AppArmor Status"
    description = "Check AppArmor status and container profile"
    severity = Severity.MEDIUM
    remediation = (
        "Enable AppArmor and confine the container: remove apparmor=0 from "
        "the kernel command line, make sure the apparmor service is running, "
        "and do not start containers with --security-opt apparmor=unconfined."
    )

    CONFIG_KEY = "CONFIG_SECURITY_APPARMOR"

    def _kernel_config(self) -> Finding:
        option = KernelConfigResolver(self.paths).resolve(self.CONFIG_KEY)
        if not option.found:
            return Finding(
                kind="kernel_config",
                status=FindingStatus.UNKNOWN,
                message="AppArmor: kernel config not available",
            )
        return Finding(
            kind="kernel_config",
            status=FindingStatus.WARNING if option.value == "n" else FindingStatus.INFO,
            message=f"AppArmor: kernel config {option.key}={option.value}",
            value=option.value,
        )

    def _boot_params(self) -> Finding:
        raw = read_text(self.paths.cmdline)
        if raw is None:
            return Finding(
                kind="boot_params",
                status=FindingStatus.UNKNOWN,
                message=f"AppArmor: unable to read {self.paths.cmdline}",
            )

        params = raw.strip()
        status = classify_boot_params(raw)
        if status == FindingStatus.OK:
            message = f"AppArmor: enabled via boot parameter ({params})"
        elif status == FindingStatus.WARNING:
            message = "AppArmor: disabled via boot parameter"
        else:
            message = "AppArmor: no explicit AppArmor boot parameter found"
        return Finding(kind="boot_params", status=status, message=message, value=params)

    def _module_status(self) -> Finding:
        raw = read_text(self.paths.apparmor_enabled)
        if raw is None:
            return Finding(
                kind="module",
                status=FindingStatus.INFO,
                message="AppArmor: module not loaded",
            )

        value = raw.strip()
        if value == "Y":
            return Finding(kind="module", status=FindingStatus.OK,
                           message="AppArmor: module is enabled (runtime)", value=value)
        return Finding(kind="module", status=FindingStatus.WARNING,
                       message="AppArmor: module is loaded but disabled (runtime)", value=value)

    def _profile(self) -> Finding:
        raw = read_text(self.paths.self_attr_current)
        if raw is None:
            return Finding(
                kind="profile",
                status=FindingStatus.UNKNOWN,
                message="AppArmor: unable to read container profile",
            )

        profile = strip_attr_value(raw)
        if profile in ("", "unconfined"):
            return Finding(
                kind="profile",
                status=FindingStatus.WARNING,
                message="AppArmor: container is unconfined (no profile attached)",
                value=profile,
            )
        return Finding(
            kind="profile",
            status=FindingStatus.OK,
            message=f"AppArmor: container profile: {profile}",
            value=profile,
        )

    def collect(self) -> list[Finding]:
        return [
            self._kernel_config(),
            self._boot_params(),
            self._module_status(),
            self._profile(),
        ]
