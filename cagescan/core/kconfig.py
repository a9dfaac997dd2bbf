"""
CageScan - Kernel Config Resolver

Looks up kernel build options in the running kernel's configuration.
Sources are tried in order: the compressed snapshot exposed at
/proc/config.gz (needs CONFIG_IKCONFIG_PROC), then the plain-text
/boot/config-<release> installed alongside the kernel.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
import gzip
from typing import Iterable, Optional
import zlib

from .sources import ProbePaths, read_text


class ConfigSourceUnavailable(Exception):
    """Raised by a config source that cannot be opened or decoded."""


@dataclass(frozen=True)
class ConfigOption:
    """A kernel build option and its configured value.

    Attributes:
        key: Option name (e.g. "CONFIG_SECCOMP")
        value: "y", "m", "n", a literal, or None when not found
        source: Name of the source that answered, if any
        unavailable: "name: reason" for each source skipped as unreadable
    """
    key: str
    value: Optional[str] = None
    source: Optional[str] = None
    unavailable: tuple[str, ...] = ()

    @property
    def found(self) -> bool:
        return self.value is not None

    @property
    def enabled(self) -> bool:
        """True for built-in ("y") or module ("m") options."""
        return self.value in ("y", "m")


def match_config_line(line: str, key: str) -> Optional[str]:
    """Match one config line against an option key.

    Kernel config lines look like ``CONFIG_FOO=y`` or
    ``# CONFIG_FOO is not set``.

    Args:
        line: Config line without its trailing newline
        key: Option name to match

    Returns:
        The value as written, "n" for an unset option, or None
    """
    prefix = f"{key}="
    if line.startswith(prefix):
        return line[len(prefix):]
    if line == f"# {key} is not set":
        return "n"
    return None


def scan_config_lines(lines: Iterable[str], key: str) -> Optional[str]:
    """Return the value from the first line setting ``key``."""
    for raw_line in lines:
        value = match_config_line(raw_line.rstrip("\n"), key)
        if value is not None:
            return value
    return None


class ConfigSource(ABC):
    """One place a kernel config may be found."""

    name: str = ""

    def __init__(self, paths: ProbePaths) -> None:
        self._paths = paths

    @abstractmethod
    def lookup(self, key: str) -> Optional[str]:
        """Look up ``key`` in this source.

        Returns:
            The option value, or None if the source was read but lacks the key

        Raises:
            ConfigSourceUnavailable: If the source cannot be read
        """
        pass


class CompressedConfigSource(ConfigSource):
    """The gzip-compressed snapshot at /proc/config.gz."""

    name = "config.gz"

    def lookup(self, key: str) -> Optional[str]:
        path = self._paths.config_gz
        try:
            # Text mode folds CRLF endings to "\n", matching line-based scanning.
            with gzip.open(path, "rt", encoding="utf-8", errors="replace") as f:
                return scan_config_lines(f, key)
        except (OSError, EOFError, zlib.error) as e:
            # BadGzipFile is an OSError; truncated streams raise EOFError.
            raise ConfigSourceUnavailable(f"{path}: {e}") from e


class BootConfigSource(ConfigSource):
    """The plain-text /boot/config-<release> for the running kernel."""

    name = "boot"

    def lookup(self, key: str) -> Optional[str]:
        release = read_kernel_release(self._paths)
        if release is None:
            raise ConfigSourceUnavailable(f"{self._paths.osrelease}: unreadable")

        path = self._paths.boot_config(release)
        try:
            # Text mode folds CRLF endings to "\n", matching line-based scanning.
            with open(path, "r", encoding="utf-8", errors="replace") as f:
                return scan_config_lines(f, key)
        except OSError as e:
            raise ConfigSourceUnavailable(f"{path}: {e}") from e


class KernelConfigResolver:
    """Resolve kernel build options from an ordered chain of sources.

    The first source that can be read is authoritative: if it lacks the
    key, the option is reported as not found and later sources are not
    consulted. Sources that cannot be read are skipped and listed on the
    returned option. Nothing is cached, every call re-reads the filesystem.

    Example:
        resolver = KernelConfigResolver(ProbePaths())
        option = resolver.resolve("CONFIG_SECCOMP")
        if option.found:
            print(option.value)
    """

    def __init__(
        self,
        paths: Optional[ProbePaths] = None,
        sources: Optional[list[ConfigSource]] = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            paths: Filesystem locations (defaults to the live system)
            sources: Ordered source chain (defaults to config.gz then boot)
        """
        self._paths = paths or ProbePaths()
        if sources is None:
            sources = [
                CompressedConfigSource(self._paths),
                BootConfigSource(self._paths),
            ]
        self._sources = sources

    @property
    def sources(self) -> list[ConfigSource]:
        return list(self._sources)

    def resolve(self, key: str) -> ConfigOption:
        """Resolve a single option.

        Args:
            key: Option name (e.g. "CONFIG_SECURITY_APPARMOR")

        Returns:
            ConfigOption whose value is None when the key was not found
        """
        unavailable: list[str] = []
        for source in self._sources:
            try:
                value = source.lookup(key)
            except ConfigSourceUnavailable as e:
                unavailable.append(f"{source.name}: {e}")
                continue
            if value is None:
                return ConfigOption(key=key, unavailable=tuple(unavailable))
            return ConfigOption(
                key=key,
                value=value,
                source=source.name,
                unavailable=tuple(unavailable),
            )
        return ConfigOption(key=key, unavailable=tuple(unavailable))


def read_kernel_release(paths: ProbePaths) -> Optional[str]:
    """Read the running kernel's release string.

    Returns:
        Release (e.g. "6.8.0-45-generic"), or None if unreadable or empty
    """
    raw = read_text(paths.osrelease)
    if raw is None:
        return None
    release = raw.strip()
    return release or None


def resolve_config_option(key: str, paths: Optional[ProbePaths] = None) -> ConfigOption:
    """Resolve ``key`` using the default source chain."""
    return KernelConfigResolver(paths).resolve(key)
