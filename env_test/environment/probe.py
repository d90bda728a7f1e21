"""Host environment detection.

Reads the system properties of the JVM under test and classifies the host
OS, CPU architecture, JVM implementation and JVM version.
"""

import logging
import os
import re
import shutil
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Union

from ..errors import StartupError
from .platform import Arch, Environment, Jvm, Os

logger = logging.getLogger(__name__)

OS_NAME = "os.name"
OS_ARCH = "os.arch"
JAVA_HOME = "java.home"
VM_SPEC_VERSION = "java.vm.specification.version"

REQUIRED_PROPERTIES = (OS_NAME, OS_ARCH, JAVA_HOME, VM_SPEC_VERSION)

# Order matters: the first matching token wins
_OS_TOKENS = (
    ("linux", Os.LINUX),
    ("mac", Os.MACOS),
    ("windows", Os.WINDOWS),
)

_ARCH_TOKENS = (
    ("x86_64", Arch.X64),
    ("amd64", Arch.X64),
    ("aarch64", Arch.ARM64),
    ("arm", Arch.ARM32),
    ("ppc64le", Arch.PPC64LE),
    ("riscv64", Arch.RISCV64),
    ("loongarch64", Arch.LOONGARCH64),
)

OPENJ9_MARKER = "J9TraceFormat.dat"
ZING_MARKER = Path("etc") / "zing"

_PROPERTY_LINE = re.compile(r"^\s+([\w.]+) = (.*)$")

PROPERTIES_TIMEOUT = 60


def detect_os(name: str) -> Os:
    """Classify an ``os.name`` value."""
    lowered = name.lower()
    for token, value in _OS_TOKENS:
        if token in lowered:
            return value
    raise StartupError(f"Unknown OS type: {name!r}")


def detect_arch(arch: str) -> Arch:
    """Classify an ``os.arch`` value."""
    lowered = arch.lower()
    for token, value in _ARCH_TOKENS:
        if token in lowered:
            return value
    if lowered.endswith("86"):
        return Arch.X86
    raise StartupError(f"Unknown CPU architecture: {arch!r}")


def parse_vm_version(value: str) -> int:
    """Parse ``java.vm.specification.version`` ("1.8" -> 8, "17" -> 17)."""
    text = value.strip()
    if text.startswith("1."):
        text = text[2:]
    try:
        return int(text)
    except ValueError:
        raise StartupError(f"Malformed JVM version: {value!r}") from None


def _has_openj9_marker(lib_dir: Path) -> bool:
    # An unreadable lib directory counts as no marker
    try:
        return any(f.name == OPENJ9_MARKER for f in lib_dir.iterdir())
    except OSError:
        return False


def detect_jvm(java_home: Union[str, Path], version: int, os_type: Os) -> Jvm:
    """Identify the JVM implementation installed under ``java_home``.

    Example java_home: /usr/lib/jvm/amazon-corretto-17.0.8.7.1-linux-x64
    """
    java_home = Path(java_home)

    if _has_openj9_marker(java_home / "lib"):
        return Jvm.OPENJ9

    # JDK 8 reports <jdk>/jre as java.home
    if version <= 8:
        java_home = java_home.parent

    # Contents/Home bundle layout on macOS
    if os_type == Os.MACOS:
        java_home = java_home.parent

    if (java_home / ZING_MARKER).exists():
        return Jvm.ZING

    # No marker: some flavour of HotSpot
    return Jvm.HOTSPOT


def java_executable(java_home: Optional[Union[str, Path]] = None) -> Optional[str]:
    """Locate the java launcher for ``java_home``, or on PATH."""
    if java_home:
        bin_dir = Path(java_home) / "bin"
        for name in ("java", "java.exe"):
            candidate = bin_dir / name
            if candidate.exists():
                return str(candidate)
        return None
    return shutil.which("java")


def parse_properties_output(output: str) -> dict[str, str]:
    """Parse ``-XshowSettings:properties`` output into a dict.

    Continuation lines of multi-valued properties are ignored.
    """
    properties: dict[str, str] = {}
    for line in output.splitlines():
        match = _PROPERTY_LINE.match(line)
        if match:
            properties[match.group(1)] = match.group(2).strip()
    return properties


def load_runtime_properties(java_home: Optional[Union[str, Path]] = None) -> dict[str, str]:
    """Read system properties from the JVM under test.

    Raises:
        StartupError: If no JVM is found or it does not report its properties.
    """
    java = java_executable(java_home)
    if java is None:
        where = f"under {java_home}" if java_home else "on PATH"
        raise StartupError(f"No java executable found {where}. Set JAVA_HOME.")

    logger.debug("Reading JVM properties from %s", java)
    try:
        result = subprocess.run(
            [java, "-XshowSettings:properties", "-version"],
            capture_output=True,
            text=True,
            timeout=PROPERTIES_TIMEOUT,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        raise StartupError(f"Failed to run {java}: {e}") from e

    if result.returncode != 0:
        raise StartupError(
            f"{java} exited with status {result.returncode}: {result.stderr.strip()}"
        )

    # The settings dump goes to stderr
    properties = parse_properties_output(result.stderr or result.stdout)
    missing = [p for p in REQUIRED_PROPERTIES if p not in properties]
    if missing:
        raise StartupError(f"{java} did not report: {', '.join(missing)}")
    return properties


class EnvironmentProbe:
    """Detects the host environment once and remembers it."""

    def __init__(
        self,
        java_home: Optional[Union[str, Path]] = None,
        properties: Optional[Mapping[str, str]] = None,
    ):
        """Initialize the probe.

        Args:
            java_home: JVM under test. Defaults to $JAVA_HOME, then PATH.
            properties: Pre-read JVM properties; skips launching java.
        """
        self.java_home = java_home or os.environ.get("JAVA_HOME") or None
        self._properties = dict(properties) if properties is not None else None
        self._environment: Optional[Environment] = None

    def detect(self) -> Environment:
        """Detect the environment on first call; return the cached one after."""
        if self._environment is None:
            self._environment = self._detect()
            logger.debug("Detected environment: %s", self._environment)
        return self._environment

    def _detect(self) -> Environment:
        properties = self._properties
        if properties is None:
            properties = load_runtime_properties(self.java_home)

        missing = [p for p in REQUIRED_PROPERTIES if p not in properties]
        if missing:
            raise StartupError(f"Missing JVM properties: {', '.join(missing)}")

        os_type = detect_os(properties[OS_NAME])
        arch = detect_arch(properties[OS_ARCH])
        version = parse_vm_version(properties[VM_SPEC_VERSION])
        java_home = Path(properties[JAVA_HOME])
        jvm = detect_jvm(java_home, version, os_type)

        return Environment(
            os=os_type,
            arch=arch,
            jvm=jvm,
            version=version,
            java_home=java_home,
        )
