"""Environment facts used to select tests.

All values are detected once per run and never change afterwards.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class Os(str, Enum):
    """Operating system families."""
    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"


class Arch(str, Enum):
    """CPU architectures."""
    X64 = "x64"
    ARM64 = "arm64"
    ARM32 = "arm32"
    PPC64LE = "ppc64le"
    RISCV64 = "riscv64"
    LOONGARCH64 = "loongarch64"
    X86 = "x86"


class Jvm(str, Enum):
    """JVM implementations."""
    HOTSPOT = "hotspot"
    OPENJ9 = "openj9"
    ZING = "zing"


@dataclass(frozen=True)
class Environment:
    """Detected host environment."""
    os: Os
    arch: Arch
    jvm: Jvm
    version: int
    java_home: Optional[Path] = None

    def to_dict(self) -> dict:
        return {
            "os": self.os.value,
            "arch": self.arch.value,
            "jvm": self.jvm.value,
            "version": self.version,
            "java_home": str(self.java_home) if self.java_home else None,
        }

    def __str__(self) -> str:
        return f"{self.os.value}-{self.arch.value} {self.jvm.value} {self.version}"
