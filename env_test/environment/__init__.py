"""Environment module - host and JVM detection."""

from .platform import Arch, Environment, Jvm, Os
from .probe import (
    EnvironmentProbe,
    detect_arch,
    detect_jvm,
    detect_os,
    load_runtime_properties,
    parse_vm_version,
)

__all__ = [
    "Arch",
    "Environment",
    "Jvm",
    "Os",
    "EnvironmentProbe",
    "detect_arch",
    "detect_jvm",
    "detect_os",
    "load_runtime_properties",
    "parse_vm_version",
]
