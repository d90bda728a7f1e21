"""env-test - environment-aware test runner for JVM tooling."""

from .discovery import test
from .environment import Arch, Jvm, Os

__version__ = "0.1.0"

__all__ = ["test", "Arch", "Jvm", "Os", "__version__"]
