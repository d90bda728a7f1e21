"""Exception types raised by the runner.

Startup and discovery errors abort the run before any test executes.
TestsFailedError is raised only after the full report has been printed.
"""


class EnvTestError(Exception):
    """Base class for runner errors."""


class StartupError(EnvTestError):
    """The host environment could not be classified."""


class DiscoveryError(EnvTestError):
    """A test-group name could not be resolved."""


class ConfigError(EnvTestError):
    """Invalid runner configuration."""


class TestsFailedError(EnvTestError):
    """One or more tests ended in FAIL."""

    __test__ = False

    def __init__(self, failed: list[str]):
        self.failed = list(failed)
        super().__init__("One or more tests failed")
