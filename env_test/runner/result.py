"""Per-test outcomes."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TestStatus(str, Enum):
    """Final status of a test case."""
    __test__ = False

    PASS = "PASS"
    SKIP = "SKIP"
    FAIL = "FAIL"


class SkipReason(str, Enum):
    """Why a test was skipped."""
    INELIGIBLE = "ineligible"  # declaration does not match the environment
    SKIP_LIST = "skip_list"


@dataclass(frozen=True)
class TestResult:
    """Outcome of one test execution.

    ``cause`` is the exception raised by a failed test, kept as-is for display.
    """
    __test__ = False

    status: TestStatus
    cause: Optional[BaseException] = None
    skip_reason: Optional[SkipReason] = None

    @classmethod
    def passed(cls) -> "TestResult":
        return cls(TestStatus.PASS)

    @classmethod
    def skipped(cls, reason: Optional[SkipReason] = None) -> "TestResult":
        return cls(TestStatus.SKIP, skip_reason=reason)

    @classmethod
    def failed(cls, cause: BaseException) -> "TestResult":
        return cls(TestStatus.FAIL, cause=cause)

    @property
    def error(self) -> Optional[str]:
        """Display form of the failure cause."""
        if self.cause is None:
            return None
        message = str(self.cause)
        name = type(self.cause).__name__
        return f"{name}: {message}" if message else name
