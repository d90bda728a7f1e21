"""Runner module - test selection and execution."""

from .result import SkipReason, TestResult, TestStatus
from .eligibility import in_skip_list, is_eligible, skip_reason
from .process import TestProcess
from .executor import TestRunner, execute

__all__ = [
    "SkipReason",
    "TestResult",
    "TestStatus",
    "in_skip_list",
    "is_eligible",
    "skip_reason",
    "TestProcess",
    "TestRunner",
    "execute",
]
