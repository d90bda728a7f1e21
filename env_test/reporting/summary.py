"""Run statistics and the human-readable summary."""

from dataclasses import dataclass
from typing import Optional

from ..discovery.registry import RunnableTest
from ..runner.result import TestResult, TestStatus


def format_duration(duration_ns: int) -> str:
    return f"{duration_ns / 1e6:.1f} ms"


@dataclass(frozen=True)
class TestEntry:
    """One recorded test, kept for machine-readable reports."""
    __test__ = False

    name: str
    status: TestStatus
    duration_ns: int
    skip_reason: Optional[str] = None
    error: Optional[str] = None


class ReportAggregator:
    """Accumulates per-test outcomes for one run."""

    def __init__(self):
        self.status_counts: dict[TestStatus, int] = {status: 0 for status in TestStatus}
        self.failed_tests: list[str] = []
        self.total_duration_ns = 0
        self.entries: list[TestEntry] = []

    @property
    def total_count(self) -> int:
        return sum(self.status_counts.values())

    @property
    def failed_count(self) -> int:
        return self.status_counts[TestStatus.FAIL]

    @property
    def all_passed(self) -> bool:
        """True when no recorded test failed."""
        return self.failed_count == 0

    def record(self, rt: RunnableTest, result: TestResult, duration_ns: int) -> None:
        """Fold one test outcome into the statistics."""
        self.status_counts[result.status] += 1
        self.total_duration_ns += duration_ns
        if result.status == TestStatus.FAIL:
            self.failed_tests.append(rt.display_name)

        self.entries.append(TestEntry(
            name=rt.display_name,
            status=result.status,
            duration_ns=duration_ns,
            skip_reason=result.skip_reason.value if result.skip_reason else None,
            error=result.error,
        ))

    @staticmethod
    def summary_line(
        rt: RunnableTest,
        result: TestResult,
        index: int,
        total: int,
        duration_ns: int,
    ) -> str:
        """Format the line printed after each test.

        Example: ``PASS [1/2] CpuTests.itimer took 1532.4 ms``
        """
        message = (
            f"{result.status.value} [{index}/{total}] {rt.display_name} "
            f"took {format_duration(duration_ns)}"
        )
        if result.cause is not None:
            message += f": {result.error}"
        return message

    def final_report(self) -> str:
        """Format the end-of-run summary."""
        lines = []
        if self.failed_tests:
            lines.append("")
            lines.append("Failed tests:")
            lines.extend(self.failed_tests)

        lines.append("")
        lines.append(f"Total test duration: {format_duration(self.total_duration_ns)}")
        lines.append("Results Summary:")
        lines.append(f"PASS: {self.status_counts[TestStatus.PASS]}")
        lines.append(f"SKIP: {self.status_counts[TestStatus.SKIP]}")
        lines.append(f"FAIL: {self.status_counts[TestStatus.FAIL]}")
        lines.append(f"TOTAL: {self.total_count}")
        return "\n".join(lines)
