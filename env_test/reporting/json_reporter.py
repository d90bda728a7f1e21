"""JSON report generator for test runs.

Generates structured JSON reports from run statistics.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..environment.platform import Environment
from ..runner.result import TestStatus
from .summary import ReportAggregator


class JsonReporter:
    """Generates JSON reports from test run statistics."""

    def generate(
        self,
        aggregator: ReportAggregator,
        environment: Environment,
    ) -> dict[str, Any]:
        """Generate a JSON report from a finished run.

        Args:
            aggregator: Statistics of the run.
            environment: Environment the tests were selected for.

        Returns:
            Report dictionary ready for JSON serialization.
        """
        counts = aggregator.status_counts

        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": environment.to_dict(),
            "status": "passed" if aggregator.all_passed else "failed",
            "summary": {
                "total": aggregator.total_count,
                "passed": counts[TestStatus.PASS],
                "skipped": counts[TestStatus.SKIP],
                "failed": counts[TestStatus.FAIL],
                "duration_ms": round(aggregator.total_duration_ns / 1e6, 1),
            },
            "tests": [
                {
                    "name": entry.name,
                    "status": entry.status.value,
                    "duration_ms": round(entry.duration_ns / 1e6, 1),
                    "skip_reason": entry.skip_reason,
                    "error": entry.error,
                }
                for entry in aggregator.entries
            ],
            "failed_tests": list(aggregator.failed_tests),
        }

    def save(self, report: dict[str, Any], path: Path) -> Path:
        """Save report to a JSON file.

        Args:
            report: Report dictionary.
            path: Output file path.

        Returns:
            Path to the saved file.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2, ensure_ascii=False)

        return path
