from env_test.discovery import RunnableTest, TestSpec
from env_test.environment import Arch, Environment, Jvm, Os
from env_test.reporting import JsonReporter, ReportAggregator
from env_test.runner import SkipReason, TestResult, TestStatus


def runnable(method, **spec):
    return RunnableTest(
        spec=TestSpec(**spec).bind("CpuTests", method),
        function=lambda self, p: None,
        owner=object,
    )


def test_summary_lines():
    rt = runnable("itimer", args="interval=1ms")

    assert ReportAggregator.summary_line(rt, TestResult.passed(), 1, 3, 1_234_567) == (
        "PASS [1/3] CpuTests.itimer (interval=1ms) took 1.2 ms"
    )
    assert ReportAggregator.summary_line(rt, TestResult.skipped(), 2, 3, 40_000) == (
        "SKIP [2/3] CpuTests.itimer (interval=1ms) took 0.0 ms"
    )
    failed = TestResult.failed(AssertionError("expected 3 samples"))
    assert ReportAggregator.summary_line(rt, failed, 3, 3, 2_000_000_000) == (
        "FAIL [3/3] CpuTests.itimer (interval=1ms) took 2000.0 ms: AssertionError: expected 3 samples"
    )


def test_failure_without_message():
    rt = runnable("perf_events")
    line = ReportAggregator.summary_line(rt, TestResult.failed(TimeoutError()), 1, 1, 0)
    assert line.endswith("took 0.0 ms: TimeoutError")


def test_final_report_with_failures():
    aggregator = ReportAggregator()
    aggregator.record(runnable("itimer"), TestResult.passed(), 1_500_000)
    aggregator.record(runnable("wall"), TestResult.failed(ValueError("x")), 2_000_000)
    aggregator.record(runnable("ctimer"), TestResult.skipped(SkipReason.SKIP_LIST), 100_000)
    aggregator.record(runnable("lock"), TestResult.failed(ValueError("y")), 0)

    assert aggregator.failed_tests == ["CpuTests.wall", "CpuTests.lock"]
    assert not aggregator.all_passed
    assert aggregator.final_report() == "\n".join([
        "",
        "Failed tests:",
        "CpuTests.wall",
        "CpuTests.lock",
        "",
        "Total test duration: 3.6 ms",
        "Results Summary:",
        "PASS: 1",
        "SKIP: 1",
        "FAIL: 2",
        "TOTAL: 4",
    ])


def test_final_report_without_failures():
    aggregator = ReportAggregator()
    aggregator.record(runnable("itimer"), TestResult.passed(), 0)

    report = aggregator.final_report()
    assert "Failed tests" not in report
    assert report.startswith("\nTotal test duration: 0.0 ms\n")
    assert aggregator.all_passed


def test_empty_run():
    report = ReportAggregator().final_report()
    assert report.endswith("PASS: 0\nSKIP: 0\nFAIL: 0\nTOTAL: 0")


def test_json_report(tmp_path):
    aggregator = ReportAggregator()
    aggregator.record(runnable("itimer"), TestResult.passed(), 1_000_000)
    aggregator.record(runnable("wall"), TestResult.skipped(SkipReason.INELIGIBLE), 0)
    aggregator.record(runnable("lock"), TestResult.failed(ValueError("bad")), 0)
    env = Environment(Os.MACOS, Arch.ARM64, Jvm.ZING, 21)

    reporter = JsonReporter()
    report = reporter.generate(aggregator, env)

    assert report["status"] == "failed"
    assert report["environment"] == {
        "os": "macos", "arch": "arm64", "jvm": "zing", "version": 21, "java_home": None,
    }
    assert report["summary"] == {
        "total": 3, "passed": 1, "skipped": 1, "failed": 1, "duration_ms": 1.0,
    }
    assert report["tests"][1] == {
        "name": "CpuTests.wall",
        "status": TestStatus.SKIP.value,
        "duration_ms": 0.0,
        "skip_reason": "ineligible",
        "error": None,
    }
    assert report["tests"][2]["error"] == "ValueError: bad"

    path = reporter.save(report, tmp_path / "reports" / "run.json")
    assert path.exists()
