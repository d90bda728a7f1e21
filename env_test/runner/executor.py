"""Test executor - runs test cases one at a time.

For every discovered test:
1. Check the skip list and the declared constraints
2. Open the test's execution context
3. Instantiate the owner class when needed and call the test body
4. Turn any exception into a FAIL result
5. Record and print the outcome
"""

import logging
import time
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, AbstractSet, Callable, ContextManager, Optional, Sequence

import click

from ..config import RunnerConfig
from ..discovery.registry import RunnableTest, TestSpec
from ..environment.platform import Environment, Os
from ..errors import TestsFailedError
from .eligibility import skip_reason
from .process import TestProcess
from .result import TestResult

if TYPE_CHECKING:
    from ..reporting.summary import ReportAggregator

logger = logging.getLogger(__name__)

ContextFactory = Callable[[TestSpec, Os, Optional[Path]], ContextManager]


def _invoke(
    rt: RunnableTest,
    env: Environment,
    log_dir: Optional[Path],
    context_factory: ContextFactory,
) -> TestResult:
    test_log_dir = log_dir / rt.test_name if log_dir else None
    try:
        with context_factory(rt.spec, env.os, test_log_dir) as context:
            if rt.instance_bound:
                holder = rt.owner()
                rt.function(holder, context)
            else:
                rt.function(context)
    except Exception as e:
        logger.debug("%s failed", rt.display_name, exc_info=True)
        return TestResult.failed(e)
    return TestResult.passed()


def execute(
    rt: RunnableTest,
    env: Environment,
    skip: AbstractSet[str],
    log_dir: Optional[Path] = None,
    context_factory: ContextFactory = TestProcess,
) -> tuple[TestResult, int]:
    """Run one test case.

    Never raises for a failing test; the exception becomes the result's cause.

    Args:
        rt: Test to run.
        env: Detected environment.
        skip: Lowercased class or function names to skip.
        log_dir: Root of per-test output directories. None = no kept output.
        context_factory: Builds the execution context passed to the test body.

    Returns:
        (result, duration in nanoseconds)
    """
    start = time.perf_counter_ns()

    reason = skip_reason(rt.spec, env, skip)
    if reason is not None:
        result = TestResult.skipped(reason)
    else:
        logger.info("Running %s...", rt.display_name)
        result = _invoke(rt, env, log_dir, context_factory)

    return result, time.perf_counter_ns() - start


class TestRunner:
    """Runs discovered tests sequentially and reports the outcome."""

    __test__ = False

    def __init__(
        self,
        config: RunnerConfig,
        environment: Environment,
        context_factory: Optional[ContextFactory] = None,
        echo: Callable[[str], None] = click.echo,
    ):
        """Initialize the runner.

        Args:
            config: Runner configuration.
            environment: Detected environment.
            context_factory: Execution context builder. Default: TestProcess
                using the detected JVM and the configured agent.
            echo: Output for result lines and the summary.
        """
        self.config = config
        self.environment = environment
        self.context_factory = context_factory or partial(
            TestProcess,
            java_home=environment.java_home,
            agent_path=config.agent_path,
        )
        self.echo = echo

    def run(self, tests: Sequence[RunnableTest]) -> "ReportAggregator":
        """Run ``tests`` in order and print one line per test plus a summary.

        Raises:
            TestsFailedError: After the summary, if any test failed.
        """
        from ..reporting.summary import ReportAggregator

        aggregator = ReportAggregator()
        total = len(tests)

        for index, rt in enumerate(tests, start=1):
            result, duration_ns = execute(
                rt,
                self.environment,
                self.config.skip,
                self.config.log_dir,
                self.context_factory,
            )
            aggregator.record(rt, result, duration_ns)
            self.echo(aggregator.summary_line(rt, result, index, total, duration_ns))

        self.echo(aggregator.final_report())

        if self.config.report_path:
            self._save_report(aggregator)

        if self.config.log_dir:
            logger.info(
                "Test output is available in %s directory", self.config.log_dir
            )

        if not aggregator.all_passed:
            raise TestsFailedError(aggregator.failed_tests)

        return aggregator

    def _save_report(self, aggregator: "ReportAggregator") -> Optional[Path]:
        """Save the JSON report; a write error is logged, not raised."""
        from ..reporting.json_reporter import JsonReporter

        reporter = JsonReporter()
        report = reporter.generate(aggregator, self.environment)
        try:
            saved_path = reporter.save(report, self.config.report_path)
        except OSError as e:
            logger.warning("Failed to save report: %s", e)
            return None
        logger.info("Report saved: %s", saved_path)
        return saved_path
