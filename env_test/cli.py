"""CLI entry point for the test runner.

Usage:
    env-test run cpu alloc suites.lock.LockTests
    python -m env_test run cpu
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from .config import DEFAULT_LOG_FORMAT, LOG_LEVELS, load_config, parse_skip_list
from .discovery.resolver import resolve
from .environment.probe import EnvironmentProbe
from .errors import EnvTestError, TestsFailedError
from .runner.executor import TestRunner

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Set up console logging on stderr."""
    logging.basicConfig(format=fmt or DEFAULT_LOG_FORMAT, level=logging.INFO)

    if level:
        root = logging.getLogger()
        root.setLevel(level.upper())
        for handler in root.handlers:
            handler.setLevel(level.upper())


def fail(message: str) -> None:
    """Print an error on stderr and exit with status 1."""
    click.echo(f"ERROR: {message}", err=True)
    sys.exit(1)


path_type = click.Path(path_type=Path)


@click.group()
@click.version_option(package_name="env-test")
def main():
    """Environment-aware test runner for JVM tooling."""


@main.command()
@click.argument("names", nargs=-1, required=True)
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              envvar="TEST_CONFIG", help="YAML file with default options.")
@click.option("--log-dir", type=path_type, envvar="TEST_LOG_DIR",
              help="Keep per-test output in this directory.")
@click.option("--skip", envvar="TEST_SKIP",
              help="Comma-separated class or function names to skip.")
@click.option("--log-level", envvar="TEST_LOG_LEVEL",
              type=click.Choice(LOG_LEVELS, case_sensitive=False),
              help="Logging verbosity.")
@click.option("--log-format", envvar="TEST_LOG_FORMAT", help="Logging format string.")
@click.option("--java-home", type=path_type, envvar="JAVA_HOME", help="JVM under test.")
@click.option("--agent-path", type=path_type, envvar="TEST_AGENT_PATH",
              help="Agent library loaded into child JVMs.")
@click.option("--namespace", envvar="TEST_NAMESPACE",
              help="Package that short test-group names expand into.")
@click.option("--path", "paths", multiple=True,
              help="Directory added to the import path (repeatable).")
@click.option("--report", "report_path", type=path_type, envvar="TEST_REPORT",
              help="Write a JSON report to this file.")
def run(names, config_file, log_dir, skip, log_level, log_format, java_home,
        agent_path, namespace, paths, report_path):
    """Run the tests of one or more test groups.

    NAMES are fully qualified classes or modules, or short lowercase names
    expanded to <namespace>.<name>.<Name>Tests.
    """
    try:
        config = load_config(config_file).merged(
            log_dir=log_dir,
            skip=parse_skip_list(skip) if skip is not None else None,
            log_level=log_level,
            log_format=log_format,
            java_home=java_home,
            agent_path=agent_path,
            namespace=namespace,
            paths=list(paths) or None,
            report_path=report_path,
        )
    except EnvTestError as e:
        fail(str(e))

    configure_logging(config.log_level, config.log_format)

    for entry in reversed(config.paths):
        entry = str(Path(entry).resolve())
        if entry not in sys.path:
            sys.path.insert(0, entry)

    try:
        environment = EnvironmentProbe(java_home=config.java_home).detect()
        logger.info("Environment: %s", environment)

        tests = resolve(names, namespace=config.namespace)
        TestRunner(config, environment).run(tests)

    except TestsFailedError as e:
        fail(f"{e} ({len(e.failed)} failed)")

    except EnvTestError as e:
        fail(str(e))


@main.command()
@click.option("--java-home", type=path_type, envvar="JAVA_HOME", help="JVM to inspect.")
def env(java_home):
    """Print the detected environment."""
    configure_logging()
    try:
        environment = EnvironmentProbe(java_home=java_home).detect()
    except EnvTestError as e:
        fail(str(e))

    for key, value in environment.to_dict().items():
        click.echo(f"{key}: {value}")


if __name__ == "__main__":
    main()
