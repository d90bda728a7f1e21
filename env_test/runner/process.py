"""Per-test execution context.

Each test body receives a ``TestProcess``: a work directory for its output
and, when the declaration names a ``main_class``, a child JVM launched for
the test. The context is released after the test whatever the outcome.
"""

import logging
import shlex
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import IO, Optional, Union

from ..discovery.registry import TestSpec
from ..environment.platform import Os

logger = logging.getLogger(__name__)

STREAMS = ("stdout", "stderr")

# Seconds to wait for a terminated child before killing it
TERMINATE_TIMEOUT = 10


class TestProcess:
    """Work directory and optional child JVM for one test case."""

    __test__ = False

    def __init__(
        self,
        spec: TestSpec,
        os_type: Os,
        log_dir: Optional[Union[str, Path]] = None,
        *,
        java_home: Optional[Union[str, Path]] = None,
        agent_path: Optional[Union[str, Path]] = None,
    ):
        """Create the work directory and launch the child JVM if declared.

        Args:
            spec: Declaration of the test being run.
            os_type: Host OS; selects the launcher name.
            log_dir: Keep output here. None = temporary directory, removed on close.
            java_home: JVM used to launch ``spec.main_class``.
            agent_path: Agent library loaded with ``spec.agent_args``.
        """
        self.spec = spec
        self.os_type = os_type
        self.java_home = Path(java_home) if java_home else None
        self.agent_path = Path(agent_path) if agent_path else None

        if log_dir:
            self.work_dir = Path(log_dir)
            self.work_dir.mkdir(parents=True, exist_ok=True)
            self._keep_dir = True
        else:
            self.work_dir = Path(tempfile.mkdtemp(prefix="env-test-"))
            self._keep_dir = False

        self._proc: Optional[subprocess.Popen] = None
        self._logs: list[IO[bytes]] = []

        if spec.main_class:
            try:
                self._proc = self._launch()
            except BaseException:
                self.close()
                raise

    @property
    def java(self) -> str:
        """Path of the java launcher."""
        name = "java.exe" if self.os_type == Os.WINDOWS else "java"
        if self.java_home:
            return str(self.java_home / "bin" / name)
        return name

    @property
    def pid(self) -> Optional[int]:
        return self._proc.pid if self._proc else None

    def build_command(self) -> list[str]:
        """Command line of the child JVM."""
        cmd = [self.java]
        cmd.extend(shlex.split(self.spec.jvm_args))
        if self.agent_path:
            agent = f"-agentpath:{self.agent_path}"
            if self.spec.agent_args:
                agent += f"={self.spec.agent_args}"
            cmd.append(agent)
        cmd.append(self.spec.main_class)
        cmd.extend(shlex.split(self.spec.args))
        return cmd

    def _launch(self) -> subprocess.Popen:
        cmd = self.build_command()
        logger.debug("Launching %s", " ".join(cmd))

        for stream in STREAMS:
            self._logs.append(open(self.file(f"{stream}.log"), "wb"))

        return subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=self._logs[0],
            stderr=self._logs[1],
            cwd=self.work_dir,
        )

    def file(self, name: str) -> Path:
        """Path of a file inside the work directory."""
        return self.work_dir / name

    def wait_for_exit(self, timeout: Optional[float] = None) -> int:
        """Wait for the child JVM and return its exit status.

        Raises:
            RuntimeError: If no child JVM was launched.
            subprocess.TimeoutExpired: If it is still running after ``timeout``.
        """
        if self._proc is None:
            raise RuntimeError(f"{self.spec.display_name} has no child process")
        return self._proc.wait(timeout=timeout)

    def read_output(self, stream: str = "stdout") -> str:
        """Captured output of the child JVM."""
        if stream not in STREAMS:
            raise ValueError(f"Unknown stream '{stream}'. Must be one of: {', '.join(STREAMS)}")
        path = self.file(f"{stream}.log")
        if not path.exists():
            return ""
        return path.read_text(encoding="utf-8", errors="replace")

    def close(self) -> None:
        """Stop the child JVM and release the work directory."""
        if self._proc is not None:
            if self._proc.poll() is None:
                logger.debug("Terminating pid %d", self._proc.pid)
                self._proc.terminate()
                try:
                    self._proc.wait(timeout=TERMINATE_TIMEOUT)
                except subprocess.TimeoutExpired:
                    self._proc.kill()
                    self._proc.wait()
            self._proc = None

        for log in self._logs:
            log.close()
        self._logs = []

        if not self._keep_dir and self.work_dir.exists():
            shutil.rmtree(self.work_dir, ignore_errors=True)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
