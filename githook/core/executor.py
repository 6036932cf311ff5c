"""JobExecutor — runs a command to completion and captures its outcome.

Execution is blocking here; the coordinator is what moves it off the
request path.  Every failure mode ends up in the returned
``ExecutionResult``; nothing is raised past :meth:`JobExecutor.execute`.
"""

from __future__ import annotations

import logging
import signal
import subprocess
import time
from datetime import datetime, timedelta, timezone

from githook.core.errors import ExecutionError
from githook.models.commands import CommandSpec
from githook.models.results import ExecutionResult, ExitStatus

logger = logging.getLogger(__name__)


def describe_returncode(returncode: int) -> str:
    """Return ``exit status N`` or ``signal: NAME`` for a process return code."""
    if returncode < 0:
        try:
            name = signal.Signals(-returncode).name
        except ValueError:
            name = str(-returncode)
        return f"signal: {name}"
    return f"exit status {returncode}"


class JobExecutor:
    """Launches job processes and records stdout, stderr, status and duration."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def execute(self, spec: CommandSpec, label: str = "") -> ExecutionResult:
        """Run *spec* and wait for it to exit.

        Parameters
        ----------
        spec:
            The command to launch.
        label:
            Job label recorded on the result; defaults to the executable.
        """
        job_label = label or spec.executable
        started_at = datetime.now(timezone.utc)
        start = time.monotonic()

        try:
            completed = subprocess.run(
                spec.argv,
                cwd=spec.working_directory or None,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                check=False,
            )
        except (OSError, ValueError, subprocess.SubprocessError) as exc:
            duration = timedelta(seconds=time.monotonic() - start)
            cause = ExecutionError(f"{spec.executable}: {exc}")
            self._log.debug("Launch failed for %s: %s", job_label, cause)
            return ExecutionResult(
                job_label=job_label,
                exit_status=ExitStatus.FAILURE,
                exit_description=str(cause),
                duration=duration,
                error=str(cause),
                started_at=started_at,
            )

        duration = timedelta(seconds=time.monotonic() - start)
        description = describe_returncode(completed.returncode)

        if completed.returncode != 0:
            return ExecutionResult(
                job_label=job_label,
                exit_status=ExitStatus.FAILURE,
                exit_description=description,
                stdout=completed.stdout or b"",
                stderr=completed.stderr or b"",
                duration=duration,
                error=str(ExecutionError(description)),
                started_at=started_at,
            )

        return ExecutionResult(
            job_label=job_label,
            exit_status=ExitStatus.SUCCESS,
            exit_description=description,
            stdout=completed.stdout or b"",
            stderr=completed.stderr or b"",
            duration=duration,
            started_at=started_at,
        )
