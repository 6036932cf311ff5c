"""Execution result models (immutable once produced)."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ExitStatus(str, Enum):
    """Outcome of a job process."""

    SUCCESS = "success"
    FAILURE = "failure"


class ExecutionResult(BaseModel):
    """Captured outcome of one job run.

    ``exit_description`` mirrors what a shell would print: ``exit status 0``,
    ``exit status 2``, ``signal: SIGKILL``, or the launch failure text.
    ``error`` is empty on success and carries the failure cause otherwise.
    """

    model_config = ConfigDict(frozen=True)

    job_label: str
    exit_status: ExitStatus
    exit_description: str = ""
    stdout: bytes = b""
    stderr: bytes = b""
    duration: timedelta = timedelta(0)
    error: str = ""
    started_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def succeeded(self) -> bool:
        return self.exit_status is ExitStatus.SUCCESS

    @property
    def stdout_text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")

    @property
    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")


class SinkReport(BaseModel):
    """What one sink fan-out achieved."""

    model_config = ConfigDict(frozen=True)

    artifact_url: str = ""
    delivered: list[str] = []
    failed: list[str] = []
