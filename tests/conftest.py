"""Shared test fixtures for githook."""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import timedelta
from pathlib import Path
from typing import Any
from urllib.parse import urlencode

import pytest

from githook.models.commands import CommandSpec
from githook.models.results import ExecutionResult, ExitStatus


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def write_config(tmp_dir: Path) -> Callable[..., Path]:
    """Factory fixture: write a job configuration file and return its path.

    Keyword arguments are top-level sections (``Repositories``, ``Aws``,
    ``Email``, ``Log``).
    """
    path = tmp_dir / "githook.json"

    def _factory(**sections: Any) -> Path:
        path.write_text(json.dumps(sections), encoding="utf-8")
        return path

    return _factory


@pytest.fixture
def make_webhook_body() -> Callable[[str], bytes]:
    """Factory fixture: build a form-encoded push webhook body for a repo."""

    def _factory(name: str) -> bytes:
        payload = json.dumps({"repository": {"name": name, "full_name": f"acme/{name}"}})
        return urlencode({"payload": payload}).encode("utf-8")

    return _factory


@pytest.fixture
def make_result() -> Callable[..., ExecutionResult]:
    """Factory fixture: build an ExecutionResult with sensible defaults."""

    def _factory(
        job_label: str = "repo1",
        succeeded: bool = True,
        **overrides: Any,
    ) -> ExecutionResult:
        defaults: dict[str, Any] = {
            "job_label": job_label,
            "exit_status": ExitStatus.SUCCESS if succeeded else ExitStatus.FAILURE,
            "exit_description": "exit status 0" if succeeded else "exit status 1",
            "stdout": b"building...\ndone\n",
            "stderr": b"" if succeeded else b"make: *** [all] Error 1\n",
            "duration": timedelta(seconds=1.5),
            "error": "" if succeeded else "exit status 1",
        }
        defaults.update(overrides)
        return ExecutionResult(**defaults)

    return _factory


class FakeExecutor:
    """Executor double returning a canned outcome and recording specs."""

    def __init__(self, succeeded: bool = True) -> None:
        self.succeeded = succeeded
        self.calls: list[CommandSpec] = []

    def execute(self, spec: CommandSpec, label: str = "") -> ExecutionResult:
        self.calls.append(spec)
        if self.succeeded:
            return ExecutionResult(
                job_label=label,
                exit_status=ExitStatus.SUCCESS,
                exit_description="exit status 0",
                stdout=b"ok\n",
                duration=timedelta(milliseconds=5),
            )
        return ExecutionResult(
            job_label=label,
            exit_status=ExitStatus.FAILURE,
            exit_description="exit status 2",
            stderr=b"boom\n",
            duration=timedelta(milliseconds=5),
            error="exit status 2",
        )


class RecordingSink:
    """Sink double recording every call; optionally returns a URL or raises."""

    def __init__(
        self,
        name: str,
        *,
        notifies: bool = False,
        url: str = "",
        error: Exception | None = None,
    ) -> None:
        self._name = name
        self._notifies = notifies
        self._url = url
        self._error = error
        self.calls: list[tuple[ExecutionResult, str, str]] = []

    @property
    def sink_name(self) -> str:
        return self._name

    @property
    def notifies(self) -> bool:
        return self._notifies

    def log(self, result: ExecutionResult, subject: str, artifact_url: str) -> str:
        self.calls.append((result, subject, artifact_url))
        if self._error is not None:
            raise self._error
        return self._url


@pytest.fixture
def fake_executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def failing_executor() -> FakeExecutor:
    return FakeExecutor(succeeded=False)


@pytest.fixture
def make_sink() -> Callable[..., RecordingSink]:
    """Factory fixture: build a RecordingSink."""

    def _factory(name: str = "recording", **kwargs: Any) -> RecordingSink:
        return RecordingSink(name, **kwargs)

    return _factory
