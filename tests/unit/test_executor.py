"""Unit tests for JobExecutor — capture, exit status, launch failures."""

from __future__ import annotations

import logging
import os
import sys
from datetime import timedelta
from pathlib import Path

from githook.core.executor import JobExecutor, describe_returncode
from githook.models.commands import CommandSpec
from githook.models.results import ExitStatus


def _python(code: str, cwd: Path | str) -> CommandSpec:
    return CommandSpec(executable=sys.executable, arguments=["-c", code], working_directory=str(cwd))


class TestDescribeReturncode:
    def test_exit_codes(self):
        assert describe_returncode(0) == "exit status 0"
        assert describe_returncode(3) == "exit status 3"

    def test_signals(self):
        assert describe_returncode(-9) == "signal: SIGKILL"


class TestJobExecutor:
    def test_success_captures_stdout(self, tmp_dir):
        result = JobExecutor().execute(_python("print('hello')", tmp_dir), label="repo1")

        assert result.exit_status is ExitStatus.SUCCESS
        assert result.succeeded
        assert result.stdout == b"hello\n"
        assert result.error == ""
        assert result.job_label == "repo1"
        assert result.duration > timedelta(0)

    def test_nonzero_exit_is_failure_with_output(self, tmp_dir):
        code = "import sys; print('partial'); sys.stderr.write('bad\\n'); sys.exit(3)"
        result = JobExecutor().execute(_python(code, tmp_dir))

        assert result.exit_status is ExitStatus.FAILURE
        assert result.exit_description == "exit status 3"
        assert "exit status 3" in result.error
        assert result.stdout == b"partial\n"
        assert result.stderr == b"bad\n"

    def test_killed_by_signal(self, tmp_dir):
        code = "import os, signal; os.kill(os.getpid(), signal.SIGKILL)"
        result = JobExecutor().execute(_python(code, tmp_dir))

        assert not result.succeeded
        assert result.exit_description == "signal: SIGKILL"

    def test_missing_executable_is_failure_not_exception(self, tmp_dir):
        spec = CommandSpec(
            executable=str(tmp_dir / "no-such-script"), working_directory=str(tmp_dir)
        )
        result = JobExecutor().execute(spec, label="repo1")

        assert not result.succeeded
        assert "no-such-script" in result.error
        assert result.stdout == b""

    def test_launch_failure_logged_to_given_logger(self, tmp_dir, caplog):
        log = logging.getLogger("tests.githook.executor")
        spec = CommandSpec(
            executable=str(tmp_dir / "no-such-script"), working_directory=str(tmp_dir)
        )
        with caplog.at_level(logging.DEBUG, logger="tests.githook.executor"):
            JobExecutor(log=log).execute(spec, label="repo1")

        [record] = [r for r in caplog.records if r.name == "tests.githook.executor"]
        assert "Launch failed for repo1" in record.getMessage()

    def test_non_executable_file_is_failure(self, tmp_dir):
        script = tmp_dir / "build.sh"
        script.write_text("#!/bin/sh\necho hi\n")
        os.chmod(script, 0o644)
        result = JobExecutor().execute(
            CommandSpec(executable=str(script), working_directory=str(tmp_dir))
        )

        assert not result.succeeded
        assert result.error

    def test_missing_working_directory_is_failure(self, tmp_dir):
        spec = _python("print('x')", tmp_dir / "gone")
        result = JobExecutor().execute(spec)

        assert not result.succeeded
        assert result.error

    def test_runs_in_working_directory(self, tmp_dir):
        result = JobExecutor().execute(_python("import os; print(os.getcwd())", tmp_dir))

        assert Path(result.stdout_text.strip()).resolve() == tmp_dir.resolve()

    def test_label_defaults_to_executable(self, tmp_dir):
        result = JobExecutor().execute(_python("pass", tmp_dir))
        assert result.job_label == sys.executable

    def test_arguments_are_not_shell_expanded(self, tmp_dir):
        result = JobExecutor().execute(
            CommandSpec(
                executable=sys.executable,
                arguments=["-c", "import sys; print(sys.argv[1])", "$(whoami) && ls"],
                working_directory=str(tmp_dir),
            )
        )
        assert result.stdout_text.strip() == "$(whoami) && ls"
