"""Shared formatting helpers for githook sinks.

Keeps the stored log and the email body identical so a reader of either
sees the same summary.
"""

from __future__ import annotations

from githook.models.results import ExecutionResult


def format_status_label(result: ExecutionResult) -> str:
    """Return ``PASSED`` or ``FAILED``.

    Examples
    --------
    >>> from githook.models.results import ExecutionResult, ExitStatus
    >>> format_status_label(ExecutionResult(job_label="r", exit_status=ExitStatus.SUCCESS))
    'PASSED'
    """
    return "PASSED" if result.succeeded else "FAILED"


def format_duration(result: ExecutionResult) -> str:
    return f"{result.duration.total_seconds():.3f}s"


def format_summary(result: ExecutionResult) -> str:
    """Render the full plain-text summary of a result, output included."""
    lines: list[str] = [
        f"Job:      {result.job_label}",
        f"Result:   {format_status_label(result)}",
        f"Status:   {result.exit_description}",
        f"Started:  {result.started_at.isoformat()}",
        f"Duration: {format_duration(result)}",
    ]
    if result.error:
        lines.append(f"Error:    {result.error}")

    lines.append("")
    lines.append("--- stdout ---")
    lines.append(result.stdout_text)
    lines.append("--- stderr ---")
    lines.append(result.stderr_text)
    return "\n".join(lines)
