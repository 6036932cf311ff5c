"""Sink protocol and factory for githook result routing.

All sinks implement the ``LogSink`` protocol: ``sink_name``, ``notifies``
and ``log(result, subject, artifact_url)``.  ``build_sinks`` turns the job
configuration into the ordered list of sinks available for one dispatch.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from githook.core.errors import SinkError
from githook.models.hook_config import HookConfig
from githook.models.results import ExecutionResult

logger = logging.getLogger(__name__)


@runtime_checkable
class LogSink(Protocol):
    """Protocol that every githook sink must implement.

    Attributes
    ----------
    sink_name : str
        A short identifier for log lines (``"object_store"``, ``"email"``).
    notifies : bool
        ``True`` for notification sinks, which only run when the dispatch
        decides to notify.  Recording sinks run on every dispatch.
    """

    @property
    def sink_name(self) -> str:
        """Return the name of this sink."""
        ...

    @property
    def notifies(self) -> bool:
        """Return whether this sink is a notification sink."""
        ...

    def log(self, result: ExecutionResult, subject: str, artifact_url: str) -> str:
        """Record or deliver *result*.

        Parameters
        ----------
        result:
            The finished job.
        subject:
            One-line pass/fail summary for the run.
        artifact_url:
            URL of the result stored by an earlier sink, or ``""``.

        Returns
        -------
        str
            A retrieval URL for what was stored, or ``""``.

        Raises
        ------
        SinkError
            On delivery failure.  The dispatcher logs it and moves on.
        """
        ...


def build_sinks(
    config: HookConfig, log: logging.Logger | None = None
) -> list[LogSink]:
    """Return the sinks *config* enables, recording sinks first.

    Unconfigured sinks are skipped with an informational log line.  An
    object store whose bucket cannot be ensured is skipped with an error
    line; neither case is fatal.  Those lines, and the ones the sinks write
    later, go to *log* when given.
    """
    from githook.routing.sinks.email import EmailSink
    from githook.routing.sinks.object_store import ObjectStoreSink

    log = log or logger
    sinks: list[LogSink] = []

    if config.aws.is_configured:
        try:
            sinks.append(ObjectStoreSink.from_config(config.aws, log=log))
        except SinkError as exc:
            log.error(
                "Object store sink disabled: cannot ensure bucket %s: %s",
                config.aws.bucket,
                exc,
            )
    else:
        log.info("Object store sink not configured (Aws.Access/Secret/Bucket)")

    if config.email.is_configured:
        sinks.append(EmailSink.from_config(config.email, log=log))
    else:
        log.info("Email sink not configured (Email.From/To)")

    return sinks
