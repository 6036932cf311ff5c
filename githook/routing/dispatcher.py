"""SinkDispatcher — routes a finished job to every applicable sink.

Sinks run in list order.  The first URL a sink returns is handed to every
later sink, which is how the email links to the stored log.  Sink failures
are logged and never stop the remaining sinks.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from githook.models.results import ExecutionResult, SinkReport

if TYPE_CHECKING:
    from githook.routing.sinks import LogSink

logger = logging.getLogger(__name__)


class SinkDispatcher:
    """Fans a result out to sinks, isolating failures.

    The dispatcher holds no per-dispatch state, so one instance serves any
    number of concurrent dispatches.

    Usage
    -----
    >>> dispatcher = SinkDispatcher()
    >>> report = dispatcher.dispatch(sinks, result, "Build passed for: repo", notify=False)
    >>> report.artifact_url
    """

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def dispatch(
        self,
        sinks: Sequence[LogSink],
        result: ExecutionResult,
        subject: str,
        *,
        notify: bool,
    ) -> SinkReport:
        """Send *result* to *sinks*.

        Notification sinks are skipped unless *notify* is true.  Returns the
        artifact URL (empty when no sink produced one) together with the
        names of the sinks that succeeded and failed.
        """
        artifact_url = ""
        delivered: list[str] = []
        failed: list[str] = []

        for sink in sinks:
            if sink.notifies and not notify:
                self._log.debug("Skipping notification sink %s", sink.sink_name)
                continue
            try:
                url = sink.log(result, subject, artifact_url)
            except Exception as exc:  # noqa: BLE001
                self._log.error(
                    "ERROR logging %s to %s: %s", result.job_label, sink.sink_name, exc
                )
                failed.append(sink.sink_name)
                continue
            delivered.append(sink.sink_name)
            if url and not artifact_url:
                artifact_url = url

        return SinkReport(artifact_url=artifact_url, delivered=delivered, failed=failed)
