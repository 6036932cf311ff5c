"""DispatchCoordinator — the webhook-to-build pipeline.

One dispatch moves through ``Received -> Resolved -> Dispatched`` on the
caller's thread and then finishes (``Succeeded`` or ``Failed``) on a worker
thread:

1. decode the request body into a repository name;
2. load the job configuration (fresh from disk every time) and resolve the
   repository to a command;
3. answer the caller with an acknowledgment naming the repository;
4. run the command on the worker pool, or on a thread of its own when every
   worker is busy, so no job waits behind another;
5. fan the result out to the configured sinks, recording sinks first, and
   notification sinks only when the run failed or ``Email.Always`` is set;
6. log a final pass/fail line.

Only steps 1 and 2 can fail visibly to the caller.  Everything after the
acknowledgment is reported through sinks and the process log.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

from githook.core.decoder import RequestDecoder
from githook.core.errors import CoordinatorClosed, DecodeError, GithookError
from githook.core.executor import JobExecutor
from githook.core.resolver import CommandResolver
from githook.models.commands import CommandSpec
from githook.models.hook_config import HookConfig
from githook.models.results import ExecutionResult
from githook.routing.dispatcher import SinkDispatcher
from githook.routing.sinks import LogSink, build_sinks

logger = logging.getLogger(__name__)

SinkFactory = Callable[[HookConfig, logging.Logger], Sequence[LogSink]]


def format_error(exc: GithookError) -> str:
    """Render a synchronous failure as response text."""
    return f"ERROR {type(exc).__name__}: {exc}"


class Dispatch:
    """Handle for one dispatch.

    ``response`` is what the transport sends back.  ``future`` resolves to
    the ``ExecutionResult`` once the job and its sinks are done; it is
    ``None`` when the request was rejected before anything was started.
    """

    def __init__(
        self,
        repository: str,
        response: bytes,
        future: Future[ExecutionResult] | None = None,
    ) -> None:
        self.repository = repository
        self.response = response
        self.future = future

    @property
    def accepted(self) -> bool:
        return self.future is not None

    def wait(self, timeout: float | None = None) -> ExecutionResult | None:
        """Block until the background work finishes and return its result."""
        if self.future is None:
            return None
        return self.future.result(timeout=timeout)

    def __repr__(self) -> str:
        return f"Dispatch(repository={self.repository!r}, accepted={self.accepted})"


class DispatchCoordinator:
    """Turns webhook requests into background job runs.

    Satisfies the transport ``RequestHandler`` protocol through
    :meth:`handle`, so the HTTP and relay adapters share it unchanged.

    Parameters
    ----------
    config_path:
        Job configuration file, re-read on every dispatch.
    decoder, resolver, executor:
        Pipeline stages; defaults are the standard implementations.
    sink_factory:
        Builds the sink list from a loaded configuration; called with the
        configuration and the pipeline logger.
    dispatcher:
        Sink fan-out; defaults to a ``SinkDispatcher`` on the same logger.
    max_workers:
        Size of the worker pool running jobs.  Jobs dispatched while every
        worker is busy get a dedicated thread instead of queueing.
    log:
        Destination for every pipeline log line.
    """

    def __init__(
        self,
        config_path: Path | str,
        *,
        decoder: RequestDecoder | None = None,
        resolver: CommandResolver | None = None,
        executor: JobExecutor | None = None,
        sink_factory: SinkFactory = build_sinks,
        dispatcher: SinkDispatcher | None = None,
        max_workers: int = 32,
        log: logging.Logger | None = None,
    ) -> None:
        self.config_path = Path(config_path)
        self._log = log or logger
        self._decoder = decoder or RequestDecoder()
        self._resolver = resolver or CommandResolver()
        self._executor = executor or JobExecutor(log=self._log)
        self._sink_factory = sink_factory
        self._dispatcher = dispatcher or SinkDispatcher(self._log)
        self._max_workers = max_workers
        self._pool = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="githook-job"
        )
        self._lock = threading.Lock()
        self._in_flight = 0
        self._closed = False
        self._detached: set[threading.Thread] = set()

    # ------------------------------------------------------------------
    # Transport entry points
    # ------------------------------------------------------------------

    def handle(self, request: bytes) -> bytes:
        """Process one raw request body and return the response body."""
        return self.dispatch(request).response

    def dispatch(self, request: bytes) -> Dispatch:
        """Decode *request* and dispatch the repository it names."""
        try:
            repository = self._decoder.decode(request)
        except DecodeError as exc:
            return self._reject("", exc)
        return self.dispatch_repository(repository)

    def dispatch_repository(self, repository: str) -> Dispatch:
        """Resolve *repository* and start its job in the background."""
        try:
            self._ensure_open(repository)
            config, spec = self._prepare(repository)
        except GithookError as exc:
            return self._reject(repository, exc)

        self._log_start(repository, spec)
        try:
            future = self._start(repository, spec, config)
        except CoordinatorClosed as exc:
            return self._reject(repository, exc)
        return Dispatch(
            repository,
            f"Running job for repository: {repository}".encode("utf-8"),
            future,
        )

    def run_repository(self, repository: str) -> ExecutionResult:
        """Run *repository*'s job on the calling thread, sinks included.

        Raises
        ------
        ConfigError, ResolutionError
            As :meth:`dispatch_repository` would report them.
        """
        config, spec = self._prepare(repository)
        self._log_start(repository, spec)
        return self._complete(repository, spec, config)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; optionally wait for running jobs."""
        with self._lock:
            self._closed = True
            detached = list(self._detached)
        self._pool.shutdown(wait=wait)
        if wait:
            for thread in detached:
                thread.join()

    def __enter__(self) -> DispatchCoordinator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown(wait=True)

    # ------------------------------------------------------------------
    # Pipeline steps
    # ------------------------------------------------------------------

    def _prepare(self, repository: str) -> tuple[HookConfig, CommandSpec]:
        config = HookConfig.load(self.config_path)
        spec = self._resolver.resolve(config.repositories, repository)
        return config, spec

    def _reject(self, repository: str, exc: GithookError) -> Dispatch:
        message = format_error(exc)
        self._log.error(message)
        return Dispatch(repository, message.encode("utf-8"))

    def _ensure_open(self, repository: str) -> None:
        if self._closed:
            raise CoordinatorClosed(
                f"Shutting down, not running job for repository: {repository}"
            )

    def _start(
        self, repository: str, spec: CommandSpec, config: HookConfig
    ) -> Future[ExecutionResult]:
        future: Future[ExecutionResult] = Future()
        thread = threading.Thread(
            target=self._run_detached,
            args=(future, repository, spec, config),
            name=f"githook-job-{repository}",
            daemon=True,
        )
        with self._lock:
            self._ensure_open(repository)
            self._in_flight += 1
            busy = self._in_flight > self._max_workers
            if busy:
                self._log.warning(
                    "All %d workers busy; running job for repository %s on its own thread",
                    self._max_workers,
                    repository,
                )
                self._detached.add(thread)
                thread.start()

        if not busy:
            try:
                future = self._pool.submit(self._run, repository, spec, config)
            except RuntimeError as exc:
                self._release()
                raise CoordinatorClosed(
                    f"Shutting down, not running job for repository: {repository}"
                ) from exc

        future.add_done_callback(self._report_crash)
        return future

    def _run_detached(
        self,
        future: Future[ExecutionResult],
        repository: str,
        spec: CommandSpec,
        config: HookConfig,
    ) -> None:
        try:
            if not future.set_running_or_notify_cancel():
                return
            try:
                result = self._run(repository, spec, config)
            except Exception as exc:  # noqa: BLE001
                future.set_exception(exc)
            else:
                future.set_result(result)
        finally:
            with self._lock:
                self._detached.discard(threading.current_thread())

    def _run(
        self, repository: str, spec: CommandSpec, config: HookConfig
    ) -> ExecutionResult:
        try:
            return self._complete(repository, spec, config)
        finally:
            self._release()

    def _release(self) -> None:
        with self._lock:
            self._in_flight -= 1

    def _log_start(self, repository: str, spec: CommandSpec) -> None:
        self._log.info(
            "Running job for repository: %s dir: %s script: %s",
            repository,
            spec.working_directory,
            spec.executable,
        )

    def _complete(
        self, repository: str, spec: CommandSpec, config: HookConfig
    ) -> ExecutionResult:
        result = self._executor.execute(spec, label=repository)

        if config.log:
            self._log.info("  Status: %s", result.exit_description)
            self._log.info("  Stdout: %s", result.stdout_text)
            self._log.info("  Stderr: %s", result.stderr_text)

        notify = config.email.always or not result.succeeded
        if result.succeeded:
            subject = f"Build passed for: {repository}"
        else:
            subject = f"Build FAILED for: {repository}"

        try:
            sinks = list(self._sink_factory(config, self._log))
        except Exception as exc:  # noqa: BLE001
            self._log.error("ERROR building sinks for %s: %s", repository, exc)
            sinks = []

        report = self._dispatcher.dispatch(sinks, result, subject, notify=notify)

        if result.succeeded:
            self._log.info(
                "OK ran job for repository: %s - %s", repository, " ".join(spec.argv)
            )
        else:
            self._log.error(
                "ERROR Executing job for repository: %s - %s - %s stdout: %s stderr: %s",
                repository,
                spec.executable,
                result.error,
                result.stdout_text,
                result.stderr_text,
            )
            if not report.delivered:
                self._log.warning(
                    "Failure of job for repository %s was not delivered to any sink",
                    repository,
                )
        return result

    def _report_crash(self, future: Future[ExecutionResult]) -> None:
        if future.cancelled():
            # Cancelled before _run started, so its slot was never released.
            self._release()
            return
        exc = future.exception()
        if exc is not None:
            self._log.error("Background job crashed: %r", exc)
