"""``githook serve`` — run the webhook daemon.

Serves over HTTP by default.  Giving an application name switches to the
relay transport; failing to reach the relay is fatal.
"""

from __future__ import annotations

import logging
import signal
import threading
from pathlib import Path

import typer

from githook.cli._logging import configure_logging
from githook.config import parse_bind, settings
from githook.core.coordinator import DispatchCoordinator

logger = logging.getLogger(__name__)


def serve_cmd(
    config: Path = typer.Option(
        settings.config_path,
        "--config",
        "-c",
        help="Job config file (JSON).",
    ),
    bind: str = typer.Option(
        settings.http_bind,
        "--bind",
        "-b",
        help="HTTP bind address, host:port.",
    ),
    app_name: str = typer.Option(
        settings.app_name,
        "--app",
        "-a",
        help="Relay application name to register as; selects the relay transport.",
    ),
    relay_port: int = typer.Option(
        settings.relay_port,
        "--relay-port",
        "-r",
        help="Port of the relay.",
    ),
    relay_host: str = typer.Option(
        settings.relay_host,
        "--relay-host",
        help="Host of the relay.",
    ),
    log_level: str = typer.Option(
        settings.log_level,
        "--log-level",
        help="Logging level.",
    ),
) -> None:
    """Serve webhook requests until interrupted."""
    configure_logging(log_level, app_name)
    coordinator = DispatchCoordinator(config, max_workers=settings.max_workers)

    try:
        if app_name:
            _serve_relay(coordinator, app_name, relay_host, relay_port, config)
        else:
            _serve_http(coordinator, bind, config, log_level)
    finally:
        coordinator.shutdown(wait=False)


def _serve_relay(
    coordinator: DispatchCoordinator,
    app_name: str,
    host: str,
    port: int,
    config: Path,
) -> None:
    from githook.transport.relay import RelayConnectionError, RelayConnector

    try:
        connector = RelayConnector.connect(
            host,
            port,
            app_name,
            coordinator,
            reply_ttl_seconds=settings.reply_ttl_seconds,
        )
    except RelayConnectionError as exc:
        logger.critical("connection failed: %s", exc)
        raise typer.Exit(code=1) from exc

    logger.info("Successfully started %s using jobConf: %s", app_name, config)

    stop = threading.Event()
    signal.signal(signal.SIGTERM, lambda *_: stop.set())
    try:
        connector.serve_forever(stop)
    except KeyboardInterrupt:
        stop.set()
    finally:
        connector.close()


def _serve_http(
    coordinator: DispatchCoordinator, bind: str, config: Path, log_level: str
) -> None:
    from githook.transport.http import serve

    try:
        host, port = parse_bind(bind)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--bind") from exc

    logger.info("githook using jobConf: %s", config)
    serve(coordinator, host, port, log_level)
