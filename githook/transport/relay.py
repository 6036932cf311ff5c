"""Relay transport — request/reply over a Redis list.

Requests for application ``<app>`` are pushed to ``githook:<app>:requests``
as JSON ``{"reply_to": "<key>", "body": "<text>"}``.  The connector pops each
one, hands the body to its handler and pushes the response onto
``reply_to``, which expires after a TTL so abandoned replies do not pile up.
"""

from __future__ import annotations

import json
import logging
import threading
from typing import Any

import redis

from githook.transport import RequestHandler

logger = logging.getLogger(__name__)


class RelayConnectionError(RuntimeError):
    """The relay could not be reached."""


def request_key(app_name: str) -> str:
    return f"githook:{app_name}:requests"


class RelayConnector:
    """Serves a ``RequestHandler`` on a Redis request queue.

    Parameters
    ----------
    client:
        A ``redis.Redis`` client created with ``decode_responses=True``.
    app_name:
        Application name the connector registers as.
    handler:
        Receives each request body.
    block_seconds:
        How long each BLPOP waits before re-checking the stop flag.
    reply_ttl_seconds:
        Lifetime of a reply list.
    """

    def __init__(
        self,
        client: Any,
        app_name: str,
        handler: RequestHandler,
        *,
        block_seconds: float = 1,
        reply_ttl_seconds: int = 60,
    ) -> None:
        self._client = client
        self.app_name = app_name
        self._handler = handler
        self._block_seconds = block_seconds
        self._reply_ttl = reply_ttl_seconds

    @classmethod
    def connect(
        cls,
        host: str,
        port: int,
        app_name: str,
        handler: RequestHandler,
        **kwargs: Any,
    ) -> RelayConnector:
        """Connect to the relay and verify it answers.

        Raises
        ------
        RelayConnectionError
            If the relay does not respond to a ping.
        """
        client = redis.Redis(host=host, port=port, decode_responses=True)
        try:
            client.ping()
        except redis.RedisError as exc:
            raise RelayConnectionError(
                f"connection to relay {host}:{port} failed: {exc}"
            ) from exc
        return cls(client, app_name, handler, **kwargs)

    @property
    def request_key(self) -> str:
        return request_key(self.app_name)

    def serve_once(self) -> bool:
        """Handle at most one request.  Returns whether one was handled."""
        item = self._client.blpop([self.request_key], timeout=self._block_seconds)
        if item is None:
            return False

        _, raw = item
        try:
            message = json.loads(raw)
            reply_to = message["reply_to"]
            body = message["body"]
        except (TypeError, ValueError, KeyError) as exc:
            logger.warning("Skipping malformed relay message %r: %s", raw, exc)
            return False
        if not isinstance(reply_to, str) or not isinstance(body, str):
            logger.warning("Skipping malformed relay message %r", raw)
            return False

        response = self._handler.handle(body.encode("utf-8"))
        self._client.rpush(reply_to, response.decode("utf-8", errors="replace"))
        self._client.expire(reply_to, self._reply_ttl)
        return True

    def serve_forever(self, stop: threading.Event) -> None:
        """Serve requests until *stop* is set."""
        logger.info("Relay connector serving %s", self.request_key)
        while not stop.is_set():
            try:
                self.serve_once()
            except redis.RedisError as exc:
                logger.error("Relay error: %s", exc)
                stop.wait(self._block_seconds)

    def close(self) -> None:
        self._client.close()
