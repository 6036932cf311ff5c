"""Email notification sink — sends results to a recipient list over SMTP.

The message body is the result summary; when an earlier sink stored the
full log, the body links to it.
"""

from __future__ import annotations

import logging
import smtplib
from collections.abc import Callable
from email.message import EmailMessage

from githook.core.errors import SinkError
from githook.models.hook_config import EmailConf
from githook.models.results import ExecutionResult
from githook.routing.sinks._formatting import format_summary

logger = logging.getLogger(__name__)

DEFAULT_SMTP_PORT = 25


def split_host(smtp_host: str) -> tuple[str, int]:
    """Split ``host[:port]`` into its parts.

    >>> split_host("mail.example.com:587")
    ('mail.example.com', 587)
    >>> split_host("mail.example.com")
    ('mail.example.com', 25)
    """
    host, sep, port = smtp_host.rpartition(":")
    if sep and port.isdigit():
        return host or "localhost", int(port)
    return smtp_host or "localhost", DEFAULT_SMTP_PORT


class EmailSink:
    """Sends one email per notified dispatch.

    Parameters
    ----------
    smtp_host:
        ``host[:port]`` of the SMTP relay.
    sender:
        The From address.
    recipients:
        Addresses to notify.
    user, password:
        Optional SMTP credentials; login is attempted only when both are set.
    starttls:
        Upgrade the connection with STARTTLS before sending.
    smtp_factory:
        Callable returning an ``smtplib.SMTP``-compatible connection for
        ``(host, port)``; defaults to ``smtplib.SMTP``.
    log:
        Logger for delivery lines; defaults to this module's.
    """

    def __init__(
        self,
        smtp_host: str,
        sender: str,
        recipients: list[str],
        *,
        user: str = "",
        password: str = "",
        starttls: bool = False,
        smtp_factory: Callable[[str, int], smtplib.SMTP] | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self._host, self._port = split_host(smtp_host)
        self._sender = sender
        self._recipients = list(recipients)
        self._user = user
        self._password = password
        self._starttls = starttls
        self._smtp_factory = smtp_factory
        self._log = log or logger

    @classmethod
    def from_config(
        cls,
        conf: EmailConf,
        smtp_factory: Callable[[str, int], smtplib.SMTP] | None = None,
        *,
        log: logging.Logger | None = None,
    ) -> EmailSink:
        return cls(
            conf.smtp_host,
            conf.sender,
            conf.recipients,
            user=conf.user,
            password=conf.password,
            starttls=conf.starttls,
            smtp_factory=smtp_factory,
            log=log,
        )

    @property
    def sink_name(self) -> str:
        return "email"

    @property
    def notifies(self) -> bool:
        return True

    def build_message(
        self, result: ExecutionResult, subject: str, artifact_url: str
    ) -> EmailMessage:
        """Build the notification message."""
        body = format_summary(result)
        if artifact_url:
            body = f"Full log: {artifact_url}\n\n{body}"

        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self._sender
        msg["To"] = ", ".join(self._recipients)
        msg.set_content(body)
        return msg

    def log(self, result: ExecutionResult, subject: str, artifact_url: str) -> str:
        """Send the notification.  Returns ``""``; email produces no URL."""
        msg = self.build_message(result, subject, artifact_url)

        try:
            factory = self._smtp_factory or smtplib.SMTP
            with factory(self._host, self._port) as server:
                if self._starttls:
                    server.starttls()
                if self._user and self._password:
                    server.login(self._user, self._password)
                server.send_message(msg, from_addr=self._sender, to_addrs=self._recipients)
        except (smtplib.SMTPException, OSError) as exc:
            raise SinkError(
                f"sending email via {self._host}:{self._port} failed: {exc}"
            ) from exc

        self._log.debug(
            "EmailSink: sent %r to %d recipient(s)", subject, len(self._recipients)
        )
        return ""
