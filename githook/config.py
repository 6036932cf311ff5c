"""Process settings — env-driven, overridable from the command line.

Centralized settings using pydantic-settings.  Reads from a .env file and
GITHOOK_* environment variables.  The job configuration file itself is a
separate document (see ``githook.models.hook_config``) re-read on every
dispatch; these settings only say where it lives and how the daemon runs.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_HTTP_PORT = 8080


class GithookSettings(BaseSettings):
    """Daemon settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export GITHOOK_CONFIG_PATH=/etc/githook.json
        export GITHOOK_LOG_LEVEL=DEBUG
        export GITHOOK_APP_NAME=githook

    Or via .env file::

        GITHOOK_HTTP_BIND=127.0.0.1:9000
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="GITHOOK_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Job configuration
    config_path: Path = Path("githook.json")

    # Logging
    log_level: str = "INFO"

    # HTTP transport
    http_bind: str = f":{DEFAULT_HTTP_PORT}"

    # Relay transport; a non-empty app name selects it over HTTP
    app_name: str = ""
    relay_host: str = "localhost"
    relay_port: int = 55555
    reply_ttl_seconds: int = 60

    # Worker pool running jobs
    max_workers: int = 32

    @property
    def uses_relay(self) -> bool:
        """Whether the daemon should serve through the relay."""
        return bool(self.app_name)


def parse_bind(bind: str) -> tuple[str, int]:
    """Split an HTTP bind address into host and port.

    An empty host means all interfaces; an empty bind means port 8080.

    >>> parse_bind(":9000")
    ('0.0.0.0', 9000)
    >>> parse_bind("127.0.0.1:8081")
    ('127.0.0.1', 8081)
    >>> parse_bind("")
    ('0.0.0.0', 8080)
    """
    host, sep, port = bind.rpartition(":")
    if not sep:
        host, port = bind, ""
    if port and not port.isdigit():
        raise ValueError(f"invalid port in bind address: {bind!r}")
    return host or "0.0.0.0", int(port) if port else DEFAULT_HTTP_PORT


# Module-level singleton: import as `from githook.config import settings`
settings = GithookSettings()
