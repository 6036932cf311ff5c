"""Job configuration file models — the JSON document re-read on every dispatch.

The file uses capitalised keys (``Repositories``, ``Dir``, ``Script``, ...);
each field declares the key as its alias so the models read the file as-is
while Python code uses snake_case names.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from githook.core.errors import ConfigError


class JobDefinition(BaseModel):
    """A repository's build job: working directory plus script tokens.

    ``script`` may be empty here; resolution rejects it with ``EmptyScript``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    dir: str = Field(default="", alias="Dir")
    script: list[str] = Field(default_factory=list, alias="Script")


class AwsConf(BaseModel):
    """Object store credentials and bucket settings."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    access: str = Field(default="", alias="Access")
    secret: str = Field(default="", alias="Secret")
    bucket: str = Field(default="", alias="Bucket")
    region: str = Field(default="", alias="Region")
    acl: str = Field(default="", alias="Acl")
    endpoint: str = Field(default="", alias="Endpoint")

    @property
    def is_configured(self) -> bool:
        return bool(self.access and self.secret and self.bucket)


class EmailConf(BaseModel):
    """SMTP notification settings."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    smtp_host: str = Field(default="", alias="SmtpHost")
    sender: str = Field(default="", alias="From")
    recipients: list[str] = Field(default_factory=list, alias="To")
    always: bool = Field(default=False, alias="Always")
    user: str = Field(default="", alias="User")
    password: str = Field(default="", alias="Password")
    starttls: bool = Field(default=False, alias="StartTls")

    @property
    def is_configured(self) -> bool:
        return bool(self.sender and self.recipients)


class HookConfig(BaseModel):
    """The whole job configuration file.

    Every section is optional; a missing section disables whatever it
    configures.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    repositories: dict[str, JobDefinition] = Field(
        default_factory=dict, alias="Repositories"
    )
    aws: AwsConf = Field(default_factory=AwsConf, alias="Aws")
    email: EmailConf = Field(default_factory=EmailConf, alias="Email")
    log: bool = Field(default=False, alias="Log")

    @classmethod
    def load(cls, path: Path | str) -> HookConfig:
        """Read and validate the configuration file at *path*.

        Raises
        ------
        ConfigError
            If the file cannot be read or does not match the schema.
        """
        try:
            data = Path(path).read_bytes()
        except OSError as exc:
            raise ConfigError(f"Unable to load config: {path} - {exc}") from exc

        try:
            return cls.model_validate_json(data)
        except ValidationError as exc:
            raise ConfigError(f"Unable to load config: {path} - {exc}") from exc
