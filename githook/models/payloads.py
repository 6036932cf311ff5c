"""Webhook payload models — only the fields the dispatcher reads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Repository(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str


class PushPayload(BaseModel):
    """The JSON document carried in the ``payload`` form field.

    Senders include many more keys; unknown keys are ignored.
    """

    model_config = ConfigDict(frozen=True)

    repository: Repository
