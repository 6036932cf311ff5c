"""Executable command specification derived from a job definition."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CommandSpec(BaseModel):
    """What to launch and where.

    Built deterministically by the resolver from a ``JobDefinition``.
    """

    model_config = ConfigDict(frozen=True)

    executable: str
    arguments: list[str] = []
    working_directory: str

    @property
    def argv(self) -> list[str]:
        """Return the full argument vector, executable first."""
        return [self.executable, *self.arguments]
