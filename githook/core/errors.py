"""Error taxonomy for the dispatch pipeline.

Decode, config and resolution errors, plus requests arriving after shutdown,
are the only failures a webhook caller ever sees; they are raised here and turned into response text by the
coordinator.  Execution and sink errors stay inside the background task.
"""

from __future__ import annotations


class GithookError(RuntimeError):
    """Base class for every githook failure."""


class DecodeError(GithookError):
    """The inbound request body could not be decoded."""


class MalformedQuery(DecodeError):
    """The body is not valid URL-encoded form data."""


class MissingPayload(DecodeError):
    """The form data has no ``payload`` field."""


class InvalidJSON(DecodeError):
    """The ``payload`` value is not ``{"repository": {"name": "..."}}`` JSON."""


class ConfigError(GithookError):
    """The job configuration file could not be read or validated."""


class ResolutionError(GithookError):
    """A repository could not be turned into a command."""


class UnknownRepository(ResolutionError):
    """No job is configured for the repository."""


class EmptyScript(ResolutionError):
    """The repository's job has no script tokens."""


class CoordinatorClosed(GithookError):
    """The coordinator was shut down and accepts no new jobs."""


class ExecutionError(GithookError):
    """The job process could not be launched or exited unsuccessfully."""


class SinkError(GithookError):
    """A result sink failed to record or deliver a result."""
