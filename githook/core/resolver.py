"""CommandResolver — maps a repository name to a ``CommandSpec``."""

from __future__ import annotations

import os
from collections.abc import Mapping

from githook.core.errors import EmptyScript, UnknownRepository
from githook.models.commands import CommandSpec
from githook.models.hook_config import JobDefinition

DIR_PLACEHOLDER = "$dir"


def resolve(registry: Mapping[str, JobDefinition], repository: str) -> CommandSpec:
    """Build the command for *repository* from *registry*.

    The first script token is the executable; the first occurrence of
    ``$dir`` in it is replaced by the job directory (plain substring
    replacement).  The remaining tokens are passed through untouched.  An
    empty job directory means the daemon's current directory.

    Raises
    ------
    UnknownRepository
        *repository* has no entry in *registry*.
    EmptyScript
        The entry has no script tokens.
    """
    job = registry.get(repository)
    if job is None:
        raise UnknownRepository(f"No config for repository: {repository}")
    if not job.script:
        raise EmptyScript(f"script not defined for repository: {repository}")

    executable = job.script[0].replace(DIR_PLACEHOLDER, job.dir, 1)
    return CommandSpec(
        executable=executable,
        arguments=list(job.script[1:]),
        working_directory=job.dir or os.getcwd(),
    )


class CommandResolver:
    """Object wrapper around :func:`resolve` for injection into the coordinator."""

    def resolve(
        self, registry: Mapping[str, JobDefinition], repository: str
    ) -> CommandSpec:
        return resolve(registry, repository)
