"""githook: a small continuous-integration trigger daemon.

A webhook names a repository that changed; githook looks the repository up
in its job file, acknowledges the caller at once, runs the configured script
in the background and reports the outcome to S3 and/or email.
"""

__version__ = "0.2.0"

from githook.core.coordinator import Dispatch, DispatchCoordinator
from githook.core.decoder import RequestDecoder
from githook.core.executor import JobExecutor
from githook.core.resolver import CommandResolver, resolve

__all__ = [
    "CommandResolver",
    "Dispatch",
    "DispatchCoordinator",
    "JobExecutor",
    "RequestDecoder",
    "resolve",
    "__version__",
]
