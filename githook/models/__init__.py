"""Githook data models — all Pydantic v2, all frozen (immutable)."""

from githook.models.commands import CommandSpec
from githook.models.hook_config import AwsConf, EmailConf, HookConfig, JobDefinition
from githook.models.payloads import PushPayload, Repository
from githook.models.results import ExecutionResult, ExitStatus, SinkReport

__all__ = [
    # job configuration
    "HookConfig",
    "JobDefinition",
    "AwsConf",
    "EmailConf",
    # commands
    "CommandSpec",
    # payloads
    "PushPayload",
    "Repository",
    # results
    "ExecutionResult",
    "ExitStatus",
    "SinkReport",
]
