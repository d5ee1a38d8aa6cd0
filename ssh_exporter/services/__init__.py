"""Services for ssh_exporter."""

from ssh_exporter.services.dispatcher import BatchDispatcher, outcome_counts
from ssh_exporter.services.executor import execute_on_host
from ssh_exporter.services.formatter import render
from ssh_exporter.services.matcher import (
    CompiledMatcher,
    InvalidPattern,
    compile_or_never,
    compile_pattern,
)
from ssh_exporter.services.pool import WorkerPool
from ssh_exporter.services.runner import (
    RemoteAuthError,
    RemoteCommandError,
    RemoteConnectionError,
    RemoteExecutionError,
    RemoteTimeoutError,
    SSHRunner,
)

__all__ = [
    "BatchDispatcher",
    "CompiledMatcher",
    "InvalidPattern",
    "RemoteAuthError",
    "RemoteCommandError",
    "RemoteConnectionError",
    "RemoteExecutionError",
    "RemoteTimeoutError",
    "SSHRunner",
    "WorkerPool",
    "compile_or_never",
    "compile_pattern",
    "execute_on_host",
    "outcome_counts",
    "render",
]
