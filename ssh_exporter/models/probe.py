"""Probe configuration data models.

A ``ProbeConfig`` is the working memory of a single probe request: it is
loaded fresh from disk, normalized, filled in by the dispatcher and then
rendered once. The ``selected`` flag and the per-host result fields are
request state and must never be carried over to another request.
"""

from dataclasses import dataclass, field
from datetime import timedelta

from ssh_exporter.models.result import UNKNOWN_EXIT_STATUS, HostResult

DEFAULT_PORT = "22"
DEFAULT_TIMEOUT = timedelta(seconds=10)


@dataclass
class HostCredential:
    """One execution target and, after a probe, its result slot."""

    host: str
    user: str = ""
    port: str = DEFAULT_PORT
    keyfile: str = ""

    # Result slot, written once per request by the task that owns it
    output: str = field(default="", compare=False)
    exit_status: int = field(default=UNKNOWN_EXIT_STATUS, compare=False)
    error_text: str = field(default="", compare=False)
    matched: int = field(default=0, compare=False)
    timed_out: bool = field(default=False, compare=False)

    @property
    def address(self) -> str:
        """Return ``user@host:port`` for log messages."""
        return f"{self.user}@{self.host}:{self.port}"

    def record(self, result: HostResult) -> None:
        """Copy an execution result into this host's slot."""
        self.output = result.output
        self.exit_status = result.exit_status
        self.error_text = result.error_text
        self.matched = 1 if result.matched else 0
        self.timed_out = result.timed_out


@dataclass
class ScriptSpec:
    """A named command to run on every one of its targets."""

    name: str
    command: str = ""
    timeout_spec: str = ""
    pattern: str = ""
    targets: list[HostCredential] = field(default_factory=list)
    parsed_timeout: timedelta = DEFAULT_TIMEOUT
    selected: bool = False


@dataclass
class ProbeConfig:
    """Parsed configuration document."""

    version: str = "v0"
    scripts: list[ScriptSpec] = field(default_factory=list)

    @property
    def selected_scripts(self) -> list[ScriptSpec]:
        """Scripts chosen by the current request's name filter."""
        return [script for script in self.scripts if script.selected]
