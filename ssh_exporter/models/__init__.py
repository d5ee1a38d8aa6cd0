"""Data models for ssh_exporter."""

from ssh_exporter.models.probe import HostCredential, ProbeConfig, ScriptSpec
from ssh_exporter.models.result import HostResult

__all__ = [
    "HostCredential",
    "HostResult",
    "ProbeConfig",
    "ScriptSpec",
]
