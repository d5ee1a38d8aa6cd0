"""Utility helpers for ssh_exporter."""

from ssh_exporter.utils.console import ColorfulFormatter, configure_logging, request_id

__all__ = ["ColorfulFormatter", "configure_logging", "request_id"]
