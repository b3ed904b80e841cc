"""Declarations — the load-time API domain modules use to define messages."""

from .builder import (
    VersionSpec,
    check_versions,
    define_command,
    define_event,
    define_message,
    version,
)
from .simple import SimpleCommand, declare_simple

__all__ = [
    "SimpleCommand",
    "VersionSpec",
    "check_versions",
    "declare_simple",
    "define_command",
    "define_event",
    "define_message",
    "version",
]
