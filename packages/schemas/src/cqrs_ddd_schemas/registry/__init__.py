"""Schema registry — per-application store of message type metadata."""

from .record import RegistryRecord
from .registry import SchemaRegistry, cast

__all__ = [
    "RegistryRecord",
    "SchemaRegistry",
    "cast",
]
