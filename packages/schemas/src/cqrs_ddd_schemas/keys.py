"""Type keys — structured identifiers for message types.

A type key is a ``(namespace, name)`` pair rendered as ``namespace/name``.
Versioned keys carry a ``.<kind>.v<N>`` suffix on the namespace::

    base = TypeKey("email.sendwithus", "opened")
    versioned_key(1, base, MessageKind.EVENT)
    # TypeKey("email.sendwithus.event.v1", "opened")
    destructure(TypeKey.parse("email.sendwithus.event.v1/opened"))
    # (TypeKey("email.sendwithus", "opened"), 1)
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass


class MessageKind(str, enum.Enum):
    EVENT = "event"
    COMMAND = "command"


_VERSION_SEGMENT = re.compile(
    r"\A(?P<base>.+)\.(?P<kind>event|command)\.v(?P<version>0|[1-9][0-9]*)\Z"
)


@dataclass(frozen=True, order=True)
class TypeKey:
    """Immutable ``(namespace, name)`` identifier of a message type."""

    namespace: str
    name: str

    def __post_init__(self) -> None:
        if not self.namespace:
            raise ValueError("TypeKey namespace must not be empty")
        if not self.name or "/" in self.name:
            raise ValueError(f"Invalid TypeKey name: {self.name!r}")

    @classmethod
    def parse(cls, value: str | TypeKey) -> TypeKey:
        """Parse ``"namespace/name"`` into a :class:`TypeKey`."""
        if isinstance(value, TypeKey):
            return value
        namespace, sep, name = value.rpartition("/")
        if not sep:
            raise ValueError(f"Type key {value!r} must have the form 'namespace/name'")
        return cls(namespace, name)

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


def versioned_key(version: int, base: TypeKey, kind: MessageKind | str) -> TypeKey:
    """Return the versioned type key for *version* of *base*."""
    if isinstance(version, bool) or not isinstance(version, int) or version < 0:
        raise ValueError(f"Version must be a non-negative integer, got {version!r}")
    kind = MessageKind(kind)
    return TypeKey(f"{base.namespace}.{kind.value}.v{version}", base.name)


def event_version(version: int, base: TypeKey) -> TypeKey:
    return versioned_key(version, base, MessageKind.EVENT)


def command_version(version: int, base: TypeKey) -> TypeKey:
    return versioned_key(version, base, MessageKind.COMMAND)


def is_versioned(key: TypeKey | str) -> bool:
    """Return ``True`` if *key* carries a ``.<kind>.v<N>`` segment."""
    return _VERSION_SEGMENT.match(TypeKey.parse(key).namespace) is not None


def destructure(key: TypeKey | str) -> tuple[TypeKey, int] | None:
    """Split a versioned key into ``(base_key, version)``.

    Returns ``None`` for unversioned keys; callers treat that as
    "not applicable".
    """
    key = TypeKey.parse(key)
    match = _VERSION_SEGMENT.match(key.namespace)
    if match is None:
        return None
    return TypeKey(match["base"], key.name), int(match["version"])


def base_key(key: TypeKey | str) -> TypeKey:
    """Strip the version segment; unversioned keys are returned as-is."""
    parts = destructure(key)
    if parts is None:
        return TypeKey.parse(key)
    return parts[0]


def versioned_kind(key: TypeKey | str) -> MessageKind | None:
    """Return the kind encoded in a versioned key, ``None`` otherwise."""
    match = _VERSION_SEGMENT.match(TypeKey.parse(key).namespace)
    if match is None:
        return None
    return MessageKind(match["kind"])


__all__ = [
    "MessageKind",
    "TypeKey",
    "base_key",
    "command_version",
    "destructure",
    "event_version",
    "is_versioned",
    "versioned_key",
    "versioned_kind",
]
