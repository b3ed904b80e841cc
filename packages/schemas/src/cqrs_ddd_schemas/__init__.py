"""cqrs-ddd-schemas — versioned message schema registry and migration engine.

Declare successive versions of command and event payloads, cast payloads
between versions, and validate envelopes against their declared shapes.
"""

from __future__ import annotations

from .declarations import (
    SimpleCommand,
    VersionSpec,
    declare_simple,
    define_command,
    define_event,
    version,
)
from .envelope import (
    COMMAND_TYPE_FIELD,
    EVENT_TYPE_FIELD,
    CommandEnvelope,
    CommandSource,
    Envelope,
    EventEnvelope,
    GeneratedBy,
    Provenance,
)
from .keys import (
    MessageKind,
    TypeKey,
    base_key,
    command_version,
    destructure,
    event_version,
    is_versioned,
    versioned_key,
    versioned_kind,
)
from .messages import EnvelopeShape, MessageType, MessageValidator
from .ports import IExampleShape, IShape
from .primitives import (
    CastError,
    CasterFailedError,
    ErrorKind,
    MissingCasterError,
    SchemaRegistrationError,
    SchemaRegistryError,
    UnknownTypeKeyError,
    UnknownVersionError,
    ValidationCause,
    ValidationError,
)
from .registry import RegistryRecord, SchemaRegistry, cast
from .validation import (
    PredicateShape,
    PydanticShape,
    ValidationResult,
)
from .versioning import CastResult, VersionChain, VersionEntry

__all__ = [
    "COMMAND_TYPE_FIELD",
    "EVENT_TYPE_FIELD",
    "CastError",
    "CasterFailedError",
    "CastResult",
    "CommandEnvelope",
    "CommandSource",
    "Envelope",
    "EnvelopeShape",
    "ErrorKind",
    "EventEnvelope",
    "GeneratedBy",
    "IExampleShape",
    "IShape",
    "MessageKind",
    "MessageType",
    "MessageValidator",
    "MissingCasterError",
    "PredicateShape",
    "Provenance",
    "PydanticShape",
    "RegistryRecord",
    "SchemaRegistrationError",
    "SchemaRegistry",
    "SchemaRegistryError",
    "SimpleCommand",
    "TypeKey",
    "UnknownTypeKeyError",
    "UnknownVersionError",
    "ValidationCause",
    "ValidationError",
    "ValidationResult",
    "VersionChain",
    "VersionEntry",
    "VersionSpec",
    "base_key",
    "cast",
    "command_version",
    "declare_simple",
    "define_command",
    "define_event",
    "destructure",
    "event_version",
    "is_versioned",
    "versioned_key",
    "versioned_kind",
    "version",
]
