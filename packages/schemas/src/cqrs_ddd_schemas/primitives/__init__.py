"""Primitives: exceptions, ID generation."""

from __future__ import annotations

from .exceptions import (
    CastError,
    CasterFailedError,
    ErrorKind,
    MissingCasterError,
    NotFoundError,
    SchemaRegistrationError,
    SchemaRegistryError,
    UnknownTypeKeyError,
    UnknownVersionError,
    ValidationCause,
    ValidationError,
)
from .id_generator import IIDGenerator, UUID4Generator

__all__ = [
    "CastError",
    "CasterFailedError",
    "ErrorKind",
    "IIDGenerator",
    "MissingCasterError",
    "NotFoundError",
    "SchemaRegistrationError",
    "SchemaRegistryError",
    "UUID4Generator",
    "UnknownTypeKeyError",
    "UnknownVersionError",
    "ValidationCause",
    "ValidationError",
]
