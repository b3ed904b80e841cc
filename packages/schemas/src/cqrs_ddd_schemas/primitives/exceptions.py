"""Typed error taxonomy for cqrs-ddd-schemas.

Every error carries an :class:`ErrorKind` so boundary components can branch
on ``error.kind`` instead of on exception classes.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..keys import TypeKey


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    UNKNOWN_VERSION = "unknown_version"
    MISSING_CASTER = "missing_caster"
    CASTER_FAILED = "caster_failed"
    UNKNOWN_TYPE_KEY = "unknown_type_key"
    REGISTRATION = "registration"

    @property
    def is_client_error(self) -> bool:
        """``True`` when the failure is caused by caller input.

        Everything else is a registry mis-declaration and should surface as
        an internal error.
        """
        return self is ErrorKind.VALIDATION


class ValidationCause(str, enum.Enum):
    """What was being validated when a :class:`ValidationError` was raised."""

    EVENT_SHAPE = "event_shape"
    COMMAND_SHAPE = "command_shape"
    MISSING_TYPE_TAG = "missing_type_tag"
    UNKNOWN_TYPE_TAG = "unknown_type_tag"
    SIMPLE_COMMAND_SHAPE = "simple_command_shape"
    SHAPE = "shape"


class SchemaRegistryError(Exception):
    """Root exception for cqrs-ddd-schemas."""

    kind: ErrorKind = ErrorKind.REGISTRATION

    @property
    def is_client_error(self) -> bool:
        return self.kind.is_client_error


class ValidationError(SchemaRegistryError):
    """Raised when a payload does not conform to its declared shape.

    Carries structured errors: ``{field: [messages]}`` plus the offending
    input.
    """

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        errors: dict[str, list[str]] | str | None = None,
        *,
        input: Any = None,  # noqa: A002
        cause: ValidationCause = ValidationCause.SHAPE,
    ) -> None:
        if isinstance(errors, str):
            self.errors: dict[str, list[str]] = {"__root__": [errors]}
        elif errors is None:
            self.errors = {}
        else:
            self.errors = errors
        self.input = input
        self.cause = cause
        super().__init__(self.explain())

    def explain(self) -> str:
        """Render every violated constraint as ``location: message`` pairs."""
        lines = [
            f"{field_name}: {message}"
            for field_name, messages in self.errors.items()
            for message in messages
        ]
        return "; ".join(lines) or "validation failed"


class NotFoundError(SchemaRegistryError):
    """Base class for lookups against something that was never declared."""


class UnknownTypeKeyError(NotFoundError, KeyError):
    """Raised when a type key is not registered."""

    kind = ErrorKind.UNKNOWN_TYPE_KEY

    def __init__(self, type_key: TypeKey | str) -> None:
        self.type_key = type_key
        super().__init__(f"Type key {type_key} is not registered")

    def __str__(self) -> str:
        return str(self.args[0])


class CastError(SchemaRegistryError):
    """Raised when a payload cannot be moved between two versions.

    ``payload`` is always the caller's original, unmodified payload.
    """

    def __init__(
        self,
        message: str,
        *,
        type_key: TypeKey | None = None,
        payload: Any = None,
        from_version: int | None = None,
        to_version: int | None = None,
    ) -> None:
        self.type_key = type_key
        self.payload = payload
        self.from_version = from_version
        self.to_version = to_version
        super().__init__(message)


class UnknownVersionError(CastError):
    """Raised when a requested version is not present in a chain."""

    kind = ErrorKind.UNKNOWN_VERSION

    def __init__(
        self,
        version: int,
        *,
        type_key: TypeKey | None = None,
        payload: Any = None,
        from_version: int | None = None,
        to_version: int | None = None,
    ) -> None:
        self.version = version
        super().__init__(
            f"Version {version} of {type_key} is not registered",
            type_key=type_key,
            payload=payload,
            from_version=from_version,
            to_version=to_version,
        )


class MissingCasterError(CastError):
    """Raised when an upcast/downcast needed by a cast path is absent.

    Unreachable for chains declared through :mod:`cqrs_ddd_schemas.declarations`.
    """

    kind = ErrorKind.MISSING_CASTER

    def __init__(
        self,
        version: int,
        direction: str,
        *,
        type_key: TypeKey | None = None,
        payload: Any = None,
        from_version: int | None = None,
        to_version: int | None = None,
    ) -> None:
        self.version = version
        self.direction = direction
        super().__init__(
            f"Version {version} of {type_key} has no {direction} function",
            type_key=type_key,
            payload=payload,
            from_version=from_version,
            to_version=to_version,
        )


class CasterFailedError(CastError):
    """Raised when a caster on the path raises or returns a non-dict.

    The caster's own exception, if any, is chained as ``__cause__``.
    """

    kind = ErrorKind.CASTER_FAILED

    def __init__(
        self,
        version: int,
        direction: str,
        reason: str,
        *,
        type_key: TypeKey | None = None,
        payload: Any = None,
        from_version: int | None = None,
        to_version: int | None = None,
    ) -> None:
        self.version = version
        self.direction = direction
        super().__init__(
            f"{direction} of version {version} of {type_key} failed: {reason}",
            type_key=type_key,
            payload=payload,
            from_version=from_version,
            to_version=to_version,
        )


class SchemaRegistrationError(SchemaRegistryError):
    """Raised when a declaration violates the version-chain rules."""

    kind = ErrorKind.REGISTRATION
