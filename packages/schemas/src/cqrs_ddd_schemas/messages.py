"""Message construction and type-dispatched validation.

:class:`MessageType` is what a declaration hands back to domain code: it
builds versioned envelopes and validates received ones. Validation dispatches
on the payload's type tag back into the registry, so the version-specific
shape is looked up once per call.
"""

from __future__ import annotations

import copy
import logging
import time
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .envelope import (
    TYPE_TAG_FIELDS,
    CommandSource,
    Envelope,
    GeneratedBy,
    Provenance,
    envelope_model,
)
from .keys import MessageKind, TypeKey, base_key, destructure, versioned_key
from .ports.shape import IExampleShape
from .primitives.exceptions import (
    UnknownVersionError,
    ValidationCause,
    ValidationError,
)
from .primitives.id_generator import UUID4Generator
from .validation.pydantic import errors_from_pydantic
from .validation.result import ValidationResult

if TYPE_CHECKING:
    from .ports.shape import IShape
    from .primitives.id_generator import IIDGenerator
    from .registry.record import RegistryRecord
    from .registry.registry import SchemaRegistry
    from .versioning.chain import VersionChain

logger = logging.getLogger("cqrs_ddd.schemas.messages")

_SHAPE_CAUSES = {
    MessageKind.EVENT: ValidationCause.EVENT_SHAPE,
    MessageKind.COMMAND: ValidationCause.COMMAND_SHAPE,
}


class EnvelopeShape:
    """Composite shape of a versioned message type.

    A value passes when it is a well-formed envelope of the right kind,
    its payload's type tag names a registered version of ``type_key``, and
    that version's shape accepts the payload.

    ``type_key`` may be a base key (any registered version is accepted) or
    a versioned key (only that version is accepted).
    """

    def __init__(
        self,
        registry: SchemaRegistry,
        type_key: TypeKey | str,
        kind: MessageKind | str,
    ) -> None:
        self._registry = registry
        self.type_key = TypeKey.parse(type_key)
        self.kind = MessageKind(kind)

    def check(self, value: Any) -> ValidationResult:
        model = envelope_model(self.kind)
        try:
            envelope = model.model_validate(value)
        except PydanticValidationError as exc:
            return ValidationResult.failure(errors_from_pydantic(exc))

        for other in TYPE_TAG_FIELDS.values():
            if other != model.type_field and other in envelope.payload:
                return ValidationResult.error(
                    f"payload.{other}", "a payload carries exactly one type tag"
                )

        tag_location = f"payload.{model.type_field}"
        tag = envelope.payload.get(model.type_field)
        if tag is None:
            return ValidationResult.error(tag_location, "type tag is missing")
        try:
            tag_key = TypeKey.parse(tag)
        except (TypeError, ValueError, AttributeError):
            return ValidationResult.error(
                tag_location, f"{tag!r} is not a type key"
            )

        parts = destructure(tag_key)
        record = self._registry.get(base_key(self.type_key))
        if parts is None or record is None or tag_key not in self._accepted(record):
            return ValidationResult.error(
                tag_location,
                f"{tag_key} is not a registered version of {self.type_key}",
            )

        entry = record.versions[parts[1]]
        return entry.shape.check(envelope.payload).prefixed("payload")

    def examples(self, id_generator: IIDGenerator | None = None) -> list[Envelope]:
        """Example envelopes built from the examples of every accepted version.

        Each carries a fresh id, an example origin and a payload tagged with
        its version's key. Versions whose shape has no examples are skipped.
        """
        ids = id_generator or UUID4Generator()
        model = envelope_model(self.kind)
        record = self._registry.lookup(base_key(self.type_key))
        accepted = self._accepted(record)
        envelopes: list[Envelope] = []
        for entry in record.versions.values():
            key = versioned_key(entry.version, record.type_key, record.kind)
            if key not in accepted or not isinstance(entry.shape, IExampleShape):
                continue
            for payload in entry.shape.examples():
                data = {
                    "id": ids.next_id(),
                    "payload": {**copy.deepcopy(payload), model.type_field: str(key)},
                    model.origin_field: _example_origin(self.kind),
                }
                envelopes.append(model.model_validate(data))
        return envelopes

    def _accepted(self, record: RegistryRecord) -> frozenset[TypeKey]:
        if destructure(self.type_key) is None:
            return record.version_keys
        return record.version_keys & {self.type_key}

    def __repr__(self) -> str:
        return f"EnvelopeShape({self.type_key}, kind={self.kind.value})"


class MessageValidator:
    """Validates messages against the shapes registered for their type key.

    Usage::

        validator = MessageValidator(registry)
        validator.validate(OPENED, envelope)        # returns envelope or raises
        validator.check(OPENED, envelope).is_valid  # non-raising form
    """

    def __init__(self, registry: SchemaRegistry) -> None:
        self._registry = registry

    def check(self, type_key: TypeKey | str, message: Any) -> ValidationResult:
        """Check *message* against *type_key* without raising on bad input.

        Registry defects (unknown type key or version) still raise.
        """
        key = TypeKey.parse(type_key)
        record = self._registry.lookup(key)
        parts = destructure(key)
        shape: IShape
        if parts is None:
            if record.base_shape is not None:
                shape = record.base_shape
            else:
                shape = EnvelopeShape(self._registry, key, record.kind)
        else:
            if parts[1] not in record.versions:
                raise UnknownVersionError(parts[1], type_key=record.type_key)
            shape = EnvelopeShape(self._registry, key, record.kind)
        return shape.check(message)

    def validate(self, type_key: TypeKey | str, message: Any) -> Any:
        """Return *message* unchanged if it conforms, else raise.

        Raises:
            ValidationError: carrying every violated constraint and the input.
            UnknownTypeKeyError: *type_key* was never registered.
            UnknownVersionError: a versioned *type_key* names an undeclared
                version.
        """
        result = self.check(type_key, message)
        if result.is_valid:
            return message
        record = self._registry.lookup(type_key)
        logger.debug("Validation of %s failed: %s", type_key, result.errors)
        raise ValidationError(
            result.errors, input=message, cause=_SHAPE_CAUSES[record.kind]
        )

    def validate_message(
        self, message: Any, kind: MessageKind | str | None = None
    ) -> Any:
        """Validate *message* against the base type named by its own type tag."""
        tag = _find_type_tag(message, MessageKind(kind) if kind else None)
        if tag is None:
            raise ValidationError(
                "No type tag found in payload",
                input=message,
                cause=ValidationCause.MISSING_TYPE_TAG,
            )
        try:
            key = base_key(tag)
        except ValueError as exc:
            raise ValidationError(
                str(exc), input=message, cause=ValidationCause.MISSING_TYPE_TAG
            ) from exc
        if tag not in self._registry:
            raise ValidationError(
                f"{tag} is not a registered message type",
                input=message,
                cause=ValidationCause.UNKNOWN_TYPE_TAG,
            )
        return self.validate(key, message)


def _example_origin(kind: MessageKind) -> BaseModel:
    now = int(time.time() * 1000)
    if kind is MessageKind.EVENT:
        return Provenance(
            created_at=now,
            generated_by=GeneratedBy(handler="example-generator", host="localhost"),
        )
    return CommandSource(username="example", received_at=now)


def _find_type_tag(message: Any, kind: MessageKind | None) -> str | None:
    if isinstance(message, Envelope):
        return message.type_tag
    payload = message.get("payload") if isinstance(message, dict) else None
    if not isinstance(payload, dict):
        return None
    kinds = [kind] if kind is not None else list(MessageKind)
    for candidate in kinds:
        tag = payload.get(TYPE_TAG_FIELDS[candidate])
        if isinstance(tag, str):
            return tag
    return None


class MessageType:
    """Constructor and validator for one declared, versioned message type.

    Returned by :func:`~cqrs_ddd_schemas.declarations.define_event` and
    :func:`~cqrs_ddd_schemas.declarations.define_command`::

        opened = define_event(registry, OPENED, version(1, shape_v1))
        envelope = opened.build(1, {"email": "a@b.co"}, provenance)
        opened.validate(envelope)
    """

    def __init__(
        self,
        registry: SchemaRegistry,
        type_key: TypeKey | str,
        kind: MessageKind | str,
        *,
        doc: str | None = None,
        id_generator: IIDGenerator | None = None,
    ) -> None:
        self._registry = registry
        self.type_key = TypeKey.parse(type_key)
        self.kind = MessageKind(kind)
        self.__doc__ = doc or ""
        self._id_generator: IIDGenerator = id_generator or UUID4Generator()
        self._validator = MessageValidator(registry)

    @property
    def record(self) -> RegistryRecord:
        return self._registry.lookup(self.type_key)

    @property
    def chain(self) -> VersionChain:
        return self.record.chain

    @property
    def versions(self) -> list[int]:
        return list(self.record.versions)

    def versioned_key(self, version: int) -> TypeKey:
        if version not in self.record.versions:
            raise UnknownVersionError(version, type_key=self.type_key)
        return versioned_key(version, self.type_key, self.kind)

    # ── Construction ─────────────────────────────────────────────

    def payload(self, version: int, fields: dict[str, Any]) -> dict[str, Any]:
        """Return *fields* stamped with the versioned type tag."""
        tag_field = TYPE_TAG_FIELDS[self.kind]
        return {**fields, tag_field: str(self.versioned_key(version))}

    def build(
        self,
        version: int,
        fields: dict[str, Any],
        origin: BaseModel | dict[str, Any] | None = None,
    ) -> Envelope:
        """Build a complete envelope with a fresh id.

        *origin* is the provenance of an event or the source of a command.
        """
        model = envelope_model(self.kind)
        data: dict[str, Any] = {
            "id": self._id_generator.next_id(),
            "payload": self.payload(version, fields),
        }
        if origin is not None:
            data[model.origin_field] = origin
        try:
            return model.model_validate(data)
        except PydanticValidationError as exc:
            raise ValidationError(
                errors_from_pydantic(exc), input=data, cause=_SHAPE_CAUSES[self.kind]
            ) from exc

    __call__ = build

    # ── Validation & casting ─────────────────────────────────────

    def examples(self) -> list[Envelope]:
        """Example envelopes of this type, one per example of each version shape."""
        return EnvelopeShape(self._registry, self.type_key, self.kind).examples(
            self._id_generator
        )

    def check(self, message: Any) -> ValidationResult:
        return self._validator.check(self.type_key, message)

    def validate(self, message: Any) -> Any:
        return self._validator.validate(self.type_key, message)

    def cast(
        self, payload: dict[str, Any], from_version: int, to_version: int
    ) -> dict[str, Any]:
        return self.chain.cast(payload, from_version, to_version)

    def __repr__(self) -> str:
        return f"MessageType({self.type_key}, kind={self.kind.value})"


__all__ = [
    "EnvelopeShape",
    "MessageType",
    "MessageValidator",
]
