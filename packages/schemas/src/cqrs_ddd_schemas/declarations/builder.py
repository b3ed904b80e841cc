"""Declaration builder — define versioned events and commands.

A declaration publishes one complete registry record (base type, composite
envelope shape, every version with its casters) and returns the
:class:`~cqrs_ddd_schemas.messages.MessageType` used to build and validate
instances::

    opened = define_event(
        registry,
        "email.sendwithus/opened",
        version(1, PydanticShape(OpenedV1)),
        version(2, PydanticShape(OpenedV2), up=add_campaign, down=drop_campaign),
        doc="A given email was opened by the recipient.",
    )
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..keys import MessageKind, TypeKey, is_versioned, versioned_key
from ..messages import EnvelopeShape, MessageType
from ..primitives.exceptions import SchemaRegistrationError
from ..registry.record import RegistryRecord
from ..versioning.entry import VersionEntry

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from ..ports.shape import IShape
    from ..primitives.id_generator import IIDGenerator
    from ..registry.registry import SchemaRegistry

logger = logging.getLogger("cqrs_ddd.schemas.declarations")


@dataclass(frozen=True)
class VersionSpec:
    """One ``version(...)`` clause of a declaration."""

    version: int
    shape: IShape
    doc: str | None = None
    up: Callable[[dict[str, Any]], dict[str, Any]] | None = None
    down: Callable[[dict[str, Any]], dict[str, Any]] | None = None


def version(
    n: int,
    shape: IShape,
    doc: str | None = None,
    *,
    up: Callable[[dict[str, Any]], dict[str, Any]] | None = None,
    down: Callable[[dict[str, Any]], dict[str, Any]] | None = None,
) -> VersionSpec:
    """Declare version *n* of a message.

    Every version other than the lowest must supply *up* (previous → this)
    and *down* (this → previous).
    """
    return VersionSpec(version=n, shape=shape, doc=doc, up=up, down=down)


def check_versions(type_key: TypeKey, versions: Sequence[VersionSpec]) -> None:
    """Raise :class:`SchemaRegistrationError` unless *versions* form a valid chain."""
    if is_versioned(type_key):
        raise SchemaRegistrationError(
            f"Declared type key {type_key} must not carry a version segment"
        )
    if not versions:
        raise SchemaRegistrationError(f"{type_key} must declare at least one version")

    numbers = [spec.version for spec in versions]
    for n in numbers:
        if isinstance(n, bool) or not isinstance(n, int) or n < 0:
            raise SchemaRegistrationError(
                f"{type_key}: version must be a non-negative integer, got {n!r}"
            )
    if len(set(numbers)) != len(numbers):
        raise SchemaRegistrationError(f"{type_key}: duplicate versions {numbers}")

    ordered = sorted(versions, key=lambda spec: spec.version)
    lowest = ordered[0].version
    expected = list(range(lowest, lowest + len(ordered)))
    if [spec.version for spec in ordered] != expected:
        raise SchemaRegistrationError(
            f"{type_key}: versions {sorted(numbers)} are not contiguous"
        )

    first, *rest = ordered
    if first.up is not None or first.down is not None:
        raise SchemaRegistrationError(
            f"{type_key}: lowest version {first.version} must not declare up/down"
        )
    for spec in rest:
        if spec.up is None or spec.down is None:
            raise SchemaRegistrationError(
                f"{type_key}: version {spec.version} must declare both up and down"
            )


def define_message(
    registry: SchemaRegistry,
    kind: MessageKind | str,
    type_key: TypeKey | str,
    *versions: VersionSpec,
    doc: str | None = None,
    response_type: TypeKey | str | None = None,
    web_adapter: Callable[[Any], Any] | None = None,
    id_generator: IIDGenerator | None = None,
) -> MessageType:
    """Register a versioned message type and return its :class:`MessageType`."""
    kind = MessageKind(kind)
    key = TypeKey.parse(type_key)
    check_versions(key, versions)

    record = RegistryRecord(
        type_key=key,
        kind=kind,
        base_shape=EnvelopeShape(registry, key, kind),
        doc=doc,
        web_adapter=web_adapter,
        response_type=(
            TypeKey.parse(response_type) if response_type is not None else None
        ),
    )
    for spec in versions:
        record = record.with_version(
            VersionEntry(
                version=spec.version,
                shape=spec.shape,
                type_key=versioned_key(spec.version, key, kind),
                doc=spec.doc,
                upcast=spec.up,
                downcast=spec.down,
            )
        )
    registry.put(record)
    logger.info(
        "Declared %s %s (versions %s)",
        kind.value,
        key,
        sorted(spec.version for spec in versions),
    )
    return MessageType(registry, key, kind, doc=doc, id_generator=id_generator)


def define_event(
    registry: SchemaRegistry,
    type_key: TypeKey | str,
    *versions: VersionSpec,
    doc: str | None = None,
    id_generator: IIDGenerator | None = None,
) -> MessageType:
    """Declare a versioned event. See :func:`define_message`."""
    return define_message(
        registry,
        MessageKind.EVENT,
        type_key,
        *versions,
        doc=doc,
        id_generator=id_generator,
    )


def define_command(
    registry: SchemaRegistry,
    type_key: TypeKey | str,
    *versions: VersionSpec,
    doc: str | None = None,
    response_type: TypeKey | str | None = None,
    web_adapter: Callable[[Any], Any] | None = None,
    id_generator: IIDGenerator | None = None,
) -> MessageType:
    """Declare a versioned command.

    *web_adapter* is an optional transformation the gateway applies to a raw
    request before validating it; *response_type* names the command's
    response message.
    """
    return define_message(
        registry,
        MessageKind.COMMAND,
        type_key,
        *versions,
        doc=doc,
        response_type=response_type,
        web_adapter=web_adapter,
        id_generator=id_generator,
    )
