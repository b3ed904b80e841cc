"""Envelopes — the common outer structure of command and event instances.

An envelope is ``{id, payload, origin?}``. The payload always carries
exactly one type tag (``event_type`` or ``command_type``) holding the
versioned type key, as a ``namespace/name`` string, that governs its
validation.
"""

from __future__ import annotations

import uuid
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import CommitStr, HandlerName, HostStr, Timestamp  # noqa: TC001
from .keys import MessageKind

EVENT_TYPE_FIELD = "event_type"
COMMAND_TYPE_FIELD = "command_type"

TYPE_TAG_FIELDS: dict[MessageKind, str] = {
    MessageKind.EVENT: EVENT_TYPE_FIELD,
    MessageKind.COMMAND: COMMAND_TYPE_FIELD,
}


# ── Event provenance ────────────────────────────────────────────────


class GeneratedBy(BaseModel):
    """The event handler that produced an event."""

    model_config = ConfigDict(frozen=True)

    handler: HandlerName
    host: HostStr
    commit: CommitStr | None = None
    span: int | None = Field(
        default=None,
        ge=0,
        description=(
            "Milliseconds between consuming the most recent parent event "
            "and creating this event"
        ),
    )


class Provenance(BaseModel):
    """Everything about the origins of an event."""

    model_config = ConfigDict(frozen=True)

    created_at: Timestamp
    generated_by: GeneratedBy
    derived_from: frozenset[uuid.UUID] | None = Field(
        default=None,
        description="Ids of the events directly used to compute this one",
    )

    @field_validator("derived_from")
    @classmethod
    def _derived_from_not_empty(
        cls, value: frozenset[uuid.UUID] | None
    ) -> frozenset[uuid.UUID] | None:
        if value is not None and not value:
            raise ValueError("derived_from must contain at least one event id")
        return value


# ── Command source ──────────────────────────────────────────────────


class CommandSource(BaseModel):
    """Who issued a command, and where its response should go."""

    model_config = ConfigDict(frozen=True)

    username: str | None = None
    host: HostStr | None = None
    received_at: Timestamp | None = None
    process_id: uuid.UUID | None = Field(
        default=None,
        description="Id of the multi-step process this command belongs to",
    )
    response_id: uuid.UUID | None = Field(
        default=None,
        description="Id locating the resource that receives the response",
    )


# ── Envelopes ───────────────────────────────────────────────────────


class Envelope(BaseModel):
    """Base envelope: a unique id and a tagged payload.

    The envelope is frozen but ``payload`` is a plain ``dict`` owned by this
    envelope: validation copies the input mapping, so changes to the
    caller's dict never reach the envelope. Treat ``payload`` as read-only
    and use :func:`as_mapping` for a detached copy.
    """

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[MessageKind]
    type_field: ClassVar[str]
    origin_field: ClassVar[str]

    id: uuid.UUID
    payload: dict[str, Any]

    @property
    def type_tag(self) -> str | None:
        tag = self.payload.get(self.type_field)
        return tag if isinstance(tag, str) else None

    @property
    def origin(self) -> BaseModel | None:
        return None


class EventEnvelope(Envelope):
    kind: ClassVar[MessageKind] = MessageKind.EVENT
    type_field: ClassVar[str] = EVENT_TYPE_FIELD
    origin_field: ClassVar[str] = "provenance"

    provenance: Provenance | None = None

    @property
    def origin(self) -> Provenance | None:
        return self.provenance


class CommandEnvelope(Envelope):
    kind: ClassVar[MessageKind] = MessageKind.COMMAND
    type_field: ClassVar[str] = COMMAND_TYPE_FIELD
    origin_field: ClassVar[str] = "source"

    source: CommandSource | None = None

    @property
    def origin(self) -> CommandSource | None:
        return self.source


ENVELOPE_MODELS: dict[MessageKind, type[Envelope]] = {
    MessageKind.EVENT: EventEnvelope,
    MessageKind.COMMAND: CommandEnvelope,
}


def envelope_model(kind: MessageKind | str) -> type[Envelope]:
    return ENVELOPE_MODELS[MessageKind(kind)]


def as_mapping(envelope: Envelope | dict[str, Any]) -> dict[str, Any]:
    """Return *envelope* as a plain dict.

    Envelopes are dumped into a fresh, detached dict; plain dicts are
    returned as-is.
    """
    if isinstance(envelope, Envelope):
        return envelope.model_dump()
    return envelope


__all__ = [
    "COMMAND_TYPE_FIELD",
    "EVENT_TYPE_FIELD",
    "TYPE_TAG_FIELDS",
    "CommandEnvelope",
    "CommandSource",
    "Envelope",
    "EventEnvelope",
    "GeneratedBy",
    "Provenance",
    "as_mapping",
    "envelope_model",
]
