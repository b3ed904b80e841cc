"""Tests for envelope models."""

from __future__ import annotations

import uuid
from typing import Any

import pytest
from pydantic import ValidationError

from cqrs_ddd_schemas.envelope import (
    CommandEnvelope,
    CommandSource,
    EventEnvelope,
    GeneratedBy,
    Provenance,
    as_mapping,
    envelope_model,
)
from cqrs_ddd_schemas.keys import MessageKind


def generated_by(**overrides: Any) -> dict[str, Any]:
    return {"handler": "email-tracker", "host": "10.0.0.7", **overrides}


class TestProvenance:
    def test_minimal(self) -> None:
        provenance = Provenance(created_at=1, generated_by=generated_by())
        assert provenance.generated_by == GeneratedBy(handler="email-tracker", host="10.0.0.7")
        assert provenance.derived_from is None

    def test_derived_from(self) -> None:
        parent = uuid.uuid4()
        provenance = Provenance(
            created_at=1, generated_by=generated_by(), derived_from=[str(parent)]
        )
        assert provenance.derived_from == frozenset({parent})

    def test_derived_from_must_not_be_empty(self) -> None:
        with pytest.raises(ValidationError, match="at least one event id"):
            Provenance(created_at=1, generated_by=generated_by(), derived_from=[])

    @pytest.mark.parametrize(
        "overrides",
        [
            {"handler": "Email_Tracker"},
            {"host": "not a host"},
            {"commit": "xyz"},
            {"span": -1},
        ],
    )
    def test_generated_by_constraints(self, overrides: dict[str, Any]) -> None:
        with pytest.raises(ValidationError):
            GeneratedBy(**generated_by(**overrides))

    def test_frozen(self) -> None:
        provenance = Provenance(created_at=1, generated_by=generated_by())
        with pytest.raises(ValidationError):
            provenance.created_at = 2  # type: ignore[misc]


class TestEnvelopes:
    def test_event_envelope(self) -> None:
        envelope = EventEnvelope.model_validate(
            {
                "id": "00000000-0000-0000-0000-000000000001",
                "payload": {"event_type": "email.sendwithus.event.v1/opened"},
                "provenance": {"created_at": 5, "generated_by": generated_by()},
            }
        )
        assert envelope.id == uuid.UUID(int=1)
        assert envelope.type_tag == "email.sendwithus.event.v1/opened"
        assert envelope.origin is envelope.provenance

    def test_command_envelope(self) -> None:
        process = uuid.uuid4()
        envelope = CommandEnvelope(
            id=uuid.uuid4(),
            payload={"command_type": "recruiter.profile.command.v1/create-profile"},
            source=CommandSource(username="ada", process_id=process),
        )
        assert envelope.type_tag == "recruiter.profile.command.v1/create-profile"
        assert envelope.origin is not None
        assert envelope.origin.process_id == process

    def test_type_tag_of_other_kind_is_ignored(self) -> None:
        envelope = EventEnvelope(
            id=uuid.uuid4(), payload={"command_type": "a.command.v1/b"}
        )
        assert envelope.type_tag is None

    def test_non_string_tag(self) -> None:
        envelope = EventEnvelope(id=uuid.uuid4(), payload={"event_type": 3})
        assert envelope.type_tag is None

    def test_payload_is_detached_from_input(self) -> None:
        raw = {"event_type": "a.event.v1/b"}
        envelope = EventEnvelope(id=uuid.uuid4(), payload=raw)

        raw["extra"] = 1
        dumped = as_mapping(envelope)
        dumped["payload"]["other"] = 2

        assert envelope.payload == {"event_type": "a.event.v1/b"}

    def test_envelope_model(self) -> None:
        assert envelope_model("event") is EventEnvelope
        assert envelope_model(MessageKind.COMMAND) is CommandEnvelope
        assert EventEnvelope.origin_field == "provenance"
        assert CommandEnvelope.origin_field == "source"

    def test_as_mapping(self) -> None:
        envelope = EventEnvelope(id=uuid.UUID(int=3), payload={"a": 1})
        assert as_mapping(envelope) == {
            "id": uuid.UUID(int=3),
            "payload": {"a": 1},
            "provenance": None,
        }
        raw = {"id": "x"}
        assert as_mapping(raw) is raw
