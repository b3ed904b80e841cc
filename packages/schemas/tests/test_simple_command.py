"""Tests for simple commands."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import BaseModel

from cqrs_ddd_schemas.declarations import SimpleCommand, declare_simple
from cqrs_ddd_schemas.keys import MessageKind, TypeKey
from cqrs_ddd_schemas.primitives.exceptions import ValidationCause, ValidationError
from cqrs_ddd_schemas.registry import SchemaRegistry
from cqrs_ddd_schemas.validation import PydanticShape

WEBHOOK = TypeKey("email.sendwithus", "webhook")
OPENED = TypeKey("email.sendwithus", "opened")


class Webhook(BaseModel):
    event: str
    email: str


class RecordingHandler:
    def __init__(self) -> None:
        self.calls: list[Any] = []

    def __call__(self, command: dict[str, Any]) -> list[dict[str, Any]]:
        self.calls.append(command)
        if command["event"] != "open":
            return []
        return [
            {"event_type": "email.sendwithus.event.v1/opened", "a": command["email"]}
        ]


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def webhook(registry: SchemaRegistry, handler: RecordingHandler) -> SimpleCommand:
    return declare_simple(
        registry,
        WEBHOOK,
        PydanticShape(Webhook),
        handler,
        generates=[OPENED],
        doc="Sendwithus webhook callback.",
    )


class TestSimpleCommand:
    def test_invoke_returns_handler_output(
        self, webhook: SimpleCommand, handler: RecordingHandler
    ) -> None:
        command = {"event": "open", "email": "a@b.co"}

        payloads = webhook.invoke(command)

        assert payloads == [
            {"event_type": "email.sendwithus.event.v1/opened", "a": "a@b.co"}
        ]
        assert handler.calls == [command]

    def test_empty_output(self, webhook: SimpleCommand, handler: RecordingHandler) -> None:
        assert webhook({"event": "click", "email": "a@b.co"}) == []
        assert len(handler.calls) == 1

    def test_sequence_output_is_returned_unchanged(self, registry: SchemaRegistry) -> None:
        produced = ({"x": 1},)
        command = declare_simple(
            registry, WEBHOOK, PydanticShape(Webhook), lambda command: produced
        )
        assert command.invoke({"event": "x", "email": "y"}) is produced

    def test_generator_output_is_listed(self, registry: SchemaRegistry) -> None:
        def handle(command: dict[str, Any]) -> Any:
            yield {"n": 1}
            yield {"n": 2}

        command = declare_simple(registry, WEBHOOK, PydanticShape(Webhook), handle)
        assert command.invoke({"event": "x", "email": "y"}) == [{"n": 1}, {"n": 2}]

    def test_invalid_input_skips_handler(
        self, webhook: SimpleCommand, handler: RecordingHandler
    ) -> None:
        command = {"event": "open"}

        with pytest.raises(ValidationError) as exc_info:
            webhook.invoke(command)

        error = exc_info.value
        assert error.cause is ValidationCause.SIMPLE_COMMAND_SHAPE
        assert error.input is command
        assert "email" in error.errors
        assert handler.calls == []

    def test_registered_as_command(
        self, registry: SchemaRegistry, webhook: SimpleCommand
    ) -> None:
        record = registry.lookup(WEBHOOK)

        assert record.kind is MessageKind.COMMAND
        assert record.handler is webhook
        assert record.base_shape is webhook.shape
        assert record.generates == {OPENED}
        assert record.doc == "Sendwithus webhook callback."
        assert not record.is_versioned
        assert registry.list(MessageKind.COMMAND) == [WEBHOOK]

    def test_web_adapter_is_stored_not_applied(self, registry: SchemaRegistry) -> None:
        def adapter(request: Any) -> Any:
            raise AssertionError("adapter must not be called")

        command = declare_simple(
            registry,
            "email.sendwithus/webhook",
            PydanticShape(Webhook),
            lambda command: [],
            web_adapter=adapter,
        )

        assert command.invoke({"event": "x", "email": "y"}) == []
        assert registry.lookup(WEBHOOK).web_adapter is adapter
        assert command.web_adapter is adapter
        assert repr(command) == "SimpleCommand(email.sendwithus/webhook)"
