"""Shared fixtures for schema registry tests."""

from __future__ import annotations

import sys
import uuid
from pathlib import Path
from typing import Any

import pytest
from pydantic import BaseModel, ConfigDict

# Ensure the schemas package is importable when running pytest from repo root
# (e.g. without pip install -e .)
_schemas_src = Path(__file__).resolve().parent.parent / "src"
if _schemas_src.is_dir() and str(_schemas_src) not in sys.path:
    sys.path.insert(0, str(_schemas_src))

from cqrs_ddd_schemas.declarations import define_command, define_event, version  # noqa: E402
from cqrs_ddd_schemas.keys import TypeKey  # noqa: E402
from cqrs_ddd_schemas.messages import MessageType  # noqa: E402
from cqrs_ddd_schemas.registry import SchemaRegistry  # noqa: E402
from cqrs_ddd_schemas.validation import PydanticShape  # noqa: E402

OPENED = TypeKey("email.sendwithus", "opened")
CREATE_PROFILE = TypeKey("recruiter.profile", "create-profile")


class OpenedV1(BaseModel):
    model_config = ConfigDict(strict=True)

    a: str


class OpenedV2(BaseModel):
    model_config = ConfigDict(strict=True)

    a: str
    b: bool


class CreateProfileV1(BaseModel):
    name: str


def add_b(payload: dict[str, Any]) -> dict[str, Any]:
    return {**payload, "b": False}


def drop_b(payload: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in payload.items() if k != "b"}


class SequentialIdGenerator:
    """Deterministic envelope ids for assertions."""

    def __init__(self) -> None:
        self.count = 0

    def next_id(self) -> uuid.UUID:
        self.count += 1
        return uuid.UUID(int=self.count)


@pytest.fixture
def registry() -> SchemaRegistry:
    """Create fresh registry for each test."""
    return SchemaRegistry()


@pytest.fixture
def opened(registry: SchemaRegistry) -> MessageType:
    """Event with v1 ``{a: str}`` and v2 ``{a: str, b: bool}``."""
    return define_event(
        registry,
        OPENED,
        version(1, PydanticShape(OpenedV1), "First cut"),
        version(2, PydanticShape(OpenedV2), up=add_b, down=drop_b),
        doc="A given email was opened by the recipient.",
        id_generator=SequentialIdGenerator(),
    )


@pytest.fixture
def create_profile(registry: SchemaRegistry) -> MessageType:
    return define_command(
        registry,
        CREATE_PROFILE,
        version(1, PydanticShape(CreateProfileV1)),
        doc="Create a recruiter profile.",
        response_type="recruiter.profile/profile-created",
    )


@pytest.fixture
def provenance() -> dict[str, Any]:
    return {
        "created_at": 1_500_000_000_000,
        "generated_by": {"handler": "email-tracker", "host": "worker.example.com"},
    }
