"""Tests for the reusable pydantic field types."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import TypeAdapter, ValidationError

from cqrs_ddd_schemas.common import (
    Base64Str,
    CommitStr,
    EmailStr,
    FqdnStr,
    GuidStr,
    HandlerName,
    HostPortStr,
    HostStr,
    IPv4Str,
    Port,
    PortStr,
    ReleaseStr,
    Timestamp,
    VersionStr,
)


def accepts(annotation: Any, value: Any) -> bool:
    try:
        TypeAdapter(annotation).validate_python(value)
    except ValidationError:
        return False
    return True


@pytest.mark.parametrize(
    ("annotation", "value", "expected"),
    [
        (Base64Str, "aGVsbG8=", True),
        (Base64Str, "not base64!", False),
        (CommitStr, "a1b2c3", True),
        (CommitStr, "a1b2c3d", False),
        (CommitStr, "A1B2C3", False),
        (ReleaseStr, "1.2.3", True),
        (ReleaseStr, "1.0-SNAPSHOT", True),
        (ReleaseStr, "01.2", False),
        (ReleaseStr, "1", False),
        (VersionStr, "abcdef", True),
        (VersionStr, "2.14.0", True),
        (VersionStr, "latest", False),
        (IPv4Str, "10.0.0.1", True),
        (IPv4Str, "256.0.0.1", False),
        (IPv4Str, "10.0.1", False),
        (FqdnStr, "worker.example.com", True),
        (FqdnStr, "localhost", True),
        (FqdnStr, "Worker.example.com", False),
        (FqdnStr, "-bad.example.com", False),
        (HostStr, "192.168.1.20", True),
        (HostStr, "db-1.internal", True),
        (HostStr, "not a host", False),
        (Port, 8080, True),
        (Port, 0, True),
        (Port, 65535, False),
        (Port, -1, False),
        (PortStr, "443", True),
        (PortStr, "https", False),
        (PortStr, "70000", False),
        (HostPortStr, "db.internal:5432", True),
        (HostPortStr, "db.internal", True),
        (HostPortStr, ":5432", False),
        (HostPortStr, "db.internal:abc", False),
        (Timestamp, 1_500_000_000_000, True),
        (Timestamp, 0, False),
        (GuidStr, "123e4567-e89b-12d3-a456-426614174000", True),
        (GuidStr, "123e4567e89b12d3a456426614174000", False),
        (EmailStr, "jane.doe+tag@example.co", True),
        (EmailStr, "jane@[10.0.0.1]", True),
        (EmailStr, "jane@example", False),
        (HandlerName, "email-tracker", True),
        (HandlerName, "tracker", True),
        (HandlerName, "Tracker", False),
        (HandlerName, "tracker-", False),
        (HandlerName, "t", False),
    ],
)
def test_field_types(annotation: Any, value: Any, expected: bool) -> None:
    assert accepts(annotation, value) is expected
