"""Tests for type key construction and parsing."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from cqrs_ddd_schemas.keys import (
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

BASE = TypeKey("email.sendwithus", "opened")

segments = st.from_regex(r"\A[a-z][a-z0-9-]{0,8}\Z", fullmatch=True)
namespaces = st.lists(segments, min_size=1, max_size=4).map(".".join)


class TestTypeKey:
    def test_str_renders_namespace_and_name(self) -> None:
        assert str(BASE) == "email.sendwithus/opened"

    def test_parse_round_trips_str(self) -> None:
        assert TypeKey.parse("email.sendwithus/opened") == BASE

    def test_parse_returns_type_key_unchanged(self) -> None:
        assert TypeKey.parse(BASE) is BASE

    def test_parse_rejects_missing_separator(self) -> None:
        with pytest.raises(ValueError, match="namespace/name"):
            TypeKey.parse("opened")

    @pytest.mark.parametrize(("namespace", "name"), [("", "x"), ("ns", ""), ("ns", "a/b")])
    def test_rejects_invalid_parts(self, namespace: str, name: str) -> None:
        with pytest.raises(ValueError):
            TypeKey(namespace, name)

    def test_keys_are_hashable_and_ordered(self) -> None:
        keys = {TypeKey("b", "x"), TypeKey("a", "y"), TypeKey("a", "y")}
        assert sorted(keys) == [TypeKey("a", "y"), TypeKey("b", "x")]


class TestVersionedKeys:
    def test_event_version(self) -> None:
        assert event_version(1, BASE) == TypeKey("email.sendwithus.event.v1", "opened")

    def test_command_version(self) -> None:
        key = command_version(2, TypeKey("recruiter.profile", "create-profile"))
        assert str(key) == "recruiter.profile.command.v2/create-profile"

    def test_versioned_key_accepts_kind_string(self) -> None:
        assert versioned_key(0, BASE, "event") == event_version(0, BASE)

    @pytest.mark.parametrize("bad", [-1, 1.5, True, "1"])
    def test_versioned_key_rejects_invalid_version(self, bad: object) -> None:
        with pytest.raises(ValueError, match="non-negative integer"):
            versioned_key(bad, BASE, MessageKind.EVENT)  # type: ignore[arg-type]

    def test_versioned_key_rejects_unknown_kind(self) -> None:
        with pytest.raises(ValueError):
            versioned_key(1, BASE, "query")

    def test_multi_digit_versions(self) -> None:
        key = event_version(12, BASE)
        assert destructure(key) == (BASE, 12)
        assert base_key("email.sendwithus.event.v12/opened") == BASE


class TestParsing:
    def test_is_versioned(self) -> None:
        assert is_versioned("email.sendwithus.event.v1/opened")
        assert is_versioned(command_version(3, BASE))
        assert not is_versioned(BASE)
        assert not is_versioned("email.event/opened")
        assert not is_versioned("email.query.v1/opened")

    @pytest.mark.parametrize(
        "key", ["email.event.v01/opened", "email.event.v\u0663/opened", "email.event.v/opened"]
    )
    def test_non_canonical_version_segments(self, key: str) -> None:
        assert not is_versioned(key)
        assert destructure(key) is None
        assert base_key(key) == TypeKey.parse(key)

    def test_destructure_returns_none_for_unversioned(self) -> None:
        assert destructure(BASE) is None

    def test_destructure_versioned_string(self) -> None:
        assert destructure("recruiter.profile.command.v1/create-profile") == (
            TypeKey("recruiter.profile", "create-profile"),
            1,
        )

    def test_base_key_of_unversioned_is_identity(self) -> None:
        assert base_key(BASE) == BASE

    def test_versioned_kind(self) -> None:
        assert versioned_kind(event_version(1, BASE)) is MessageKind.EVENT
        assert versioned_kind(command_version(1, BASE)) is MessageKind.COMMAND
        assert versioned_kind(BASE) is None

    @given(
        namespace=namespaces,
        name=segments,
        version=st.integers(min_value=0, max_value=10_000),
        kind=st.sampled_from(list(MessageKind)),
    )
    def test_destructure_inverts_versioned_key(
        self, namespace: str, name: str, version: int, kind: MessageKind
    ) -> None:
        base = TypeKey(namespace, name)
        key = versioned_key(version, base, kind)

        assert destructure(key) == (base, version)
        assert destructure(TypeKey.parse(str(key))) == (base, version)
        assert versioned_kind(key) is kind
