"""SchemaRegistry — concurrent store of message type metadata.

Writers serialise on a lock and publish a brand-new mapping in which exactly
one type key's record has been replaced. Readers grab the current mapping
reference without locking, so a reader sees either the old record or the new
one, never a mix.

Usage::

    registry = SchemaRegistry()
    registry.register(OPENED, opened_shape, "An email was opened", kind="event")
    registry.register_version(OPENED, 1, PydanticShape(OpenedV1))

    record = registry.lookup(OPENED)
    registry.list(MessageKind.EVENT)   # [TypeKey("email.sendwithus", "opened")]
"""

from __future__ import annotations

import builtins
import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from ..keys import (
    MessageKind,
    TypeKey,
    destructure,
    is_versioned,
    versioned_key,
    versioned_kind,
)
from ..primitives.exceptions import (
    SchemaRegistrationError,
    UnknownTypeKeyError,
    UnknownVersionError,
)
from ..versioning.entry import VersionEntry
from .record import RegistryRecord

if TYPE_CHECKING:
    from ..ports.shape import IShape
    from ..versioning.chain import VersionChain

logger = logging.getLogger("cqrs_ddd.schemas.registry")

Caster = Callable[[dict[str, Any]], dict[str, Any]]


class SchemaRegistry:
    """Central, thread-safe registry of message types and their versions.

    One instance lives for the whole application and is passed explicitly to
    every declaration and lookup site.

    Args:
        allow_redeclare: When ``False``, re-registering a type key with a
            different base shape raises :class:`SchemaRegistrationError`
            instead of overwriting the previous declaration.
    """

    def __init__(self, *, allow_redeclare: bool = True) -> None:
        self.allow_redeclare = allow_redeclare
        self._lock = threading.Lock()
        self._records: Mapping[TypeKey, RegistryRecord] = MappingProxyType({})

    # ── Registration ─────────────────────────────────────────────

    def register(
        self,
        type_key: TypeKey | str,
        base_shape: IShape | None,
        doc: str | None = None,
        *,
        kind: MessageKind | str,
        handler: Callable[..., Any] | None = None,
        web_adapter: Callable[[Any], Any] | None = None,
        generates: Iterable[TypeKey | str] = (),
        response_type: TypeKey | str | None = None,
    ) -> None:
        """Register (or replace) the base declaration of *type_key*.

        Versions registered earlier for the same key are kept.
        """
        key = self._base(type_key)
        kind = MessageKind(kind)
        changes: dict[str, Any] = {
            "base_shape": base_shape,
            "doc": doc,
            "handler": handler,
            "web_adapter": web_adapter,
            "generates": frozenset(TypeKey.parse(g) for g in generates),
            "response_type": (
                TypeKey.parse(response_type) if response_type is not None else None
            ),
        }

        def update(existing: RegistryRecord | None) -> RegistryRecord:
            if existing is None:
                return RegistryRecord(type_key=key, kind=kind, **changes)
            self._check_kind(existing, kind)
            replacing = existing.base_shape is not None
            if replacing and existing.base_shape is not base_shape:
                if not self.allow_redeclare:
                    raise SchemaRegistrationError(
                        f"{kind.value} {key} is already declared"
                    )
                logger.warning("Redeclaring %s %s", kind.value, key)
            return existing.with_base(**changes)

        self._swap(key, update)
        logger.debug("Registered %s %s", kind.value, key)

    def register_version(
        self,
        type_key: TypeKey | str,
        version: int,
        shape: IShape,
        doc: str | None = None,
        *,
        kind: MessageKind | str | None = None,
        upcast: Caster | None = None,
        downcast: Caster | None = None,
    ) -> None:
        """Register (or replace) one version of *type_key*.

        *kind* may be omitted when the base type is already registered.
        """
        key = self._base(type_key)
        resolved_kind = MessageKind(kind) if kind is not None else None

        def update(existing: RegistryRecord | None) -> RegistryRecord:
            record_kind = resolved_kind or (existing.kind if existing else None)
            if record_kind is None:
                raise SchemaRegistrationError(
                    f"Cannot register version {version} of undeclared {key} "
                    f"without a kind"
                )
            if existing is None:
                existing = RegistryRecord(type_key=key, kind=record_kind)
            self._check_kind(existing, record_kind)
            try:
                versioned = versioned_key(version, key, record_kind)
            except ValueError as exc:
                raise SchemaRegistrationError(str(exc)) from exc
            entry = VersionEntry(
                version=version,
                shape=shape,
                type_key=versioned,
                doc=doc,
                upcast=upcast,
                downcast=downcast,
            )
            return existing.with_version(entry)

        self._swap(key, update)
        logger.debug("Registered %s v%d", key, version)

    def put(self, record: RegistryRecord) -> None:
        """Publish *record* as the complete declaration of its type key.

        Unlike :meth:`register` followed by :meth:`register_version`, readers
        never observe a partially declared type.
        """

        def update(existing: RegistryRecord | None) -> RegistryRecord:
            if existing is not None:
                self._check_kind(existing, record.kind)
                if not self.allow_redeclare:
                    raise SchemaRegistrationError(
                        f"{record.kind.value} {record.type_key} is already declared"
                    )
                logger.warning("Redeclaring %s %s", record.kind.value, record.type_key)
            return record

        self._swap(self._base(record.type_key), update)
        logger.debug("Registered %s %s", record.kind.value, record.type_key)

    # ── Lookup ───────────────────────────────────────────────────

    def lookup(self, type_key: TypeKey | str) -> RegistryRecord:
        """Return the record for *type_key* (versioned keys resolve to their base).

        Raises:
            UnknownTypeKeyError: the type key was never registered.
        """
        record = self.get(type_key)
        if record is None:
            raise UnknownTypeKeyError(type_key)
        return record

    def get(self, type_key: TypeKey | str) -> RegistryRecord | None:
        parts = destructure(type_key)
        key = parts[0] if parts is not None else TypeKey.parse(type_key)
        record = self._records.get(key)
        if record is None or parts is None:
            return record
        if versioned_kind(type_key) is not record.kind:
            return None
        return record

    def shape_for(self, type_key: TypeKey | str) -> IShape:
        """Return the shape governing *type_key*.

        A versioned key yields that version's shape, a base key the base
        (composite) shape.
        """
        record = self.lookup(type_key)
        parts = destructure(type_key)
        if parts is None:
            if record.base_shape is None:
                raise UnknownTypeKeyError(type_key)
            return record.base_shape
        entry = record.versions.get(parts[1])
        if entry is None:
            raise UnknownVersionError(parts[1], type_key=record.type_key)
        return entry.shape

    def chain_for(self, type_key: TypeKey | str) -> VersionChain:
        """Return the :class:`VersionChain` of *type_key*'s base type."""
        return self.lookup(type_key).chain

    def cast(
        self,
        type_key: TypeKey | str,
        payload: dict[str, Any],
        from_version: int,
        to_version: int,
    ) -> dict[str, Any]:
        """Convenience: cast in one call without fetching the chain first."""
        return self.chain_for(type_key).cast(payload, from_version, to_version)

    def list(self, kind: MessageKind | str | None = None) -> builtins.list[TypeKey]:
        """Return all registered base type keys of *kind* (all kinds if ``None``)."""
        records = self._records
        wanted = MessageKind(kind) if kind is not None else None
        return sorted(
            key
            for key, record in records.items()
            if wanted is None or record.kind is wanted
        )

    def snapshot(self) -> Mapping[TypeKey, RegistryRecord]:
        """Return an immutable view of every record at this instant."""
        return self._records

    def __contains__(self, type_key: object) -> bool:
        if not isinstance(type_key, (TypeKey, str)):
            return False
        return self.get(type_key) is not None

    def __len__(self) -> int:
        return len(self._records)

    # ── Cleanup ──────────────────────────────────────────────────

    def clear(self) -> None:
        """Remove all registrations (testing utility)."""
        with self._lock:
            self._records = MappingProxyType({})

    # ── Internals ────────────────────────────────────────────────

    def _swap(
        self,
        key: TypeKey,
        update: Callable[[RegistryRecord | None], RegistryRecord],
    ) -> None:
        with self._lock:
            current = self._records
            replaced = dict(current)
            replaced[key] = update(current.get(key))
            self._records = MappingProxyType(replaced)

    @staticmethod
    def _base(type_key: TypeKey | str) -> TypeKey:
        key = TypeKey.parse(type_key)
        if is_versioned(key):
            raise SchemaRegistrationError(
                f"Expected an unversioned type key, got {key}"
            )
        return key

    @staticmethod
    def _check_kind(record: RegistryRecord, kind: MessageKind) -> None:
        if record.kind is not kind:
            raise SchemaRegistrationError(
                f"{record.type_key} is already registered as a "
                f"{record.kind.value}, not a {kind.value}"
            )


def cast(
    registry: SchemaRegistry,
    type_key: TypeKey | str,
    payload: dict[str, Any],
    from_version: int,
    to_version: int,
) -> dict[str, Any]:
    """Cast *payload* of *type_key* between two registered versions."""
    return registry.cast(type_key, payload, from_version, to_version)
