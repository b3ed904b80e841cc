"""Version chains — ordered versions of one message type and the cast engine.

A chain walks a payload one version at a time: upward through the
``upcast`` of each next version, downward through the ``downcast`` of
each current version. Quick-start::

    chain = VersionChain(
        [
            VersionEntry(1, shape_v1),
            VersionEntry(2, shape_v2, upcast=add_b, downcast=drop_b),
        ]
    )
    chain.cast({"a": "x"}, 1, 2)   # {"a": "x", "b": False}
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..envelope import TYPE_TAG_FIELDS
from ..keys import versioned_key
from ..primitives.exceptions import (
    CastError,
    CasterFailedError,
    MissingCasterError,
    SchemaRegistrationError,
    UnknownVersionError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from ..keys import MessageKind, TypeKey
    from ..primitives.exceptions import ErrorKind
    from .entry import VersionEntry

logger = logging.getLogger("cqrs_ddd.schemas.casting")


@dataclass(frozen=True)
class CastResult:
    """Outcome of :meth:`VersionChain.try_cast`.

    On failure ``payload`` is the caller's original payload and ``error``
    says why; callers branch on ``result.kind``.
    """

    payload: dict[str, Any]
    error: CastError | None = None

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        return self.error.kind if self.error is not None else None

    def unwrap(self) -> dict[str, Any]:
        """Return the cast payload or raise the captured error."""
        if self.error is not None:
            raise self.error
        return self.payload

    def __bool__(self) -> bool:
        return self.is_ok


class VersionChain:
    """Version entries of one base type key, ordered by version number.

    Returned by :meth:`~cqrs_ddd_schemas.registry.SchemaRegistry.chain_for`.
    When the chain knows its ``type_key`` and ``kind``, each cast step also
    rewrites the payload's type tag to the step's versioned key.
    """

    def __init__(
        self,
        entries: Iterable[VersionEntry],
        *,
        type_key: TypeKey | None = None,
        kind: MessageKind | None = None,
    ) -> None:
        self.type_key = type_key
        self.kind = kind
        self._entries: dict[int, VersionEntry] = {
            entry.version: entry
            for entry in sorted(entries, key=lambda e: e.version)
        }

    # ── Introspection ────────────────────────────────────────────

    @property
    def versions(self) -> list[int]:
        return list(self._entries)

    @property
    def lowest_version(self) -> int | None:
        return next(iter(self._entries), None)

    @property
    def latest_version(self) -> int | None:
        """The highest declared version, ``None`` for an empty chain."""
        return max(self._entries) if self._entries else None

    def entry(self, version: int) -> VersionEntry:
        try:
            return self._entries[version]
        except KeyError:
            raise UnknownVersionError(version, type_key=self.type_key) from None

    def __contains__(self, version: object) -> bool:
        return version in self._entries

    def __iter__(self) -> Iterator[VersionEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def missing_versions(self) -> list[int]:
        """Versions absent between the lowest and latest declared versions."""
        if not self._entries:
            return []
        lowest, latest = min(self._entries), max(self._entries)
        return [v for v in range(lowest, latest + 1) if v not in self._entries]

    def check_integrity(self) -> None:
        """Raise :class:`SchemaRegistrationError` unless the chain is gap-free
        and casters are present on exactly the non-lowest versions.
        """
        missing = self.missing_versions()
        if missing:
            raise SchemaRegistrationError(
                f"{self.type_key}: versions {missing} are missing from the chain"
            )
        lowest = self.lowest_version
        for entry in self:
            if entry.version == lowest and entry.has_any_caster:
                raise SchemaRegistrationError(
                    f"{self.type_key}: lowest version {entry.version} "
                    f"must not declare upcast/downcast"
                )
            if entry.version != lowest and not entry.has_casters:
                raise SchemaRegistrationError(
                    f"{self.type_key}: version {entry.version} "
                    f"must declare both upcast and downcast"
                )

    # ── Casting ──────────────────────────────────────────────────

    def cast(
        self,
        payload: dict[str, Any],
        from_version: int,
        to_version: int,
    ) -> dict[str, Any]:
        """Move *payload* from *from_version* to *to_version*.

        The caller's payload is never modified. Casting to the same version
        returns *payload* itself.

        Raises:
            UnknownVersionError: an endpoint or an intermediate version is
                not registered.
            MissingCasterError: a caster on the path is absent.
            CasterFailedError: a caster raised or did not return a dict.
        """
        context: dict[str, Any] = {
            "type_key": self.type_key,
            "payload": payload,
            "from_version": from_version,
            "to_version": to_version,
        }
        for version in (from_version, to_version):
            if version not in self._entries:
                raise UnknownVersionError(version, **context)
        if from_version == to_version:
            return payload

        step = 1 if to_version > from_version else -1
        path = range(from_version + step, to_version + step, step)
        for version in path:
            if version not in self._entries:
                raise UnknownVersionError(version, **context)

        # A broken chain fails before any caster runs.
        casters = []
        for target in path:
            if step > 0:
                fn = self._entries[target].upcast
                direction, owner = "upcast", target
            else:
                fn = self._entries[target + 1].downcast
                direction, owner = "downcast", target + 1
            if fn is None:
                raise MissingCasterError(owner, direction, **context)
            casters.append((target, owner, direction, fn))

        data = copy.deepcopy(payload)
        version = from_version
        for target, owner, direction, fn in casters:
            try:
                data = fn(data)
            except Exception as exc:
                raise CasterFailedError(owner, direction, repr(exc), **context) from exc
            if not isinstance(data, dict):
                raise CasterFailedError(
                    owner,
                    direction,
                    f"returned {type(data).__name__}, not dict",
                    **context,
                )
            data = self._retag(data, target)
            logger.debug("Cast %s v%d → v%d", self.type_key, version, target)
            version = target
        return data

    def try_cast(
        self,
        payload: dict[str, Any],
        from_version: int,
        to_version: int,
    ) -> CastResult:
        """Like :meth:`cast`, but returns a :class:`CastResult` instead of raising."""
        try:
            return CastResult(self.cast(payload, from_version, to_version))
        except CastError as exc:
            return CastResult(payload, exc)

    def upcast_to_latest(
        self, payload: dict[str, Any], from_version: int
    ) -> tuple[dict[str, Any], int]:
        """Cast *payload* to the latest version.

        Returns:
            A ``(transformed_payload, latest_version)`` tuple.
        """
        latest = self.latest_version
        if latest is None:
            raise UnknownVersionError(
                from_version, type_key=self.type_key, payload=payload
            )
        return self.cast(payload, from_version, latest), latest

    def _retag(self, data: dict[str, Any], version: int) -> dict[str, Any]:
        if self.type_key is None or self.kind is None:
            return data
        field_name = TYPE_TAG_FIELDS[self.kind]
        if field_name in data:
            data[field_name] = str(versioned_key(version, self.type_key, self.kind))
        return data

    def __repr__(self) -> str:
        return f"VersionChain({self.type_key}, versions={self.versions})"
