"""RegistryRecord — the immutable metadata stored per base type key."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from ..keys import versioned_key
from ..versioning.chain import VersionChain

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from ..keys import MessageKind, TypeKey
    from ..ports.shape import IShape
    from ..versioning.entry import VersionEntry


def _empty_versions() -> Mapping[int, VersionEntry]:
    return MappingProxyType({})


@dataclass(frozen=True)
class RegistryRecord:
    """Everything the registry knows about one base type key.

    Records are never mutated; every registry write publishes a new record
    built with :meth:`with_base` or :meth:`with_version`.
    """

    type_key: TypeKey
    kind: MessageKind
    base_shape: IShape | None = None
    doc: str | None = None
    versions: Mapping[int, VersionEntry] = field(default_factory=_empty_versions)
    handler: Callable[..., Any] | None = None
    web_adapter: Callable[[Any], Any] | None = None
    generates: frozenset[TypeKey] = frozenset()
    response_type: TypeKey | None = None

    def with_base(self, **changes: Any) -> RegistryRecord:
        return dataclasses.replace(self, **changes)

    def with_version(self, entry: VersionEntry) -> RegistryRecord:
        versions = dict(self.versions)
        versions[entry.version] = entry
        return dataclasses.replace(
            self, versions=MappingProxyType(dict(sorted(versions.items())))
        )

    @property
    def version_keys(self) -> frozenset[TypeKey]:
        """The versioned type keys a payload of this type may be tagged with."""
        return frozenset(
            versioned_key(v, self.type_key, self.kind) for v in self.versions
        )

    @property
    def chain(self) -> VersionChain:
        return VersionChain(
            self.versions.values(), type_key=self.type_key, kind=self.kind
        )

    @property
    def is_versioned(self) -> bool:
        return bool(self.versions)
