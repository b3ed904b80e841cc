"""VersionEntry — one declared shape of a message type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..keys import TypeKey
    from ..ports.shape import IShape


@dataclass(frozen=True)
class VersionEntry:
    """A version number, its shape, and the casters linking it to ``version - 1``.

    ``upcast`` moves a payload from the previous version to this one;
    ``downcast`` moves a payload of this version back to the previous one.
    Both are ``None`` on the lowest version of a chain.
    """

    version: int
    shape: IShape
    type_key: TypeKey | None = None
    doc: str | None = None
    upcast: Callable[[dict[str, Any]], dict[str, Any]] | None = None
    downcast: Callable[[dict[str, Any]], dict[str, Any]] | None = None

    @property
    def has_casters(self) -> bool:
        return self.upcast is not None and self.downcast is not None

    @property
    def has_any_caster(self) -> bool:
        return self.upcast is not None or self.downcast is not None
