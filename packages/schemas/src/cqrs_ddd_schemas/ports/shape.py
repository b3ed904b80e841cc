"""IShape — the opaque validator capability a message version is declared with."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..validation.result import ValidationResult


@runtime_checkable
class IShape(Protocol):
    """Protocol for payload shape checks.

    Implementations must not mutate *value*.
    """

    def check(self, value: Any) -> ValidationResult:
        """Validate *value* and return a
        :class:`~cqrs_ddd_schemas.validation.result.ValidationResult`.
        """
        ...


@runtime_checkable
class IExampleShape(IShape, Protocol):
    """A shape that can also produce example values that pass it."""

    def examples(self) -> list[Any]:
        ...
