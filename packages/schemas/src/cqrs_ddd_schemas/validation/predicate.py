"""PredicateShape — wraps a plain ``value -> bool`` function."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .result import ValidationResult

if TYPE_CHECKING:
    from collections.abc import Callable


class PredicateShape:
    """Adapts a boolean predicate into an :class:`~cqrs_ddd_schemas.ports.IShape`.

    A predicate that raises is treated as a failed check, with the exception
    text recorded as the message.
    """

    def __init__(
        self,
        predicate: Callable[[Any], bool],
        description: str | None = None,
        *,
        field: str = "__root__",
        examples: list[Any] | None = None,
    ) -> None:
        self._predicate = predicate
        self.description = description or getattr(predicate, "__name__", "predicate")
        self._field = field
        self._examples = list(examples or [])

    def check(self, value: Any) -> ValidationResult:
        try:
            ok = bool(self._predicate(value))
        except (TypeError, ValueError, KeyError, AttributeError) as exc:
            return ValidationResult.error(
                self._field, f"failed: {self.description} ({exc})"
            )
        if ok:
            return ValidationResult.success()
        return ValidationResult.error(self._field, f"failed: {self.description}")

    def examples(self) -> list[Any]:
        return list(self._examples)

    def __repr__(self) -> str:
        return f"PredicateShape({self.description!r})"
