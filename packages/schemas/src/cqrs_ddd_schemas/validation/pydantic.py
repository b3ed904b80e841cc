"""PydanticShape — leverages Pydantic model validation."""

from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .result import ValidationResult


def errors_from_pydantic(exc: PydanticValidationError) -> dict[str, list[str]]:
    """Convert a pydantic ``ValidationError`` into ``{loc: [messages]}``."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        loc = ".".join(str(p) for p in error.get("loc", ())) or "__root__"
        msg = error.get("msg", "validation error")
        errors.setdefault(loc, []).append(msg)
    return errors


class PydanticShape:
    """Checks values against a Pydantic model (or any type Pydantic can validate).

    The value is validated, never replaced: a passing payload is returned
    to callers untouched by the surrounding machinery.

    Usage::

        class OpenedV1(BaseModel):
            email: str

        shape = PydanticShape(OpenedV1)
        shape.check({"email": "a@b.co"}).is_valid  # True
    """

    def __init__(self, model: Any, *, examples: list[Any] | None = None) -> None:
        self.model = model
        self._adapter: TypeAdapter[Any] = TypeAdapter(model)
        self._examples = list(examples or [])

    def check(self, value: Any) -> ValidationResult:
        try:
            self._adapter.validate_python(value)
        except PydanticValidationError as exc:
            return ValidationResult.failure(errors_from_pydantic(exc))
        return ValidationResult.success()

    def examples(self) -> list[Any]:
        return list(self._examples)

    def __repr__(self) -> str:
        name = getattr(self.model, "__name__", repr(self.model))
        return f"PydanticShape({name})"
