"""Validation system: ValidationResult and the shape adapters."""

from __future__ import annotations

from .predicate import PredicateShape
from .pydantic import PydanticShape, errors_from_pydantic
from .result import ValidationResult

__all__ = [
    "PredicateShape",
    "PydanticShape",
    "ValidationResult",
    "errors_from_pydantic",
]
