"""Simple commands — stateless or externally-shaped commands.

A simple command is validated against a shape this system does not
necessarily own (e.g. a webhook body) and processed by a pure handler
``input -> [payload, ...]``. There is no business rejection and no command
response: the only failure mode is a :class:`ValidationError`.

Origin metadata is not attached here; the boundary component invoking the
command is responsible for it.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from ..keys import MessageKind, TypeKey
from ..primitives.exceptions import ValidationCause, ValidationError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from ..ports.shape import IShape
    from ..registry.registry import SchemaRegistry

logger = logging.getLogger("cqrs_ddd.schemas.simple")


class SimpleCommand:
    """A declared simple command; calling it validates then handles the input."""

    def __init__(
        self,
        type_key: TypeKey,
        shape: IShape,
        handler: Callable[[Any], Iterable[dict[str, Any]]],
        *,
        web_adapter: Callable[[Any], Any] | None = None,
        generates: frozenset[TypeKey] = frozenset(),
        doc: str | None = None,
    ) -> None:
        self.type_key = type_key
        self.shape = shape
        self.handler = handler
        self.web_adapter = web_adapter
        self.generates = generates
        self.__doc__ = doc or ""

    def invoke(self, command: Any) -> Sequence[dict[str, Any]]:
        """Validate *command* and return the payloads the handler produces.

        A sequence returned by the handler is passed back unchanged; any
        other iterable (e.g. a generator) is collected into a list.

        Raises:
            ValidationError: with cause ``SIMPLE_COMMAND_SHAPE``; the handler
                is not called.
        """
        result = self.shape.check(command)
        if not result.is_valid:
            logger.debug("Simple command %s rejected: %s", self.type_key, result.errors)
            raise ValidationError(
                result.errors,
                input=command,
                cause=ValidationCause.SIMPLE_COMMAND_SHAPE,
            )
        output = self.handler(command)
        if isinstance(output, Sequence):
            return output
        return list(output)

    __call__ = invoke

    def __repr__(self) -> str:
        return f"SimpleCommand({self.type_key})"


def declare_simple(
    registry: SchemaRegistry,
    type_key: TypeKey | str,
    shape: IShape,
    handler: Callable[[Any], Iterable[dict[str, Any]]],
    web_adapter: Callable[[Any], Any] | None = None,
    generates: Iterable[TypeKey | str] = (),
    doc: str | None = None,
) -> SimpleCommand:
    """Declare a simple command and register it as a ``command`` record.

    *web_adapter*, if given, turns a raw external request into the input of
    :meth:`SimpleCommand.invoke`; it is stored for the boundary layer and
    never applied here. *generates* is the set of message types the handler
    may produce.
    """
    key = TypeKey.parse(type_key)
    command = SimpleCommand(
        key,
        shape,
        handler,
        web_adapter=web_adapter,
        generates=frozenset(TypeKey.parse(g) for g in generates),
        doc=doc,
    )
    registry.register(
        key,
        shape,
        doc,
        kind=MessageKind.COMMAND,
        handler=command,
        web_adapter=web_adapter,
        generates=command.generates,
    )
    logger.info("Declared simple command %s", key)
    return command
