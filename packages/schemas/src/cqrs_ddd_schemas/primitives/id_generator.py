from __future__ import annotations

import uuid
from typing import Protocol


class IIDGenerator(Protocol):
    """
    Protocol for envelope id generation strategies.
    Tests plug in deterministic generators; production uses UUIDv4.
    """

    def next_id(self) -> uuid.UUID:
        """Generates the next unique envelope identifier."""
        ...


class UUID4Generator(IIDGenerator):
    """Default envelope id generator using UUIDv4."""

    def next_id(self) -> uuid.UUID:
        return uuid.uuid4()
