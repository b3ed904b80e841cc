"""Version chains — schema evolution between adjacent message versions."""

from .chain import CastResult, VersionChain
from .entry import VersionEntry

__all__ = [
    "CastResult",
    "VersionChain",
    "VersionEntry",
]
