"""Common, reusable, domain-independent field types.

All types are ``typing.Annotated`` aliases usable as Pydantic field
annotations::

    class Heartbeat(BaseModel):
        host: HostStr
        port: Port
"""

from __future__ import annotations

from typing import Annotated, Union

from pydantic import AfterValidator, Field, StringConstraints

BASE64_PATTERN = r"^[a-zA-Z0-9+/]+={0,2}$"
COMMIT_PATTERN = r"^[0-9a-f]{6}$"
RELEASE_PATTERN = r"^((0|[1-9][0-9]*)\.){1,}(0|[1-9][0-9]*)(-SNAPSHOT)?$"
IPV4_PATTERN = r"^[0-9]+\.[0-9]+\.[0-9]+\.[0-9]+$"
FQDN_PATTERN = r"^[a-z][a-z0-9-]*[a-z0-9](\.[a-z][a-z0-9-]*[a-z0-9])*$"
GUID_PATTERN = (
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)
EMAIL_PATTERN = (
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@"
    r"((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\])"
    r"|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))$"
)
HANDLER_PATTERN = r"^[a-z][a-z-]*[a-z]$"

MAX_PORT = 65535


def _check_octets(value: str) -> str:
    if not all(0 <= int(octet) <= 255 for octet in value.split(".")):
        raise ValueError("IPv4 octets must be between 0 and 255")
    return value


def _check_port_string(value: str) -> str:
    try:
        port = int(value)
    except ValueError:
        raise ValueError("port must be an integer") from None
    if not 0 <= port < MAX_PORT:
        raise ValueError(f"port must be in [0, {MAX_PORT})")
    return value


def _check_host_port(value: str) -> str:
    host, sep, port = value.partition(":")
    if not host:
        raise ValueError("host is required")
    if sep:
        _check_port_string(port)
    return value


Base64Str = Annotated[str, StringConstraints(pattern=BASE64_PATTERN)]

# First six hex digits of a git commit hash.
CommitStr = Annotated[str, StringConstraints(pattern=COMMIT_PATTERN)]

ReleaseStr = Annotated[str, StringConstraints(pattern=RELEASE_PATTERN)]

VersionStr = Union[CommitStr, ReleaseStr]

IPv4Str = Annotated[
    str, StringConstraints(pattern=IPV4_PATTERN), AfterValidator(_check_octets)
]

FqdnStr = Annotated[str, StringConstraints(pattern=FQDN_PATTERN)]

HostStr = Union[IPv4Str, FqdnStr]

Port = Annotated[int, Field(ge=0, lt=MAX_PORT)]

PortStr = Annotated[str, AfterValidator(_check_port_string)]

# host[:port]
HostPortStr = Annotated[str, AfterValidator(_check_host_port)]

# Milliseconds since 1970.
Timestamp = Annotated[int, Field(gt=0)]

GuidStr = Annotated[str, StringConstraints(pattern=GUID_PATTERN)]

EmailStr = Annotated[str, StringConstraints(pattern=EMAIL_PATTERN)]

# Event and command handler names.
HandlerName = Annotated[str, StringConstraints(pattern=HANDLER_PATTERN)]

__all__ = [
    "Base64Str",
    "CommitStr",
    "EmailStr",
    "FqdnStr",
    "GuidStr",
    "HandlerName",
    "HostPortStr",
    "HostStr",
    "IPv4Str",
    "Port",
    "PortStr",
    "ReleaseStr",
    "Timestamp",
    "VersionStr",
]
