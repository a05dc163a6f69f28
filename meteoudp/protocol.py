"""Wire format shared by the weather client and server."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import Enum, IntEnum

SERVER_PORT = 56700
CITY_SIZE = 64
REQUEST_SIZE = 1 + CITY_SIZE

_RESPONSE_STRUCT = struct.Struct("!Icf")
RESPONSE_SIZE = _RESPONSE_STRUCT.size


class ProtocolError(ValueError):
    """Raised when a message cannot be encoded or decoded."""


class Status(IntEnum):
    """Response status codes."""

    SUCCESS = 0
    CITY_NOT_FOUND = 1
    INVALID_REQUEST = 2


class WeatherType(str, Enum):
    """Kinds of weather data a client may ask for."""

    TEMPERATURE = "t"
    HUMIDITY = "h"
    WIND = "w"
    PRESSURE = "p"


def _kind_byte(kind: str) -> bytes:
    if not isinstance(kind, str) or len(kind) != 1:
        raise ProtocolError(f"type must be a single character, got {kind!r}")
    try:
        return kind.encode("latin-1")
    except UnicodeEncodeError as exc:
        raise ProtocolError(f"type {kind!r} does not fit in one byte") from exc


@dataclass(frozen=True)
class WeatherRequest:
    """A request: one type byte followed by a NUL-padded 64-byte city field."""

    kind: str
    city: str

    def encode(self) -> bytes:
        """Serialise the request to its 65-byte wire form."""
        city = self.city.encode("utf-8")
        if len(city) >= CITY_SIZE:
            raise ProtocolError(
                f"city name too long ({len(city)} bytes, at most {CITY_SIZE - 1})"
            )
        if b"\0" in city:
            raise ProtocolError("city name may not contain NUL bytes")
        return _kind_byte(str(self.kind.value if isinstance(self.kind, Enum) else self.kind)) + city.ljust(
            CITY_SIZE, b"\0"
        )

    @classmethod
    def decode(cls, data: bytes) -> "WeatherRequest":
        """Parse a request datagram; the city ends at the first NUL byte."""
        if not data:
            raise ProtocolError("empty request")
        data = bytes(data[:REQUEST_SIZE])
        kind = chr(data[0])
        city = data[1:].split(b"\0", 1)[0].decode("utf-8", errors="replace")
        return cls(kind, city)


@dataclass(frozen=True)
class WeatherResponse:
    """A response: status (u32), echoed type byte and a float32 value, big-endian."""

    status: int
    kind: str
    value: float

    def encode(self) -> bytes:
        """Serialise the response to its 9-byte wire form."""
        kind = self.kind.value if isinstance(self.kind, Enum) else self.kind
        try:
            return _RESPONSE_STRUCT.pack(int(self.status), _kind_byte(kind), self.value)
        except struct.error as exc:
            raise ProtocolError(str(exc)) from exc

    @classmethod
    def decode(cls, data: bytes) -> "WeatherResponse":
        """Parse a response datagram."""
        if len(data) < RESPONSE_SIZE:
            raise ProtocolError(
                f"response too short ({len(data)} bytes, need {RESPONSE_SIZE})"
            )
        raw_status, kind, value = _RESPONSE_STRUCT.unpack(bytes(data[:RESPONSE_SIZE]))
        try:
            status: int = Status(raw_status)
        except ValueError:
            status = raw_status
        return cls(status, kind.decode("latin-1"), value)