"""UDP weather server answering requests with random readings."""

from __future__ import annotations

import random
import re
import socket
import sys
from typing import Optional, Sequence, TextIO

from .protocol import (
    REQUEST_SIZE,
    SERVER_PORT,
    ProtocolError,
    Status,
    WeatherRequest,
    WeatherResponse,
    WeatherType,
)

SUPPORTED_CITIES = (
    "bari", "roma", "milano", "napoli", "torino",
    "palermo", "genova", "bologna", "firenze", "venezia",
)

_VALID_TYPES = frozenset(t.value for t in WeatherType)


def _rng(rng):
    return random if rng is None else rng


def get_temperature(rng=None) -> float:
    """Temperature in °C, from -10.0 to 40.0."""
    return _rng(rng).randrange(501) / 10.0 - 10.0


def get_humidity(rng=None) -> float:
    """Relative humidity in %, from 20.0 to 100.0."""
    return _rng(rng).randrange(801) / 10.0 + 20.0


def get_wind(rng=None) -> float:
    """Wind speed in km/h, from 0.0 to 100.0."""
    return _rng(rng).randrange(1001) / 10.0


def get_pressure(rng=None) -> float:
    """Pressure in hPa, from 950.0 to 1050.0."""
    return _rng(rng).randrange(1001) / 10.0 + 950.0


def is_valid_type(kind: str) -> bool:
    """True if ``kind`` is one of the supported weather type letters."""
    return kind in _VALID_TYPES


def is_valid_city(city: str) -> bool:
    """True if ``city`` is a supported city, compared case-insensitively."""
    return city.lower() in SUPPORTED_CITIES


_GENERATORS = {
    WeatherType.TEMPERATURE.value: get_temperature,
    WeatherType.HUMIDITY.value: get_humidity,
    WeatherType.WIND.value: get_wind,
    WeatherType.PRESSURE.value: get_pressure,
}


def get_weather_value(kind: str, rng=None) -> float:
    """A random reading for ``kind``, or 0.0 for an unknown type."""
    generator = _GENERATORS.get(kind)
    return generator(rng) if generator else 0.0


def build_response(request: WeatherRequest, rng=None) -> WeatherResponse:
    """Work out the answer to a request."""
    if not is_valid_type(request.kind):
        return WeatherResponse(Status.INVALID_REQUEST, "\0", 0.0)
    if not is_valid_city(request.city):
        return WeatherResponse(Status.CITY_NOT_FOUND, request.kind, 0.0)
    return WeatherResponse(
        Status.SUCCESS, request.kind, get_weather_value(request.kind, rng)
    )


def handle_datagram(data: bytes, rng=None) -> bytes:
    """Decode a request datagram and return the encoded response."""
    return build_response(WeatherRequest.decode(data), rng).encode()


class WeatherServer:
    """A bound UDP socket serving weather requests."""

    def __init__(self, port: int = SERVER_PORT, host: str = "", rng=None,
                 out: Optional[TextIO] = None):
        self.rng = rng
        self.out = sys.stdout if out is None else out
        try:
            self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM,
                                       socket.IPPROTO_UDP)
        except OSError as exc:
            raise OSError("Creazione del socket fallita.") from exc
        self._print("Creazione socket eseguita.")
        try:
            self._sock.bind((host, port))
        except OSError as exc:
            self._sock.close()
            raise OSError("Binding fallito.") from exc
        self.host, self.port = self._sock.getsockname()
        self._print(f"Binding completato sulla porta {self.port}.")

    def _print(self, text: str) -> None:
        print(text, file=self.out)

    @staticmethod
    def _client_name(ip: str) -> str:
        try:
            return socket.gethostbyaddr(ip)[0]
        except OSError:
            return ip

    def serve_once(self) -> bool:
        """Receive and answer one datagram; return True if a reply was sent."""
        try:
            data, client = self._sock.recvfrom(REQUEST_SIZE)
            request = WeatherRequest.decode(data)
        except (OSError, ProtocolError):
            self._print("Ricezione richiesta fallita.")
            return False
        ip = client[0]
        self._print(
            f"Richiesta ricevuta da {self._client_name(ip)} (ip {ip}): "
            f"type='{request.kind}', city='{request.city}'"
        )
        reply = build_response(request, self.rng).encode()
        try:
            self._sock.sendto(reply, client)
        except OSError:
            self._print("Invio risposta fallito.")
            return False
        self._print("Risposta inviata.")
        return True

    def serve_forever(self) -> None:
        """Answer requests until interrupted."""
        while True:
            self._print("\nIn attesa di richieste UDP...")
            self.serve_once()

    def close(self) -> None:
        """Release the socket."""
        self._sock.close()

    def __enter__(self) -> "WeatherServer":
        return self

    def __exit__(self, *args) -> None:
        self.close()


def _atoi(text: str) -> int:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


def parse_args(argv: Sequence[str]) -> Optional[int]:
    """Return the port given with ``-p``, or None; raise ValueError if it is out of range."""
    port = None
    args = iter(argv)
    for arg in args:
        if arg != "-p":
            continue
        value = next(args, None)
        if value is None:
            break
        port = _atoi(value)
        if not 1024 <= port <= 65535:
            raise ValueError("Errore: porta non valida (usa 1024-65535)")
    return port


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the server from the command line."""
    argv = sys.argv[1:] if argv is None else argv
    try:
        port = parse_args(argv)
    except ValueError as exc:
        print(exc)
        return -1
    if port is None:
        port = SERVER_PORT
    else:
        print(f"Utilizzo porta: {port}")
    try:
        server = WeatherServer(port=port, rng=random.Random())
    except OSError as exc:
        print(exc)
        return -1
    with server:
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
    return 0