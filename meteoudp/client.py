"""UDP weather client: builds a request, sends it and prints the answer."""

from __future__ import annotations

import re
import socket
import sys
from typing import Optional, Sequence, Tuple

from .protocol import (
    CITY_SIZE,
    RESPONSE_SIZE,
    SERVER_PORT,
    ProtocolError,
    Status,
    WeatherRequest,
    WeatherResponse,
    WeatherType,
)

DEFAULT_SERVER_IP = "127.0.0.1"
DEFAULT_SERVER_NAME = "localhost"
DEFAULT_TIMEOUT = 5.0

_VALID_TYPES = frozenset(t.value for t in WeatherType)

_RESULT_FORMATS = {
    WeatherType.TEMPERATURE.value: "{city}: Temperatura = {value:.1f}°C\n",
    WeatherType.HUMIDITY.value: "{city}: Umidita' = {value:.1f}%\n",
    WeatherType.WIND.value: "{city}: Vento = {value:.1f} km/h\n",
    WeatherType.PRESSURE.value: "{city}: Pressione = {value:.1f} hPa\n",
}


class RequestError(ValueError):
    """Raised for a malformed request string or an unusable server address."""


def parse_request(text: str) -> WeatherRequest:
    """Turn a ``"type city"`` string into a request with a lower-case city."""
    if "\t" in text:
        raise RequestError(
            "Errore: la richiesta non puo' contenere caratteri di tabulazione"
        )
    kind, space, city = text.partition(" ")
    if not space or not kind:
        raise RequestError("Errore: formato richiesta non valido")
    if len(kind) != 1:
        raise RequestError("Errore: il tipo deve essere un singolo carattere")
    if kind not in _VALID_TYPES:
        raise RequestError("Richiesta non valida")
    if len(city.encode("utf-8")) >= CITY_SIZE:
        raise RequestError(
            "Errore: nome citta' troppo lungo (massimo 63 caratteri)"
        )
    return WeatherRequest(kind, city.lower())


def format_result(server_name: str, server_ip: str,
                  response: WeatherResponse, city: str) -> str:
    """Render the server's answer the way the client reports it."""
    text = f"Ricevuto risultato dal server {server_name} (ip {server_ip}). "
    if response.status == Status.SUCCESS:
        template = _RESULT_FORMATS.get(response.kind)
        if template is not None:
            shown = city[:1].upper() + city[1:]
            text += template.format(city=shown, value=response.value)
    elif response.status == Status.CITY_NOT_FOUND:
        text += "Citta' non disponibile\n"
    elif response.status == Status.INVALID_REQUEST:
        text += "Richiesta non valida\n"
    return text


def resolve_server(host: str) -> Tuple[str, str]:
    """Return ``(name, ip)`` for a host name or dotted IPv4 address."""
    try:
        return host, socket.gethostbyname(host)
    except (OSError, UnicodeError):
        pass
    try:
        socket.inet_pton(socket.AF_INET, host)
    except OSError:
        raise RequestError(f"Errore: host non valido '{host}'") from None
    try:
        name = socket.gethostbyaddr(host)[0]
    except OSError:
        name = host
    return name, host


def query(request: WeatherRequest, host: str = DEFAULT_SERVER_IP,
          port: int = SERVER_PORT,
          timeout: Optional[float] = DEFAULT_TIMEOUT) -> WeatherResponse:
    """Send one request over UDP and wait for the server's response."""
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
    except OSError as exc:
        raise OSError("Creazione del socket fallita.") from exc
    with sock:
        sock.settimeout(timeout)
        try:
            sock.sendto(request.encode(), (host, port))
        except (OSError, OverflowError) as exc:
            raise OSError("Invio richiesta fallito.") from exc
        try:
            data, _ = sock.recvfrom(RESPONSE_SIZE)
            return WeatherResponse.decode(data)
        except (OSError, ProtocolError) as exc:
            raise OSError("Ricezione risposta fallita.") from exc


def usage() -> str:
    """The command-line help text."""
    return (
        'Usage: client-project [-s server] [-p port] -r "type city"\n'
        "  -s server : Server IP (default: 127.0.0.1)\n"
        "  -p port   : Server port (default: 56700)\n"
        '  -r request: Weather request "t|h|w|p city" (REQUIRED)\n'
        "\n"
        'Example: client-project -r "t bari"\n'
    )


def _atoi(text: str) -> int:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


def parse_args(argv: Sequence[str]) -> Tuple[str, str, int, Optional[str]]:
    """Return ``(server_name, server_ip, port, request_text)`` from the arguments.

    ``request_text`` is None when ``-r`` was not given; an unusable ``-s``
    host raises RequestError.
    """
    server_name, server_ip = DEFAULT_SERVER_NAME, DEFAULT_SERVER_IP
    port = SERVER_PORT
    request_text: Optional[str] = None
    args = iter(argv)
    for arg in args:
        if arg not in ("-s", "-p", "-r"):
            continue
        value = next(args, None)
        if value is None:
            break
        if arg == "-s":
            server_name, server_ip = resolve_server(value)
        elif arg == "-p":
            port = _atoi(value)
        else:
            request_text = value
    return server_name, server_ip, port, request_text


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the client from the command line."""
    argv = sys.argv[1:] if argv is None else argv
    try:
        server_name, server_ip, port, request_text = parse_args(argv)
    except RequestError as exc:
        print(exc)
        return -1
    if request_text is None:
        print("Errore: argomento -r obbligatorio")
        print(usage(), end="")
        return -1
    try:
        request = parse_request(request_text)
    except RequestError as exc:
        print(exc)
        return -1
    try:
        response = query(request, server_ip, port, DEFAULT_TIMEOUT)
    except OSError as exc:
        print(exc)
        return -1
    print(format_result(server_name, server_ip, response, request.city), end="")
    return 0