# meteoudp

A tiny weather service spoken over UDP. The server answers questions about
temperature, humidity, wind speed and atmospheric pressure for a fixed set of
Italian cities (bari, roma, milano, napoli, torino, palermo, genova, bologna,
firenze, venezia). The values are randomly generated, so this is meant for
learning and experimenting with datagram protocols, not for forecasting.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running the server

```
meteoudp-server
meteoudp-server -p 60000
```

The server binds to all IPv4 addresses on port 56700 unless `-p` is given.
Ports must be between 1024 and 65535; any other value prints an error and the
command exits with status -1. Every request it handles is logged to standard
output with the client's host name (or its address, when the reverse lookup
fails), the requested type and the city. The server runs until interrupted
with Ctrl-C.

Readings are drawn uniformly in steps of 0.1:

| Letter | Meaning              | Range              |
|--------|----------------------|--------------------|
| `t`    | temperature          | -10.0 to 40.0 °C   |
| `h`    | humidity             | 20.0 to 100.0 %    |
| `w`    | wind speed           | 0.0 to 100.0 km/h  |
| `p`    | atmospheric pressure | 950.0 to 1050.0 hPa|

An unknown type letter is answered with status "invalid request"; an unknown
city (compared case-insensitively) with "city not found".

## Querying the server

```
meteoudp-client -r "t bari"
meteoudp-client -s localhost -p 60000 -r "w milano"
```

Options:

- `-s server`: server host name or dotted IPv4 address (default `127.0.0.1`,
  shown as `localhost`). An address that does not resolve is reverse-looked-up
  for display; a value that is neither a host name nor an IPv4 address is an
  error.
- `-p port`: server port (default `56700`)
- `-r request`: required. A one-letter type (`t`, `h`, `w` or `p`) followed by
  a single space and the city name

The request must not contain tab characters, and the city name may be at most
63 bytes once encoded as UTF-8. The city is sent in lower case. The client
waits up to five seconds for an answer and prints a line such as:

```
Ricevuto risultato dal server localhost (ip 127.0.0.1). Bari: Temperatura = 21.3°C
```

On any error the client prints a message and exits with status -1.

## Wire format

A request is 65 bytes: one byte for the type letter followed by the city name
in a 64-byte, NUL-padded field.

A response is 9 bytes, all in network byte order: a 32-bit unsigned status
(`0` success, `1` city not found, `2` invalid request), one byte echoing the
type (a NUL byte for an invalid request), and a 32-bit IEEE 754 float carrying
the value.

## Using it from Python

```python
from meteoudp.client import parse_request, query, format_result

request = parse_request("t bari")
response = query(request, "127.0.0.1", 56700, 5.0)
print(format_result("localhost", "127.0.0.1", response, request.city), end="")
```

`meteoudp.protocol` provides `WeatherRequest` and `WeatherResponse` with
`encode()` and `decode()` for the byte format, the `Status` and `WeatherType`
enumerations, and `ProtocolError` for messages that cannot be encoded or
decoded. `meteoudp.client` raises `RequestError` for a malformed request
string or an unusable host, and `OSError` when sending or receiving fails.

`meteoudp.server` exposes the answering logic on its own
(`build_response`, `handle_datagram`, `get_weather_value`, `is_valid_type`,
`is_valid_city`), each taking an optional `random.Random` for reproducible
values. `WeatherServer` binds a socket on construction, can be used as a
context manager, and can be driven one datagram at a time with `serve_once()`
or continuously with `serve_forever()`.

## What it does not do

There is no real weather data: every reading is random. Only IPv4 is
supported, each query is a single datagram with no retries, and the server
keeps no history of past requests.