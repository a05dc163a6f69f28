import io
import random
import socket

import pytest

from meteoudp.protocol import (
    ProtocolError,
    Status,
    WeatherRequest,
    WeatherResponse,
)
from meteoudp import server
from meteoudp.server import (
    WeatherServer,
    build_response,
    get_humidity,
    get_pressure,
    get_temperature,
    get_weather_value,
    get_wind,
    handle_datagram,
    is_valid_city,
    is_valid_type,
    parse_args,
)


class _LowRng:
    def randrange(self, n):
        return 0


class _HighRng:
    def randrange(self, n):
        return n - 1


def test_minimum_readings():
    rng = _LowRng()
    assert get_temperature(rng) == -10.0
    assert get_humidity(rng) == 20.0
    assert get_wind(rng) == 0.0
    assert get_pressure(rng) == 950.0


@pytest.mark.parametrize(
    "func, low, high",
    [
        (get_temperature, -10.0, 40.0),
        (get_humidity, 20.0, 100.0),
        (get_wind, 0.0, 100.0),
        (get_pressure, 950.0, 1050.0),
    ],
)
def test_readings_stay_in_range(func, low, high):
    rng = random.Random(1234)
    values = [func(rng) for _ in range(500)]
    assert all(low - 1e-9 <= v <= high + 1e-9 for v in values)
    assert all(abs(v * 10 - round(v * 10)) < 1e-6 for v in values)


def test_maximum_readings():
    rng = _HighRng()
    assert get_temperature(rng) == pytest.approx(40.0)
    assert get_humidity(rng) == pytest.approx(100.0)
    assert get_wind(rng) == pytest.approx(100.0)
    assert get_pressure(rng) == pytest.approx(1050.0)


@pytest.mark.parametrize("kind", ["t", "h", "w", "p"])
def test_valid_types(kind):
    assert is_valid_type(kind) is True


@pytest.mark.parametrize("kind", ["x", "T", "\0", ""])
def test_invalid_types(kind):
    assert is_valid_type(kind) is False


def test_city_check_ignores_case():
    assert is_valid_city("BaRi") is True
    assert is_valid_city("venezia") is True


def test_unknown_city():
    assert is_valid_city("paris") is False
    assert is_valid_city("") is False


def test_weather_value_unknown_type():
    assert get_weather_value("z", _LowRng()) == 0.0


def test_weather_value_dispatch():
    assert get_weather_value("p", _LowRng()) == get_pressure(_LowRng())


def test_build_response_invalid_type():
    resp = build_response(WeatherRequest("x", "bari"))
    assert resp == WeatherResponse(Status.INVALID_REQUEST, "\0", 0.0)


def test_build_response_unknown_city():
    resp = build_response(WeatherRequest("t", "paris"))
    assert resp == WeatherResponse(Status.CITY_NOT_FOUND, "t", 0.0)


def test_build_response_success():
    resp = build_response(WeatherRequest("w", "Roma"), _LowRng())
    assert resp.status is Status.SUCCESS
    assert resp.kind == "w"
    assert resp.value == get_wind(_LowRng())


def test_handle_datagram_round_trip():
    data = handle_datagram(WeatherRequest("t", "napoli").encode(), random.Random(3))
    resp = WeatherResponse.decode(data)
    assert resp.status is Status.SUCCESS
    assert -10.0 <= resp.value <= 40.0


def test_handle_datagram_empty():
    with pytest.raises(ProtocolError):
        handle_datagram(b"")


def test_parse_args_port():
    assert parse_args(["-p", "2000"]) == 2000


def test_parse_args_default():
    assert parse_args([]) is None
    assert parse_args(["-p"]) is None


@pytest.mark.parametrize("value", ["80", "70000", "abc"])
def test_parse_args_rejects_bad_port(value):
    with pytest.raises(ValueError):
        parse_args(["-p", value])


def test_main_rejects_bad_port(capsys):
    assert server.main(["-p", "10"]) == -1
    assert "porta non valida" in capsys.readouterr().out


def test_server_answers_request():
    out = io.StringIO()
    with WeatherServer(port=0, host="127.0.0.1", rng=_LowRng(), out=out) as srv:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as client:
            client.settimeout(5)
            client.sendto(WeatherRequest("h", "torino").encode(), ("127.0.0.1", srv.port))
            assert srv.serve_once() is True
            data, _ = client.recvfrom(64)
    resp = WeatherResponse.decode(data)
    assert resp == WeatherResponse(Status.SUCCESS, "h", get_humidity(_LowRng()))
    log = out.getvalue()
    assert "city='torino'" in log
    assert "Risposta inviata." in log


def test_server_reports_unknown_city():
    with WeatherServer(port=0, host="127.0.0.1", out=io.StringIO()) as srv:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as client:
            client.settimeout(5)
            client.sendto(WeatherRequest("t", "oslo").encode(), ("127.0.0.1", srv.port))
            srv.serve_once()
            data, _ = client.recvfrom(64)
    assert WeatherResponse.decode(data).status is Status.CITY_NOT_FOUND


def test_server_bind_conflict():
    with WeatherServer(port=0, host="127.0.0.1", out=io.StringIO()) as srv:
        with pytest.raises(OSError, match="Binding fallito"):
            WeatherServer(port=srv.port, host="127.0.0.1", out=io.StringIO())