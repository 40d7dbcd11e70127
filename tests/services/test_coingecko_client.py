from __future__ import annotations

import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Generator
from unittest.mock import Mock

import pytest
import requests

from services.coingecko_client import CoinGeckoAPIError, CoinGeckoClient
from services.price_types import PriceFetchError


def _mock_response(payload: object, status_code: int = 200) -> Mock:
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    response.text = "payload"
    response.raise_for_status.return_value = None
    return response


def test_get_simple_price_parses_response() -> None:
    session = Mock()
    session.request.return_value = _mock_response({"bitcoin": {"usd": 65000.5}})

    client = CoinGeckoClient(session=session)
    price = client.get_simple_price("bitcoin")

    assert price == 65000.5
    session.request.assert_called_once()
    args, kwargs = session.request.call_args
    assert args == ("GET", "https://api.coingecko.com/api/v3/simple/price")
    assert kwargs["params"] == {"ids": "bitcoin", "vs_currencies": "usd"}
    assert kwargs["timeout"] == 10.0
    assert "x-cg-demo-api-key" not in kwargs["headers"]


def test_get_simple_price_sends_api_key_and_lowercases_currency() -> None:
    session = Mock()
    session.request.return_value = _mock_response({"ethereum": {"eur": 3000}})

    client = CoinGeckoClient(base_url="https://example.com/api/", api_key="demo", session=session, timeout=2.5)
    price = client.get_simple_price("ethereum", "EUR")

    assert price == 3000.0
    args, kwargs = session.request.call_args
    assert args[1] == "https://example.com/api/simple/price"
    assert kwargs["params"]["vs_currencies"] == "eur"
    assert kwargs["headers"]["x-cg-demo-api-key"] == "demo"
    assert kwargs["timeout"] == 2.5


@pytest.mark.parametrize("payload", [{}, {"bitcoin": {}}, {"bitcoin": {"eur": 1.0}}, {"bitcoin": None}])
def test_get_simple_price_returns_zero_when_price_missing(payload: dict) -> None:
    session = Mock()
    session.request.return_value = _mock_response(payload)

    client = CoinGeckoClient(session=session)

    assert client.get_simple_price("bitcoin") == 0.0


def test_request_wraps_http_errors() -> None:
    session = Mock()
    response = _mock_response({"status": {"error_code": 500, "error_message": "Internal error"}}, status_code=500)
    response.raise_for_status.side_effect = requests.HTTPError(response=response)
    session.request.return_value = response

    client = CoinGeckoClient(session=session)

    with pytest.raises(CoinGeckoAPIError) as excinfo:
        client.get_simple_price("bitcoin")

    assert excinfo.value.status_code == 500
    assert str(excinfo.value) == "Internal error"
    assert isinstance(excinfo.value, PriceFetchError)


def test_request_wraps_timeouts() -> None:
    session = Mock()
    session.request.side_effect = requests.Timeout("read timed out")

    client = CoinGeckoClient(session=session)

    with pytest.raises(CoinGeckoAPIError, match="timed out"):
        client.get_simple_price("bitcoin")


def test_request_wraps_connection_errors() -> None:
    session = Mock()
    session.request.side_effect = requests.ConnectionError("boom")

    client = CoinGeckoClient(session=session)

    with pytest.raises(CoinGeckoAPIError):
        client.get_simple_price("bitcoin")


def test_request_rejects_invalid_json() -> None:
    session = Mock()
    response = _mock_response({})
    response.json.side_effect = ValueError("no json")
    session.request.return_value = response

    client = CoinGeckoClient(session=session)

    with pytest.raises(CoinGeckoAPIError) as excinfo:
        client.get_simple_price("bitcoin")

    assert excinfo.value.payload == "payload"


def test_request_rejects_non_object_payload() -> None:
    session = Mock()
    session.request.return_value = _mock_response([1, 2, 3])

    client = CoinGeckoClient(session=session)

    with pytest.raises(CoinGeckoAPIError):
        client.get_simple_price("bitcoin")


def test_non_numeric_price_is_an_error() -> None:
    session = Mock()
    session.request.return_value = _mock_response({"bitcoin": {"usd": "n/a"}})

    client = CoinGeckoClient(session=session)

    with pytest.raises(CoinGeckoAPIError):
        client.get_simple_price("bitcoin")


def test_client_validates_arguments() -> None:
    with pytest.raises(ValueError):
        CoinGeckoClient(session=Mock(), timeout=0)

    client = CoinGeckoClient(session=Mock())
    with pytest.raises(ValueError):
        client.get_simple_price("")


def test_retry_policy_only_retries_rate_limits() -> None:
    client = CoinGeckoClient(session=requests.Session(), retry_attempts=3)

    retry = client._session.get_adapter("https://api.coingecko.com").max_retries

    assert retry.status == 3
    assert retry.connect == 0
    assert retry.read == 0
    assert retry.other == 0
    assert 429 in retry.status_forcelist


class _StalledServer:
    def __init__(self, delay: float) -> None:
        self.hits = 0
        stalled = self

        class _Handler(BaseHTTPRequestHandler):
            def do_GET(self) -> None:
                stalled.hits += 1
                time.sleep(delay)
                body = b'{"bitcoin": {"usd": 1}}'
                try:
                    self.send_response(200)
                    self.send_header("Content-Type", "application/json")
                    self.send_header("Content-Length", str(len(body)))
                    self.end_headers()
                    self.wfile.write(body)
                except OSError:
                    pass

            def log_message(self, format: str, *args: object) -> None:
                return None

        self.server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
        self.server.daemon_threads = True
        self.url = f"http://127.0.0.1:{self.server.server_address[1]}"


@pytest.fixture(scope="function")
def stalled_server() -> Generator[_StalledServer, None, None]:
    stalled = _StalledServer(delay=1.0)
    thread = threading.Thread(target=stalled.server.serve_forever, daemon=True)
    thread.start()
    yield stalled
    stalled.server.shutdown()
    stalled.server.server_close()


def test_read_timeout_fails_after_a_single_request(stalled_server: _StalledServer) -> None:
    session = requests.Session()
    session.trust_env = False
    client = CoinGeckoClient(base_url=stalled_server.url, timeout=0.2, retry_attempts=3, session=session)

    started = time.monotonic()
    with pytest.raises(CoinGeckoAPIError):
        client.get_simple_price("bitcoin")
    elapsed = time.monotonic() - started

    assert stalled_server.hits == 1
    assert elapsed < 1.0
