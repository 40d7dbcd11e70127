from __future__ import annotations

import logging
from typing import Any

import requests
from requests import Response
from requests.adapters import HTTPAdapter
from urllib3.util import Retry

from .price_types import PriceFetchError

logger = logging.getLogger(__name__)


# API docs: https://docs.coingecko.com/reference/simple-price
class CoinGeckoAPIError(PriceFetchError):
    def __init__(self, message: str, *, status_code: int | None = None, payload: Any | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class CoinGeckoClient:
    """Minimal CoinGecko API client covering the simple price endpoint."""

    def __init__(
        self,
        *,
        base_url: str = "https://api.coingecko.com/api/v3",
        api_key: str | None = None,
        timeout: float = 10.0,
        session: requests.Session | None = None,
        retry_attempts: int = 3,
        retry_backoff_seconds: float = 0.5,
    ) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be > 0")

        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._session = session or requests.Session()

        # Only rate-limit responses are retried; a timeout or connection error fails the single GET.
        retry = Retry(
            total=retry_attempts,
            connect=0,
            read=0,
            other=0,
            status=retry_attempts,
            backoff_factor=retry_backoff_seconds,
            status_forcelist={429},
            allowed_methods={"GET"},
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)

    def get_simple_price(self, coin_id: str, vs_currency: str = "usd") -> float:
        """Return the current price of ``coin_id``.

        A successful response that lacks the price yields ``0.0``.
        """
        if not coin_id:
            raise ValueError("coin_id must be provided")
        if not vs_currency:
            raise ValueError("vs_currency must be provided")

        currency = vs_currency.lower()
        payload = self._request("GET", "/simple/price", params={"ids": coin_id, "vs_currencies": currency})
        entry = payload.get(coin_id)
        if not isinstance(entry, dict):
            logger.info("CoinGecko response has no entry for %s", coin_id)
            return 0.0

        price_raw = entry.get(currency)
        if price_raw is None:
            logger.info("CoinGecko response has no %s price for %s", currency, coin_id)
            return 0.0
        try:
            return float(price_raw)
        except (TypeError, ValueError) as exc:
            raise CoinGeckoAPIError("CoinGecko returned a non-numeric price", payload=payload) from exc

    def _request(self, method: str, path: str, *, params: dict[str, Any] | None = None) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["x-cg-demo-api-key"] = self.api_key
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                timeout=self.timeout,
                headers=headers,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            resp = exc.response
            message, payload_err = self._extract_error(resp)
            status_code = getattr(resp, "status_code", None)
            raise CoinGeckoAPIError(message, status_code=status_code, payload=payload_err) from exc
        except requests.Timeout as exc:
            raise CoinGeckoAPIError(f"CoinGecko API request timed out after {self.timeout}s") from exc
        except requests.RequestException as exc:
            status_code = getattr(getattr(exc, "response", None), "status_code", None)
            raise CoinGeckoAPIError("CoinGecko API request failed", status_code=status_code) from exc

        try:
            payload: dict[str, Any] = response.json()
        except ValueError as exc:
            raise CoinGeckoAPIError("CoinGecko API returned invalid JSON", payload=response.text) from exc

        if not isinstance(payload, dict):
            raise CoinGeckoAPIError("CoinGecko API returned unexpected payload type", payload=payload)

        return payload

    @staticmethod
    def _extract_error(response: Response | None) -> tuple[str, Any]:
        message = "CoinGecko API request failed"
        if response is None:
            return message, None
        try:
            payload = response.json()
            status = payload.get("status") if isinstance(payload, dict) else None
            if isinstance(status, dict) and status.get("error_message"):
                message = status["error_message"]
            elif isinstance(payload, dict) and payload.get("error"):
                message = str(payload["error"])
        except ValueError:
            payload = response.text
        return message, payload


__all__ = ["CoinGeckoAPIError", "CoinGeckoClient"]
