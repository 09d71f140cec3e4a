from __future__ import annotations

import logging
import math
from typing import Any, Protocol

import requests
from requests import Response

from config import config
from domain.currency import ReferenceCurrency

from .errors import SourceError

logger = logging.getLogger(__name__)

SOURCE_NAME = "coingecko"


class SpotPriceSource(Protocol):
    def fetch_price(self, external_id: str, currency: ReferenceCurrency) -> float: ...

    def fetch_token_price(self, platform: str, contract_address: str, currency: ReferenceCurrency) -> float: ...


class _CoinGeckoClient:
    # API docs: https://docs.coingecko.com/reference/simple-price
    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        settings = config()
        self.base_url = (base_url or settings.coingecko_base_url).rstrip("/")
        self.api_key = settings.coingecko_api_key if api_key is None else api_key
        self.timeout = settings.request_timeout_seconds if timeout is None else timeout
        self._session = session or requests.Session()

    def get_simple_price(self, *, ids: str, vs_currencies: str) -> dict[str, Any]:
        params = {"ids": ids, "vs_currencies": vs_currencies}
        return self._request("GET", "/simple/price", params=params, identifier=ids)

    def get_token_price(self, *, platform: str, contract_addresses: str, vs_currencies: str) -> dict[str, Any]:
        params = {"contract_addresses": contract_addresses, "vs_currencies": vs_currencies}
        return self._request(
            "GET",
            f"/simple/token_price/{platform}",
            params=params,
            identifier=f"{platform}:{contract_addresses}",
        )

    def _request(self, method: str, path: str, *, params: dict[str, Any], identifier: str) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["x-cg-demo-api-key"] = self.api_key

        logger.debug("CoinGecko %s %s params=%s", method, url, params)
        try:
            response = self._session.request(method, url, params=params, timeout=self.timeout, headers=headers)
            response.raise_for_status()
        except requests.HTTPError as exc:
            resp = exc.response
            status_code = getattr(resp, "status_code", None)
            message, payload = self._extract_error(resp)
            raise SourceError(
                message, source=SOURCE_NAME, identifier=identifier, status_code=status_code, payload=payload
            ) from exc
        except requests.RequestException as exc:
            status_code = getattr(getattr(exc, "response", None), "status_code", None)
            raise SourceError(
                "CoinGecko request failed", source=SOURCE_NAME, identifier=identifier, status_code=status_code
            ) from exc

        try:
            payload_raw = response.json()
        except ValueError as exc:
            raise SourceError(
                "CoinGecko returned invalid JSON", source=SOURCE_NAME, identifier=identifier, payload=response.text
            ) from exc

        if not isinstance(payload_raw, dict):
            raise SourceError(
                "CoinGecko returned unexpected payload type",
                source=SOURCE_NAME,
                identifier=identifier,
                payload=payload_raw,
            )

        return payload_raw

    @staticmethod
    def _extract_error(response: Response | None) -> tuple[str, Any | None]:
        message = "CoinGecko request failed"
        payload: Any | None = None
        if response is None:
            return message, payload

        try:
            payload = response.json()
            if isinstance(payload, dict):
                status = payload.get("status")
                if isinstance(status, dict) and status.get("error_message"):
                    message = status["error_message"]
                elif payload.get("error"):
                    message = str(payload["error"])
        except ValueError:
            payload = response.text
        return message, payload


class CoinGeckoSpotSource(SpotPriceSource):
    def __init__(self, *, client: _CoinGeckoClient | None = None) -> None:
        self.client = client or _CoinGeckoClient()

    def fetch_price(self, external_id: str, currency: ReferenceCurrency) -> float:
        if not external_id:
            raise ValueError("external_id must be provided")

        payload = self.client.get_simple_price(ids=external_id, vs_currencies=currency.code)
        return _select_price(payload, key=external_id, currency=currency, identifier=external_id)

    def fetch_token_price(self, platform: str, contract_address: str, currency: ReferenceCurrency) -> float:
        if not platform:
            raise ValueError("platform must be provided")
        if not contract_address:
            raise ValueError("contract_address must be provided")

        payload = self.client.get_token_price(
            platform=platform,
            contract_addresses=contract_address,
            vs_currencies=currency.code,
        )
        # CoinGecko echoes contract addresses lower-cased
        by_lower_key = {str(key).lower(): value for key, value in payload.items()}
        return _select_price(
            by_lower_key,
            key=contract_address.lower(),
            currency=currency,
            identifier=f"{platform}:{contract_address}",
        )


def _select_price(payload: dict[str, Any], *, key: str, currency: ReferenceCurrency, identifier: str) -> float:
    entry = payload.get(key)
    if not isinstance(entry, dict):
        raise SourceError(
            "asset missing from CoinGecko response", source=SOURCE_NAME, identifier=identifier, payload=payload
        )

    raw = entry.get(currency.code)
    if raw is None:
        raise SourceError(
            f"asset is not priced in {currency.code}", source=SOURCE_NAME, identifier=identifier, payload=payload
        )
    if isinstance(raw, bool) or not isinstance(raw, (int, float)) or not math.isfinite(raw):
        raise SourceError(
            f"non-numeric {currency.code} price {raw!r}", source=SOURCE_NAME, identifier=identifier, payload=payload
        )
    return float(raw)


__all__ = ["CoinGeckoSpotSource", "SpotPriceSource"]
