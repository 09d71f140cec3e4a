"""Uniswap subgraph client for fetching pair/pool prices via The Graph.

V2 subgraphs expose ``pair(id: ...)`` and V3 subgraphs ``pool(id: ...)``. Both
return the same fields, so the response is read under the root field that
matches the version the query was built for and mapped into ``Pair``.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import requests
from requests import Response

from config import config
from domain.currency import AmmVersion
from domain.prices import Pair

from .errors import SourceError

logger = logging.getLogger(__name__)

SOURCE_NAME = "uniswap-subgraph"

PAIR_QUERY_TEMPLATE = """query GetPair($id: ID!) {{
  {root}(id: $id) {{
    id
    token0 {{
      id
    }}
    token1 {{
      id
    }}
    token0Price
    token1Price
  }}
}}"""


class PairPriceSource(Protocol):
    def fetch_pair(self, pair_address: str, amm_version: AmmVersion) -> Pair: ...


def build_pair_query(amm_version: AmmVersion) -> str:
    return PAIR_QUERY_TEMPLATE.format(root=amm_version.root_field)


class _SubgraphClient:
    def __init__(
        self,
        endpoints: dict[AmmVersion, str] | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        settings = config()
        self.endpoints = endpoints or {
            AmmVersion.V2: settings.uniswap_v2_subgraph_url,
            AmmVersion.V3: settings.uniswap_v3_subgraph_url,
        }
        self.timeout = settings.request_timeout_seconds if timeout is None else timeout
        self._session = session or requests.Session()

    def query(
        self, amm_version: AmmVersion, query: str, *, variables: dict[str, Any], identifier: str
    ) -> dict[str, Any]:
        url = self.endpoints[amm_version]
        logger.debug("Subgraph POST %s (%s) for %s", url, amm_version, identifier)
        try:
            response = self._session.post(
                url,
                json={"query": query, "variables": variables},
                timeout=self.timeout,
                headers={"Accept": "application/json", "Content-Type": "application/json"},
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            resp = exc.response
            status_code = getattr(resp, "status_code", None)
            raise SourceError(
                "Subgraph request failed",
                source=SOURCE_NAME,
                identifier=identifier,
                status_code=status_code,
                payload=self._extract_payload(resp),
            ) from exc
        except requests.RequestException as exc:
            status_code = getattr(getattr(exc, "response", None), "status_code", None)
            raise SourceError(
                "Subgraph request failed", source=SOURCE_NAME, identifier=identifier, status_code=status_code
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise SourceError(
                "Subgraph returned invalid JSON", source=SOURCE_NAME, identifier=identifier, payload=response.text
            ) from exc

        if not isinstance(payload, dict):
            raise SourceError(
                "Subgraph returned unexpected payload type", source=SOURCE_NAME, identifier=identifier, payload=payload
            )

        errors = payload.get("errors")
        if errors:
            message = "Subgraph query failed"
            if isinstance(errors, list) and errors and isinstance(errors[0], dict) and errors[0].get("message"):
                message = str(errors[0]["message"])
            raise SourceError(message, source=SOURCE_NAME, identifier=identifier, payload=payload)

        return payload

    @staticmethod
    def _extract_payload(response: Response | None) -> Any | None:
        if response is None:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text


class UniswapPairSource(PairPriceSource):
    def __init__(self, *, client: _SubgraphClient | None = None) -> None:
        self.client = client or _SubgraphClient()

    def fetch_pair(self, pair_address: str, amm_version: AmmVersion) -> Pair:
        if not pair_address:
            raise ValueError("pair_address must be provided")

        query = build_pair_query(amm_version)
        # subgraph entity ids are lower-case hex
        variables = {"id": pair_address.lower()}
        payload = self.client.query(amm_version, query, variables=variables, identifier=pair_address)

        data = payload.get("data")
        if not isinstance(data, dict):
            raise SourceError(
                "Subgraph response has no data", source=SOURCE_NAME, identifier=pair_address, payload=payload
            )

        root = amm_version.root_field
        entry = data.get(root)
        if entry is None:
            raise SourceError(
                f"no {root} with this id on Uniswap {amm_version}",
                source=SOURCE_NAME,
                identifier=pair_address,
                payload=payload,
            )
        if not isinstance(entry, dict):
            raise SourceError(
                f"unexpected {root} payload", source=SOURCE_NAME, identifier=pair_address, payload=payload
            )

        return _parse_pair(entry, identifier=pair_address)


def _parse_pair(entry: dict[str, Any], *, identifier: str) -> Pair:
    try:
        return Pair(
            pair_id=_require_str(entry, "id"),
            token0_id=_require_str(entry["token0"], "id"),
            token1_id=_require_str(entry["token1"], "id"),
            token0_price=_require_str(entry, "token0Price"),
            token1_price=_require_str(entry, "token1Price"),
        )
    except (KeyError, TypeError) as exc:
        raise SourceError(
            f"pair payload missing field {exc}", source=SOURCE_NAME, identifier=identifier, payload=entry
        ) from exc


def _require_str(container: dict[str, Any], key: str) -> str:
    value = container[key]
    if not isinstance(value, str):
        raise TypeError(key)
    return value


__all__ = ["PairPriceSource", "UniswapPairSource", "build_pair_query"]
