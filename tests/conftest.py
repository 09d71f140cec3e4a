from pathlib import Path

import pytest

from domain.prices import Pair
from services.token_registry import TokenRegistry
from tests.helpers.price_stubs import StubPairSource, StubSpotSource

TOKEN_LIST_CSV = """Id,Symbol,Name
bitcoin,btc,Bitcoin
ethereum,eth,Ethereum
aave,aave,Aave
usd-coin,usdc,USDC
"""

ETH_PRICE_USD = 3000.0
BTC_PRICE_USD = 60000.0
AAVE_PRICE_USD = 150.0


@pytest.fixture(scope="function")
def token_list_path(tmp_path: Path) -> Path:
    path = tmp_path / "coingecko_token_list.csv"
    path.write_text(TOKEN_LIST_CSV, encoding="utf-8")
    return path


@pytest.fixture(scope="function")
def registry(token_list_path: Path) -> TokenRegistry:
    return TokenRegistry.load(token_list_path)


@pytest.fixture(scope="function")
def spot_source() -> StubSpotSource:
    return StubSpotSource(
        prices_usd={
            "ethereum": ETH_PRICE_USD,
            "bitcoin": BTC_PRICE_USD,
            "aave": AAVE_PRICE_USD,
        },
        token_prices_usd={"ethereum:0x7fc66500c84a76ad7e9c93437bfc5ac33e2ddae9": AAVE_PRICE_USD},
    )


@pytest.fixture(scope="function")
def pair_source() -> StubPairSource:
    return StubPairSource(
        Pair(
            pair_id="0xb4e16d0168e52d35cacd2c6185b44281ec28c9dc",
            token0_id="0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48",
            token1_id="0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2",
            token0_price="0.5",
            token1_price="2.0",
        )
    )
