from __future__ import annotations

import logging
import math

from domain.currency import AmmVersion, ReferenceCurrency
from domain.prices import Pair, PairPriceResult, PriceResult
from utils.formatting import format_price

from .coingecko_source import CoinGeckoSpotSource, SpotPriceSource
from .currency_converter import CurrencyConverter
from .errors import NumericParseError
from .token_registry import TokenRegistry, default_registry
from .uniswap_source import PairPriceSource, UniswapPairSource

logger = logging.getLogger(__name__)


class PriceResolver:
    def __init__(
        self,
        *,
        registry: TokenRegistry,
        spot_source: SpotPriceSource,
        pair_source: PairPriceSource,
        converter: CurrencyConverter | None = None,
    ) -> None:
        self.registry = registry
        self.spot_source = spot_source
        self.pair_source = pair_source
        self.converter = converter or CurrencyConverter(spot_source)

    def resolve_single_price(self, asset_name: str, currency: ReferenceCurrency) -> PriceResult:
        self.converter.ensure_supported(currency)
        external_id = self.registry.resolve(asset_name)
        logger.info("Resolving %s (%s) in %s", asset_name, external_id, currency)

        price_usd = self.spot_source.fetch_price(external_id, ReferenceCurrency.USD)
        return self._price_result(price_usd, currency)

    def resolve_token_price(self, platform: str, contract_address: str, currency: ReferenceCurrency) -> PriceResult:
        self.converter.ensure_supported(currency)
        logger.info("Resolving token %s on %s in %s", contract_address, platform, currency)

        price_usd = self.spot_source.fetch_token_price(platform, contract_address, ReferenceCurrency.USD)
        return self._price_result(price_usd, currency)

    def resolve_pair_price(
        self,
        pair_address: str,
        amm_version: AmmVersion,
        currency: ReferenceCurrency,
    ) -> PairPriceResult:
        self.converter.ensure_supported(currency)
        pair = self.pair_source.fetch_pair(pair_address, amm_version)
        logger.info("Resolving Uniswap %s pair %s in %s", amm_version, pair.pair_id, currency)

        token0_price = _parse_price(pair, "token0_price")
        token1_price = _parse_price(pair, "token1_price")
        # Float conversion loses precision beyond ~15 significant digits; the
        # decimal strings from the subgraph are passed through untouched.
        token0_per_unit = self.converter.convert(token0_price, currency)
        token1_per_unit = self.converter.convert(token1_price, currency)

        return PairPriceResult(
            pair_id=pair.pair_id,
            token0_id=pair.token0_id,
            token0_price=pair.token0_price,
            token0_per_currency_unit=format_price(token0_per_unit),
            token1_id=pair.token1_id,
            token1_price=pair.token1_price,
            token1_per_currency_unit=format_price(token1_per_unit),
        )

    def _price_result(self, price_usd: float, currency: ReferenceCurrency) -> PriceResult:
        if currency.is_native:
            currency_price = price_usd
            coin_per_unit = self.converter.convert(price_usd, currency)
        else:
            currency_price = self.converter.convert(price_usd, currency)
            coin_per_unit = 1.0 / currency_price

        return PriceResult(
            currency_price=format_price(currency_price),
            coin_per_currency_unit=format_price(coin_per_unit),
        )


def _parse_price(pair: Pair, field: str) -> float:
    raw: str = getattr(pair, field)
    try:
        value = float(raw)
    except ValueError as exc:
        msg = f"Pair {pair.pair_id} has non-numeric {field} {raw!r}"
        raise NumericParseError(msg, value=raw) from exc
    if not math.isfinite(value):
        msg = f"Pair {pair.pair_id} has non-finite {field} {raw!r}"
        raise NumericParseError(msg, value=raw)
    return value


def build_default_resolver(registry: TokenRegistry | None = None) -> PriceResolver:
    return PriceResolver(
        registry=registry if registry is not None else default_registry(),
        spot_source=CoinGeckoSpotSource(),
        pair_source=UniswapPairSource(),
    )


__all__ = ["PriceResolver", "build_default_resolver"]
