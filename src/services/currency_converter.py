from __future__ import annotations

import logging
import math

from domain.currency import ReferenceCurrency

from .coingecko_source import SpotPriceSource
from .errors import InvalidPrice, UnimplementedCurrency

logger = logging.getLogger(__name__)


class CurrencyConverter:
    """Turn a USD-denominated price into the requested reference currency.

    USD yields the reciprocal (asset units per dollar). ETH and BTC divide the
    asset's USD price by the reference coin's USD price, which costs exactly
    one extra spot lookup per call. EUR has no conversion path.
    """

    def __init__(self, spot_source: SpotPriceSource) -> None:
        self.spot_source = spot_source

    def ensure_supported(self, target: ReferenceCurrency) -> None:
        if target is ReferenceCurrency.EUR:
            raise UnimplementedCurrency(target)

    def convert(self, asset_price_usd: float, target: ReferenceCurrency) -> float:
        self.ensure_supported(target)
        _check_price(asset_price_usd, label="asset price")

        if target.is_native:
            return 1.0 / asset_price_usd

        reference_id = target.reference_asset_id
        if reference_id is None:
            raise UnimplementedCurrency(target)

        reference_price = self.spot_source.fetch_price(reference_id, ReferenceCurrency.USD)
        _check_price(reference_price, label=f"{reference_id} price")
        logger.debug(
            "Converting %s USD into %s via %s at %s USD", asset_price_usd, target, reference_id, reference_price
        )
        return asset_price_usd / reference_price


def _check_price(value: float, *, label: str) -> None:
    if not math.isfinite(value) or value <= 0:
        raise InvalidPrice(f"{label} must be a positive finite number, got {value!r}")


__all__ = ["CurrencyConverter"]
