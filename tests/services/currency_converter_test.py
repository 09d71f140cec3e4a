from __future__ import annotations

import pytest

from domain.currency import ReferenceCurrency
from services.currency_converter import CurrencyConverter
from services.errors import InvalidPrice, UnimplementedCurrency
from tests.helpers.price_stubs import StubSpotSource


def _converter(spot_source: StubSpotSource) -> CurrencyConverter:
    return CurrencyConverter(spot_source)


def test_usd_is_reciprocal_without_lookup(spot_source: StubSpotSource) -> None:
    converter = _converter(spot_source)

    assert converter.convert(0.5, ReferenceCurrency.USD) == pytest.approx(2.0)
    assert converter.convert(3000.0, ReferenceCurrency.USD) == pytest.approx(1 / 3000)
    assert spot_source.calls == []


def test_eth_divides_by_ether_usd_price(spot_source: StubSpotSource) -> None:
    converter = _converter(spot_source)

    assert converter.convert(150.0, ReferenceCurrency.ETH) == pytest.approx(150.0 / 3000.0)
    assert spot_source.calls == [("ethereum", ReferenceCurrency.USD)]


def test_btc_divides_by_bitcoin_usd_price(spot_source: StubSpotSource) -> None:
    converter = _converter(spot_source)

    assert converter.convert(3000.0, ReferenceCurrency.BTC) == pytest.approx(0.05)
    assert spot_source.calls == [("bitcoin", ReferenceCurrency.USD)]


def test_reference_price_is_fetched_on_every_call(spot_source: StubSpotSource) -> None:
    converter = _converter(spot_source)

    converter.convert(1.0, ReferenceCurrency.ETH)
    converter.convert(2.0, ReferenceCurrency.ETH)

    assert len(spot_source.calls) == 2


def test_eur_is_unimplemented(spot_source: StubSpotSource) -> None:
    converter = _converter(spot_source)

    with pytest.raises(UnimplementedCurrency):
        converter.convert(1.0, ReferenceCurrency.EUR)
    with pytest.raises(UnimplementedCurrency):
        converter.ensure_supported(ReferenceCurrency.EUR)
    assert spot_source.calls == []


@pytest.mark.parametrize("price", [0.0, -1.0, float("inf"), float("nan")])
def test_rejects_unusable_prices(spot_source: StubSpotSource, price: float) -> None:
    with pytest.raises(InvalidPrice):
        _converter(spot_source).convert(price, ReferenceCurrency.USD)


def test_rejects_zero_reference_price() -> None:
    spot_source = StubSpotSource(prices_usd={"ethereum": 0.0})

    with pytest.raises(InvalidPrice):
        _converter(spot_source).convert(1.0, ReferenceCurrency.ETH)
