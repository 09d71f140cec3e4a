from decimal import Decimal

from utils.formatting import format_decimal, format_price


def test_format_price_drops_trailing_zero_of_integers() -> None:
    assert format_price(3000.0) == "3000"
    assert format_price(2.0) == "2"


def test_format_price_keeps_shortest_digits() -> None:
    rendered = format_price(1 / 3000)
    assert rendered.startswith("0.000333")
    assert float(rendered) == 1 / 3000
    assert format_price(0.5) == "0.5"


def test_format_price_never_uses_exponent() -> None:
    assert format_price(1e-20) == "0.00000000000000000001"
    assert format_price(1e20) == "100000000000000000000"


def test_format_decimal_normalizes() -> None:
    assert format_decimal(Decimal("1.2300")) == "1.23"
    assert format_decimal(Decimal("10.000")) == "10"
