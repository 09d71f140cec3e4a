from __future__ import annotations

from decimal import Decimal


def format_decimal(value: Decimal) -> str:
    quantized = value.normalize()
    # Avoid scientific notation for integers.
    if quantized == quantized.to_integral():
        return f"{quantized:.0f}"
    return format(quantized, "f")


def format_price(value: float) -> str:
    """Render a float with its shortest round-tripping digits, never in exponent form."""
    return format_decimal(Decimal(repr(value)))
