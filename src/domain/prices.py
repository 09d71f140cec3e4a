from __future__ import annotations

from dataclasses import dataclass

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class AssetRecord(BaseModel):
    """One row of the CoinGecko token list."""

    model_config = ConfigDict(frozen=True)

    external_id: str = Field(validation_alias=AliasChoices("id", "Id", "external_id"))
    symbol: str = Field(validation_alias=AliasChoices("symbol", "Symbol"))
    display_name: str = Field(validation_alias=AliasChoices("name", "Name", "display_name"))

    @field_validator("external_id", "symbol", "display_name", mode="before")
    @classmethod
    def _strip_required(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("must not be empty")
        return value


@dataclass(frozen=True)
class Pair:
    """AMM pair (V2) or pool (V3) normalized into one shape.

    token0_price/token1_price are the AMM's relative prices kept as the decimal
    strings the subgraph returns; they are only turned into floats when a
    currency amount is derived from them.
    """

    pair_id: str
    token0_id: str
    token1_id: str
    token0_price: str
    token1_price: str


@dataclass(frozen=True)
class PriceResult:
    currency_price: str
    coin_per_currency_unit: str


@dataclass(frozen=True)
class PairPriceResult:
    pair_id: str
    token0_id: str
    token0_price: str
    token0_per_currency_unit: str
    token1_id: str
    token1_price: str
    token1_per_currency_unit: str


__all__ = ["AssetRecord", "Pair", "PairPriceResult", "PriceResult"]
