from __future__ import annotations

from enum import Enum


class ReferenceCurrency(str, Enum):
    """Units a resolved price can be expressed in.

    The enum value is the lower-case code CoinGecko uses both for the
    ``vs_currencies`` query parameter and as the field name in its response.
    """

    USD = "usd"
    EUR = "eur"
    ETH = "eth"
    BTC = "btc"

    @property
    def code(self) -> str:
        return self.value

    @property
    def is_native(self) -> bool:
        return self is ReferenceCurrency.USD

    @property
    def reference_asset_id(self) -> str | None:
        """CoinGecko id of the coin whose USD price anchors chained conversion."""
        return _REFERENCE_ASSET_IDS.get(self)

    @classmethod
    def default(cls) -> ReferenceCurrency:
        return cls.USD

    @classmethod
    def parse(cls, raw: str) -> ReferenceCurrency:
        code = raw.strip().lower()
        for currency in cls:
            if currency.value == code:
                return currency
        msg = f"Unsupported currency {raw!r}; expected one of {', '.join(c.value for c in cls)}"
        raise ValueError(msg)

    def __str__(self) -> str:
        return self.value


_REFERENCE_ASSET_IDS: dict[ReferenceCurrency, str] = {
    ReferenceCurrency.ETH: "ethereum",
    ReferenceCurrency.BTC: "bitcoin",
}


class AmmVersion(Enum):
    V2 = 2
    V3 = 3

    @property
    def version(self) -> int:
        return self.value

    @property
    def root_field(self) -> str:
        # V2 subgraph exposes pairs, V3 exposes pools
        return "pair" if self is AmmVersion.V2 else "pool"

    @classmethod
    def default(cls) -> AmmVersion:
        return cls.V2

    @classmethod
    def parse(cls, raw: str) -> AmmVersion:
        normalized = raw.strip().upper()
        if not normalized.startswith("V"):
            normalized = f"V{normalized}"
        try:
            return cls[normalized]
        except KeyError as exc:
            msg = f"Unsupported AMM version {raw!r}; expected v2 or v3"
            raise ValueError(msg) from exc

    def __str__(self) -> str:
        return f"v{self.value}"


__all__ = ["AmmVersion", "ReferenceCurrency"]
