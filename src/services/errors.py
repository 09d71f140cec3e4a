from __future__ import annotations

from typing import Any


class PriceResolutionError(Exception):
    """Base class for everything the resolution pipeline raises on purpose."""


class RegistryLoadError(PriceResolutionError):
    pass


class RegistryRowError(PriceResolutionError):
    def __init__(self, message: str, *, line_number: int) -> None:
        super().__init__(message)
        self.line_number = line_number


class AssetNotFound(PriceResolutionError):
    def __init__(self, display_name: str) -> None:
        super().__init__(f"No asset named {display_name!r} in the token list")
        self.display_name = display_name


class SourceError(PriceResolutionError):
    def __init__(
        self,
        message: str,
        *,
        source: str,
        identifier: str,
        status_code: int | None = None,
        payload: Any | None = None,
    ) -> None:
        super().__init__(f"{source} [{identifier}]: {message}")
        self.source = source
        self.identifier = identifier
        self.status_code = status_code
        self.payload = payload


class UnimplementedCurrency(PriceResolutionError):
    def __init__(self, currency: object) -> None:
        super().__init__(f"Conversion into {currency} is not implemented")
        self.currency = currency


class NumericParseError(PriceResolutionError):
    def __init__(self, message: str, *, value: str) -> None:
        super().__init__(message)
        self.value = value


class InvalidPrice(PriceResolutionError):
    pass


__all__ = [
    "AssetNotFound",
    "InvalidPrice",
    "NumericParseError",
    "PriceResolutionError",
    "RegistryLoadError",
    "RegistryRowError",
    "SourceError",
    "UnimplementedCurrency",
]
