from __future__ import annotations

import csv
import logging
from functools import cache
from pathlib import Path
from typing import Iterator

from pydantic import ValidationError

from config import config
from domain.prices import AssetRecord

from .errors import AssetNotFound, RegistryLoadError, RegistryRowError

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = frozenset({"id", "symbol", "name"})


class TokenRegistry:
    """Immutable name -> CoinGecko id lookup built from the token list CSV.

    The CSV carries ``Id,Symbol,Name`` columns; header names are matched
    case-insensitively. Rows that fail validation are logged and dropped,
    everything else about a broken file is fatal.
    """

    def __init__(self, records: tuple[AssetRecord, ...]) -> None:
        self._records = records

    @classmethod
    def load(cls, path: Path) -> TokenRegistry:
        try:
            handle = path.open(encoding="utf-8-sig", errors="surrogateescape", newline="")
        except OSError as exc:
            msg = f"Cannot open token list {path}: {exc}"
            raise RegistryLoadError(msg) from exc

        records: list[AssetRecord] = []
        skipped = 0
        with handle:
            reader = csv.DictReader(handle)
            try:
                fieldnames = reader.fieldnames
            except (OSError, csv.Error) as exc:
                msg = f"Cannot read token list {path}: {exc}"
                raise RegistryLoadError(msg) from exc
            if fieldnames is None:
                raise RegistryLoadError(f"Token list {path} is empty or missing headers")

            missing = REQUIRED_COLUMNS - {name.strip().lower() for name in fieldnames}
            if missing:
                raise RegistryLoadError(f"Token list {path} missing required columns: {', '.join(sorted(missing))}")

            try:
                for row in reader:
                    try:
                        records.append(_parse_row(row, line_number=reader.line_num))
                    except RegistryRowError as exc:
                        skipped += 1
                        logger.warning("Skipping token list row %d in %s: %s", exc.line_number, path, exc)
            except (OSError, csv.Error) as exc:
                msg = f"Cannot read token list {path}: {exc}"
                raise RegistryLoadError(msg) from exc

        logger.info("Loaded %d tokens from %s (%d rows skipped)", len(records), path, skipped)
        return cls(tuple(records))

    @property
    def records(self) -> tuple[AssetRecord, ...]:
        return self._records

    def resolve(self, display_name: str) -> str:
        for record in self._records:
            if record.display_name == display_name:
                return record.external_id
        raise AssetNotFound(display_name)

    def find_by_symbol(self, symbol: str) -> list[AssetRecord]:
        wanted = symbol.lower()
        return [record for record in self._records if record.symbol.lower() == wanted]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[AssetRecord]:
        return iter(self._records)


def _parse_row(row: dict[str | None, str | None], *, line_number: int) -> AssetRecord:
    normalized = {key.strip().lower(): value for key, value in row.items() if key is not None}
    # undecodable bytes survive as lone surrogates from surrogateescape
    for key in sorted(REQUIRED_COLUMNS):
        value = normalized.get(key)
        if isinstance(value, str) and _has_undecodable_bytes(value):
            raise RegistryRowError(f"{key} is not valid UTF-8", line_number=line_number)
    try:
        return AssetRecord.model_validate(normalized)
    except ValidationError as exc:
        fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err["loc"])
        raise RegistryRowError(f"invalid or missing {fields or 'columns'}", line_number=line_number) from exc


def _has_undecodable_bytes(value: str) -> bool:
    return any("\udc80" <= char <= "\udcff" for char in value)


@cache
def default_registry() -> TokenRegistry:
    return TokenRegistry.load(config().token_list_path)


def reload_default_registry() -> TokenRegistry:
    default_registry.cache_clear()
    return default_registry()


__all__ = ["TokenRegistry", "default_registry", "reload_default_registry"]
