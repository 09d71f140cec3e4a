from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Sequence

from pydantic import ValidationError

from config import config
from domain.currency import AmmVersion, ReferenceCurrency
from services.errors import PriceResolutionError
from services.price_resolver import PriceResolver, build_default_resolver
from services.token_registry import TokenRegistry

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Resolve crypto asset and Uniswap pair prices.")
    parser.add_argument("--token-list", type=Path, help="CoinGecko token list CSV (Id,Symbol,Name).")
    parser.add_argument(
        "--log-level", type=str.upper, choices=LOG_LEVELS, default="WARNING", help="Logging level (default: WARNING)."
    )

    currency_kwargs = {
        "type": ReferenceCurrency.parse,
        "default": ReferenceCurrency.default(),
        "help": "Reference currency: usd, eth, btc or eur (default: usd).",
    }
    subparsers = parser.add_subparsers(dest="command", required=True)

    spot = subparsers.add_parser("spot", help="Price of an asset looked up by its CoinGecko display name.")
    spot.add_argument("asset", help="Display name as listed in the token list, e.g. Ethereum.")
    spot.add_argument("--currency", **currency_kwargs)

    token = subparsers.add_parser("token", help="Price of a token looked up by contract address.")
    token.add_argument("platform", help="CoinGecko asset platform, e.g. ethereum.")
    token.add_argument("contract_address", help="Token contract address.")
    token.add_argument("--currency", **currency_kwargs)

    pair = subparsers.add_parser("pair", help="Token prices of a Uniswap pair or pool.")
    pair.add_argument("pair_address", help="Pair (V2) or pool (V3) address.")
    pair.add_argument("--amm-version", type=AmmVersion.parse, default=AmmVersion.default(), help="v2 or v3.")
    pair.add_argument("--currency", **currency_kwargs)

    return parser.parse_args(argv)


def run(args: argparse.Namespace, resolver: PriceResolver) -> dict[str, str]:
    if args.command == "spot":
        result = resolver.resolve_single_price(args.asset, args.currency)
    elif args.command == "token":
        result = resolver.resolve_token_price(args.platform, args.contract_address, args.currency)
    else:
        result = resolver.resolve_pair_price(args.pair_address, args.amm_version, args.currency)
    return asdict(result)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    try:
        config()
    except ValidationError as exc:
        print(f"error: invalid configuration: {exc}", file=sys.stderr)
        return 1

    try:
        registry = TokenRegistry.load(args.token_list) if args.token_list is not None else None
        resolver = build_default_resolver(registry)
        payload = run(args, resolver)
    except PriceResolutionError as exc:
        logger.debug("Resolution failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
