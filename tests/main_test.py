from __future__ import annotations

import json
from pathlib import Path

import pytest

import main
from config import config
from domain.currency import AmmVersion, ReferenceCurrency
from services.price_resolver import PriceResolver
from services.token_registry import TokenRegistry
from tests.helpers.price_stubs import StubPairSource, StubSpotSource


@pytest.fixture(autouse=True)
def _stub_resolver(
    monkeypatch: pytest.MonkeyPatch, spot_source: StubSpotSource, pair_source: StubPairSource
) -> list[TokenRegistry | None]:
    registries: list[TokenRegistry | None] = []

    def _build(registry: TokenRegistry | None = None) -> PriceResolver:
        registries.append(registry)
        assert registry is not None
        return PriceResolver(
            registry=registry,
            spot_source=spot_source,
            pair_source=pair_source,
        )

    monkeypatch.setattr(main, "build_default_resolver", _build)
    return registries


def test_parse_args_defaults() -> None:
    args = main.parse_args(["pair", "0xabc"])

    assert args.amm_version is AmmVersion.V2
    assert args.currency is ReferenceCurrency.USD
    assert args.token_list is None


def test_spot_command_prints_json(token_list_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main.main(["--token-list", str(token_list_path), "spot", "Ethereum", "--currency", "usd"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["currency_price"] == "3000"


def test_pair_command_prints_json(token_list_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main.main(["--token-list", str(token_list_path), "pair", "0xabc", "--amm-version", "v3"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["token0_price"] == "0.5"
    assert payload["token0_per_currency_unit"] == "2"
    assert payload["token1_per_currency_unit"] == "0.5"


def test_resolution_errors_exit_non_zero(token_list_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main.main(["--token-list", str(token_list_path), "spot", "Ethereum", "--currency", "eur"])

    assert exit_code == 1
    assert "not implemented" in capsys.readouterr().err


def test_missing_token_list_exits_non_zero(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main.main(["--token-list", str(tmp_path / "missing.csv"), "spot", "Ethereum"])

    assert exit_code == 1
    assert "Cannot open token list" in capsys.readouterr().err


def test_log_level_is_case_insensitive() -> None:
    assert main.parse_args(["--log-level", "debug", "spot", "Ethereum"]).log_level == "DEBUG"


def test_unknown_log_level_is_usage_error(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        main.parse_args(["--log-level", "verbose", "spot", "Ethereum"])

    assert exc_info.value.code == 2
    assert "invalid choice" in capsys.readouterr().err


def test_invalid_environment_config_exits_non_zero(
    token_list_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("REQUEST_TIMEOUT_SECONDS", "abc")
    config.cache_clear()
    try:
        exit_code = main.main(["--token-list", str(token_list_path), "spot", "Ethereum"])
    finally:
        config.cache_clear()

    assert exit_code == 1
    err = capsys.readouterr().err
    assert "invalid configuration" in err
    assert "request_timeout_seconds" in err
