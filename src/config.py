from __future__ import annotations

from functools import cache
from importlib import resources
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# packaged with services, see [tool.setuptools.package-data]
DEFAULT_TOKEN_LIST_PATH = Path(str(resources.files("services") / "data" / "coingecko_token_list.csv"))


class AppSettings(BaseSettings):
    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    # https://docs.coingecko.com/reference/authentication
    coingecko_api_key: str = ""
    uniswap_v2_subgraph_url: str = "https://api.thegraph.com/subgraphs/name/uniswap/uniswap-v2"
    uniswap_v3_subgraph_url: str = "https://api.thegraph.com/subgraphs/name/uniswap/uniswap-v3"
    token_list_path: Path = DEFAULT_TOKEN_LIST_PATH
    request_timeout_seconds: float = 10.0

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@cache
def config() -> AppSettings:
    return AppSettings()
