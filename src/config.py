from __future__ import annotations

from functools import cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from domain.constants import CardanoNetwork


class AppSettings(BaseSettings):
    maestro_api_key: str | None = None
    blockfrost_project_id: str | None = None
    network: CardanoNetwork = CardanoNetwork.MAINNET
    http_timeout_seconds: float = 10.0

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@cache
def config() -> AppSettings:
    return AppSettings()
