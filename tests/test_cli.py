from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterator

import pytest

from adapters.base import (
    GetPoolByIdParams,
    GetPoolHistoryParams,
    GetPoolInTxParams,
    GetPoolsParams,
    Order,
    PoolAdapter,
)
from adapters.blockfrost_adapter import BlockfrostAdapter
from adapters.maestro_adapter import MaestroAdapter
from config import AppSettings
from domain.constants import LOVELACE
from domain.pool import PoolHistory, PoolState
from main import Provider, build_adapter, build_parser, run_command
from tests.helpers.pool_builders import POOL_ID, TOKEN_MIN, TX_HASH, make_pool


class _StubAdapter(PoolAdapter):
    def __init__(self, pool: PoolState | None) -> None:
        self.pool = pool
        self.history = [
            PoolHistory(tx_hash="t1", time=datetime(2024, 1, 1, tzinfo=timezone.utc), block_height=1),
            PoolHistory(tx_hash="t2", time=datetime(2024, 1, 2, tzinfo=timezone.utc), block_height=2),
        ]
        self.history_params: list[GetPoolHistoryParams] = []

    def get_pools(self, params: GetPoolsParams) -> list[PoolState]:
        return [self.pool] if self.pool else []

    def get_pool_by_id(self, params: GetPoolByIdParams) -> PoolState | None:
        return self.pool

    def get_pool_history(self, params: GetPoolHistoryParams) -> list[PoolHistory]:
        self.history_params.append(params)
        return self.history[:1]

    def iter_pool_history(self, pool_id: str, *, count: int = 100, order: Order = "desc") -> Iterator[PoolHistory]:
        yield from self.history

    def get_pool_in_tx(self, params: GetPoolInTxParams) -> PoolState | None:
        return self.pool

    def get_asset_decimals(self, asset: str) -> int:
        return 6 if asset == LOVELACE else 0

    def get_datum_by_datum_hash(self, datum_hash: str) -> str:
        return "d87980"


def test_pools_command_serializes_pool() -> None:
    args = build_parser().parse_args(["pools", "--page", "2"])

    result = run_command(args, _StubAdapter(make_pool()))

    assert result == [
        {
            "id": POOL_ID,
            "address": make_pool().address,
            "tx_in": {"tx_hash": TX_HASH, "index": 0},
            "asset_a": LOVELACE,
            "asset_b": TOKEN_MIN,
            "reserve_a": "2000000000",
            "reserve_b": "500000000",
            "asset_lp": make_pool().asset_lp,
            "datum_hash": make_pool().datum_hash,
        }
    ]


def test_history_command_single_page_and_all_pages() -> None:
    adapter = _StubAdapter(make_pool())
    parser = build_parser()

    single = run_command(parser.parse_args(["history", POOL_ID, "--page", "3", "--count", "10"]), adapter)
    every = run_command(parser.parse_args(["history", POOL_ID, "--all"]), adapter)

    assert [entry["tx_hash"] for entry in single] == ["t1"]
    assert adapter.history_params == [GetPoolHistoryParams(id=POOL_ID, page=3, count=10, order="desc")]
    assert [entry["tx_hash"] for entry in every] == ["t1", "t2"]
    assert every[1]["block_height"] == 2


def test_price_command_uses_pool_decimals() -> None:
    args = build_parser().parse_args(["price", POOL_ID])

    result = run_command(args, _StubAdapter(make_pool(reserve_ada=1_000_000_000, reserve_token=50)))

    assert Decimal(result["price_ab"]) == Decimal("20")
    assert Decimal(result["price_ba"]) == Decimal("0.05")


def test_pool_command_returns_none_for_missing_pool() -> None:
    args = build_parser().parse_args(["--provider", "blockfrost", "pool", POOL_ID])

    assert run_command(args, _StubAdapter(None)) is None


def test_datum_command() -> None:
    args = build_parser().parse_args(["datum", "ff"])

    assert run_command(args, _StubAdapter(None)) == {"datum_hash": "ff", "cbor": "d87980"}


def test_build_adapter_selects_provider() -> None:
    settings = AppSettings(maestro_api_key="mkey", blockfrost_project_id="bkey")

    assert isinstance(build_adapter(Provider.MAESTRO, settings), MaestroAdapter)
    assert isinstance(build_adapter(Provider.BLOCKFROST, settings), BlockfrostAdapter)


def test_build_adapter_requires_credentials() -> None:
    settings = AppSettings(maestro_api_key=None, blockfrost_project_id=None)

    with pytest.raises(ValueError, match="MAESTRO_API_KEY"):
        build_adapter(Provider.MAESTRO, settings)
    with pytest.raises(ValueError, match="BLOCKFROST_PROJECT_ID"):
        build_adapter(Provider.BLOCKFROST, settings)
