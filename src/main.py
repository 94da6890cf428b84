from __future__ import annotations

import argparse
import json
import logging
from enum import StrEnum
from typing import Any, Sequence

from adapters.base import (
    GetPoolByIdParams,
    GetPoolHistoryParams,
    GetPoolInTxParams,
    GetPoolPriceParams,
    GetPoolsParams,
    PoolAdapter,
)
from adapters.blockfrost_adapter import BlockfrostAdapter
from adapters.maestro_adapter import MaestroAdapter
from clients.blockfrost_client import BlockfrostClient
from clients.maestro_client import MaestroClient
from config import AppSettings, config
from domain.pool import PoolHistory, PoolState

logger = logging.getLogger(__name__)


class Provider(StrEnum):
    MAESTRO = "maestro"
    BLOCKFROST = "blockfrost"


def build_adapter(provider: Provider, settings: AppSettings) -> PoolAdapter:
    if provider == Provider.MAESTRO:
        if not settings.maestro_api_key:
            msg = "MAESTRO_API_KEY must be set to use the maestro provider"
            raise ValueError(msg)
        maestro = MaestroClient(
            api_key=settings.maestro_api_key,
            network=settings.network,
            timeout=settings.http_timeout_seconds,
        )
        return MaestroAdapter(maestro)

    if not settings.blockfrost_project_id:
        msg = "BLOCKFROST_PROJECT_ID must be set to use the blockfrost provider"
        raise ValueError(msg)
    blockfrost = BlockfrostClient(
        project_id=settings.blockfrost_project_id,
        network=settings.network,
        timeout=settings.http_timeout_seconds,
    )
    return BlockfrostAdapter(blockfrost)


def pool_to_json(pool: PoolState) -> dict[str, Any]:
    return {
        "id": pool.id,
        "address": pool.address,
        "tx_in": {"tx_hash": pool.tx_in.tx_hash, "index": pool.tx_in.index},
        "asset_a": pool.asset_a,
        "asset_b": pool.asset_b,
        "reserve_a": str(pool.reserve_a),
        "reserve_b": str(pool.reserve_b),
        "asset_lp": pool.asset_lp,
        "datum_hash": pool.datum_hash,
    }


def history_to_json(entry: PoolHistory) -> dict[str, Any]:
    return entry.model_dump(mode="json")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Query Minswap pool state through a Cardano indexer.")
    parser.add_argument(
        "--provider",
        type=Provider,
        choices=list(Provider),
        default=Provider.MAESTRO,
        help="Indexer backend (default: maestro).",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable info logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    pools = subparsers.add_parser("pools", help="List pools on a page.")
    pools.add_argument("--page", type=int, default=1)
    pools.add_argument("--count", type=int, default=100)
    pools.add_argument("--order", choices=("asc", "desc"), default="asc")

    pool = subparsers.add_parser("pool", help="Show the latest state of a pool.")
    pool.add_argument("pool_id", help="Pool id (asset name of the pool NFT).")

    history = subparsers.add_parser("history", help="List transactions touching a pool.")
    history.add_argument("pool_id")
    history.add_argument("--page", type=int, default=1)
    history.add_argument("--count", type=int, default=100)
    history.add_argument("--order", choices=("asc", "desc"), default="desc")
    history.add_argument("--all", action="store_true", help="Fetch every page instead of a single one.")

    tx = subparsers.add_parser("tx", help="Show the pool state produced by a transaction.")
    tx.add_argument("tx_hash")

    price = subparsers.add_parser("price", help="Show decimal-adjusted pool prices.")
    price.add_argument("pool_id")
    price.add_argument("--decimals-a", type=int, default=None)
    price.add_argument("--decimals-b", type=int, default=None)

    datum = subparsers.add_parser("datum", help="Show the datum CBOR for a datum hash.")
    datum.add_argument("datum_hash")
    return parser


def run_command(args: argparse.Namespace, adapter: PoolAdapter) -> Any:
    if args.command == "pools":
        pools = adapter.get_pools(GetPoolsParams(page=args.page, count=args.count, order=args.order))
        return [pool_to_json(p) for p in pools]

    if args.command == "pool":
        found = adapter.get_pool_by_id(GetPoolByIdParams(id=args.pool_id))
        return pool_to_json(found) if found else None

    if args.command == "history":
        if args.all:
            entries = list(adapter.iter_pool_history(args.pool_id, count=args.count, order=args.order))
        else:
            entries = adapter.get_pool_history(
                GetPoolHistoryParams(id=args.pool_id, page=args.page, count=args.count, order=args.order)
            )
        return [history_to_json(entry) for entry in entries]

    if args.command == "tx":
        found = adapter.get_pool_in_tx(GetPoolInTxParams(tx_hash=args.tx_hash))
        return pool_to_json(found) if found else None

    if args.command == "price":
        found = adapter.get_pool_by_id(GetPoolByIdParams(id=args.pool_id))
        if found is None:
            return None
        price_ab, price_ba = adapter.get_pool_price(
            GetPoolPriceParams(pool=found, decimals_a=args.decimals_a, decimals_b=args.decimals_b)
        )
        return {
            "pool_id": found.id,
            "asset_a": found.asset_a,
            "asset_b": found.asset_b,
            "price_ab": str(price_ab),
            "price_ba": str(price_ba),
        }

    if args.command == "datum":
        return {"datum_hash": args.datum_hash, "cbor": adapter.get_datum_by_datum_hash(args.datum_hash)}

    msg = f"Unknown command {args.command}"
    raise ValueError(msg)


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    try:
        adapter = build_adapter(args.provider, config())
    except ValueError as exc:
        parser.error(str(exc))

    logger.info("Running %s via %s", args.command, args.provider)
    print(json.dumps(run_command(args, adapter), indent=2))


if __name__ == "__main__":
    main()
