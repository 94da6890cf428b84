from __future__ import annotations

import logging
from typing import Any, Iterator

from adapters.base import (
    GetPoolByIdParams,
    GetPoolHistoryParams,
    GetPoolInTxParams,
    GetPoolsParams,
    Order,
    PoolAdapter,
    can_default_decimals,
    parse_timestamp,
)
from clients.errors import IndexerAPIError
from clients.maestro_client import MaestroClient
from domain.constants import LOVELACE, LOVELACE_DECIMALS, POOL_NFT_POLICY_ID, POOL_SCRIPT_HASH
from domain.pool import (
    AssetAmount,
    PoolHistory,
    PoolState,
    TxIn,
    Value,
    check_valid_pool_output,
    is_valid_pool_output,
)
from utils.address import get_payment_cred_from_script_hash, get_script_hash_from_address
from utils.pagination import CursorPage, fetch_cursor_page, iter_cursor_pages

logger = logging.getLogger(__name__)


class MaestroAdapter(PoolAdapter):
    def __init__(self, client: MaestroClient) -> None:
        self.api = client

    def get_pools(self, params: GetPoolsParams) -> list[PoolState]:
        """Return valid pools on the requested page.

        Maestro paginates with cursors, so reaching page N walks the N-1
        previous pages. Past the last page the last available page is returned.
        """
        payment_cred = get_payment_cred_from_script_hash(POOL_SCRIPT_HASH)

        def fetch(cursor: str | None) -> CursorPage:
            return self.api.utxos_by_payment_cred(payment_cred, count=params.count, order=params.order, cursor=cursor)

        response = fetch_cursor_page(fetch, params.page)
        pools: list[PoolState] = []
        for utxo in response.data:
            value = self._to_value(utxo.get("assets") or [])
            datum_hash = self._datum_hash(utxo)
            if not is_valid_pool_output(utxo["address"], value, datum_hash):
                continue
            pools.append(
                PoolState(
                    address=utxo["address"],
                    tx_in=TxIn(tx_hash=utxo["tx_hash"], index=int(utxo["index"])),
                    value=value,
                    datum_hash=datum_hash,
                )
            )
        logger.info("Fetched pools page=%d utxos=%d pools=%d", params.page, len(response.data), len(pools))
        return pools

    def get_pool_by_id(self, params: GetPoolByIdParams) -> PoolState | None:
        """Get a specific pool by its ID (the asset name of the pool NFT and LP tokens)."""
        nft = f"{POOL_NFT_POLICY_ID}{params.id}"
        nft_txs = self.api.asset_txs(nft, count=1, order="desc")
        if not nft_txs.data:
            return None
        return self.get_pool_in_tx(GetPoolInTxParams(tx_hash=nft_txs.data[0]["tx_hash"]))

    def get_pool_history(self, params: GetPoolHistoryParams) -> list[PoolHistory]:
        nft = f"{POOL_NFT_POLICY_ID}{params.id}"

        def fetch(cursor: str | None) -> CursorPage:
            return self.api.asset_txs(nft, count=params.count, order=params.order, cursor=cursor)

        response = fetch_cursor_page(fetch, params.page)
        return [self._to_history(tx) for tx in response.data]

    def iter_pool_history(self, pool_id: str, *, count: int = 100, order: Order = "desc") -> Iterator[PoolHistory]:
        nft = f"{POOL_NFT_POLICY_ID}{pool_id}"

        def fetch(cursor: str | None) -> CursorPage:
            return self.api.asset_txs(nft, count=count, order=order, cursor=cursor)

        for response in iter_cursor_pages(fetch):
            for tx in response.data:
                yield self._to_history(tx)

    def get_pool_in_tx(self, params: GetPoolInTxParams) -> PoolState | None:
        """Get the pool state produced by a transaction, or None if it holds no pool output."""
        pool_tx = self.api.tx_info(params.tx_hash)
        pool_utxo = next(
            (
                output
                for output in pool_tx.get("outputs") or []
                if get_script_hash_from_address(output["address"]) == POOL_SCRIPT_HASH
            ),
            None,
        )
        if pool_utxo is None:
            return None

        value = self._to_value(pool_utxo.get("assets") or [])
        datum_hash = self._datum_hash(pool_utxo)
        check_valid_pool_output(pool_utxo["address"], value, datum_hash)
        return PoolState(
            address=pool_utxo["address"],
            tx_in=TxIn(tx_hash=params.tx_hash, index=int(pool_utxo["index"])),
            value=value,
            datum_hash=datum_hash,
        )

    def get_asset_decimals(self, asset: str) -> int:
        if asset == LOVELACE:
            return LOVELACE_DECIMALS
        try:
            info = self.api.asset_info(asset)
        except IndexerAPIError as exc:
            if not can_default_decimals(asset):
                raise
            logger.warning("Asset info lookup failed for %s (%s); assuming 0 decimals", asset, exc)
            return 0
        metadata = info.get("token_registry_metadata") or {}
        decimals = metadata.get("decimals")
        return int(decimals) if decimals is not None else 0

    def get_datum_by_datum_hash(self, datum_hash: str) -> str:
        datum = self.api.lookup_datum(datum_hash)
        return str(datum["bytes"])

    @staticmethod
    def _to_value(assets: list[dict[str, Any]]) -> Value:
        return [AssetAmount(unit=asset["unit"], quantity=int(asset["amount"])) for asset in assets]

    @staticmethod
    def _datum_hash(utxo: dict[str, Any]) -> str:
        datum = utxo.get("datum") or {}
        return str(datum.get("hash") or "")

    @staticmethod
    def _to_history(tx: dict[str, Any]) -> PoolHistory:
        # Asset tx records carry only tx_hash, slot and timestamp.
        return PoolHistory(tx_hash=tx["tx_hash"], time=parse_timestamp(tx["timestamp"]))


__all__ = ["MaestroAdapter"]
