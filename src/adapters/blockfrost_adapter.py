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
from clients.blockfrost_client import BlockfrostClient
from clients.errors import IndexerAPIError
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
from utils.address import get_script_hash_from_address, script_hash_to_bech32

logger = logging.getLogger(__name__)


class BlockfrostAdapter(PoolAdapter):
    def __init__(self, client: BlockfrostClient) -> None:
        self.api = client

    def get_pools(self, params: GetPoolsParams) -> list[PoolState]:
        """Return valid pools on the requested page, empty past the last page."""
        utxos = self.api.addresses_utxos(
            script_hash_to_bech32(POOL_SCRIPT_HASH),
            count=params.count,
            page=params.page,
            order=params.order,
        )
        pools: list[PoolState] = []
        for utxo in utxos:
            value = self._to_value(utxo.get("amount") or [])
            datum_hash = utxo.get("data_hash") or ""
            if not is_valid_pool_output(utxo["address"], value, datum_hash):
                continue
            pools.append(
                PoolState(
                    address=utxo["address"],
                    tx_in=TxIn(tx_hash=utxo["tx_hash"], index=int(utxo["output_index"])),
                    value=value,
                    datum_hash=datum_hash,
                )
            )
        logger.info("Fetched pools page=%d utxos=%d pools=%d", params.page, len(utxos), len(pools))
        return pools

    def get_pool_by_id(self, params: GetPoolByIdParams) -> PoolState | None:
        nft = f"{POOL_NFT_POLICY_ID}{params.id}"
        nft_txs = self.api.assets_transactions(nft, count=1, page=1, order="desc")
        if not nft_txs:
            return None
        return self.get_pool_in_tx(GetPoolInTxParams(tx_hash=nft_txs[0]["tx_hash"]))

    def get_pool_history(self, params: GetPoolHistoryParams) -> list[PoolHistory]:
        nft = f"{POOL_NFT_POLICY_ID}{params.id}"
        nft_txs = self.api.assets_transactions(nft, count=params.count, page=params.page, order=params.order)
        return [self._to_history(tx) for tx in nft_txs]

    def iter_pool_history(self, pool_id: str, *, count: int = 100, order: Order = "desc") -> Iterator[PoolHistory]:
        nft = f"{POOL_NFT_POLICY_ID}{pool_id}"
        page = 1
        while True:
            nft_txs = self.api.assets_transactions(nft, count=count, page=page, order=order)
            for tx in nft_txs:
                yield self._to_history(tx)
            if len(nft_txs) < count:
                return
            page += 1

    def get_pool_in_tx(self, params: GetPoolInTxParams) -> PoolState | None:
        pool_tx = self.api.txs_utxos(params.tx_hash)
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

        value = self._to_value(pool_utxo.get("amount") or [])
        datum_hash = pool_utxo.get("data_hash") or ""
        check_valid_pool_output(pool_utxo["address"], value, datum_hash)
        return PoolState(
            address=pool_utxo["address"],
            tx_in=TxIn(tx_hash=params.tx_hash, index=int(pool_utxo["output_index"])),
            value=value,
            datum_hash=datum_hash,
        )

    def get_asset_decimals(self, asset: str) -> int:
        if asset == LOVELACE:
            return LOVELACE_DECIMALS
        try:
            info = self.api.assets_by_id(asset)
        except IndexerAPIError as exc:
            if not can_default_decimals(asset):
                raise
            logger.warning("Asset lookup failed for %s (%s); assuming 0 decimals", asset, exc)
            return 0
        metadata = info.get("metadata") or {}
        decimals = metadata.get("decimals")
        return int(decimals) if decimals is not None else 0

    def get_datum_by_datum_hash(self, datum_hash: str) -> str:
        datum = self.api.scripts_datum_cbor(datum_hash)
        return str(datum["cbor"])

    @staticmethod
    def _to_value(amounts: list[dict[str, Any]]) -> Value:
        return [AssetAmount(unit=amount["unit"], quantity=int(amount["quantity"])) for amount in amounts]

    @staticmethod
    def _to_history(tx: dict[str, Any]) -> PoolHistory:
        return PoolHistory(
            tx_hash=tx["tx_hash"],
            tx_index=int(tx["tx_index"]),
            block_height=int(tx["block_height"]),
            time=parse_timestamp(int(tx["block_time"])),
        )


__all__ = ["BlockfrostAdapter"]
