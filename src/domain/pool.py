from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, model_validator

from domain.constants import (
    FACTORY_ASSET,
    FACTORY_POLICY_ID,
    LOVELACE,
    LP_POLICY_ID,
    POLICY_ID_LENGTH,
    POOL_NFT_POLICY_ID,
    POOL_SCRIPT_HASH,
)
from utils.address import get_script_hash_from_address


class InvalidPoolOutputError(ValueError):
    pass


class TxIn(BaseModel):
    model_config = ConfigDict(frozen=True)

    tx_hash: str
    index: int

    @model_validator(mode="after")
    def _validate_fields(self) -> TxIn:
        if not self.tx_hash:
            raise ValueError("TxIn.tx_hash must be non-empty")
        if self.index < 0:
            raise ValueError("TxIn.index must be >= 0")
        return self


class AssetAmount(BaseModel):
    """A single asset inside a UTXO value.

    `unit` is either `lovelace` or the concatenation of policy id and asset
    name, both hex encoded.
    """

    model_config = ConfigDict(frozen=True)

    unit: str
    quantity: int

    @model_validator(mode="after")
    def _validate_quantity(self) -> AssetAmount:
        if self.quantity < 0:
            raise ValueError("AssetAmount.quantity must be >= 0")
        return self


Value = list[AssetAmount]


def find_unit(value: Value, unit: str) -> AssetAmount | None:
    for amount in value:
        if amount.unit == unit:
            return amount
    return None


def _split_pool_assets(value: Value, pool_id: str) -> tuple[str, str]:
    # Factory token, pool NFT and LP tokens from profit sharing are not reserves.
    relevant = [
        amount.unit
        for amount in value
        if not amount.unit.startswith(FACTORY_POLICY_ID) and not amount.unit.endswith(pool_id)
    ]
    non_ada = [unit for unit in relevant if unit != LOVELACE]
    if len(relevant) == 2:
        if len(non_ada) != 1:
            raise InvalidPoolOutputError("ADA pool must have exactly 1 non-ADA asset")
        return LOVELACE, non_ada[0]
    if len(relevant) == 3:
        if len(non_ada) != 2:
            raise InvalidPoolOutputError("pool must have exactly 2 non-ADA assets")
        return non_ada[0], non_ada[1]
    raise InvalidPoolOutputError("pool must have 2 or 3 assets except factory, NFT and LP tokens")


class PoolState(BaseModel):
    """Snapshot of a pool output as reported by an indexer."""

    model_config = ConfigDict(frozen=True)

    address: str
    tx_in: TxIn
    value: list[AssetAmount]
    datum_hash: str

    @model_validator(mode="after")
    def _validate_fields(self) -> PoolState:
        check_valid_pool_output(self.address, self.value, self.datum_hash)
        nfts = [amount for amount in self.value if amount.unit.startswith(POOL_NFT_POLICY_ID)]
        if len(nfts) != 1:
            raise InvalidPoolOutputError(f"pool must hold exactly one NFT, found {len(nfts)}")
        _split_pool_assets(self.value, self.id)
        return self

    @property
    def nft(self) -> str:
        for amount in self.value:
            if amount.unit.startswith(POOL_NFT_POLICY_ID):
                return amount.unit
        raise InvalidPoolOutputError("pool doesn't have NFT")

    @property
    def id(self) -> str:
        return self.nft[POLICY_ID_LENGTH:]

    @property
    def asset_lp(self) -> str:
        return f"{LP_POLICY_ID}{self.id}"

    @property
    def asset_a(self) -> str:
        return _split_pool_assets(self.value, self.id)[0]

    @property
    def asset_b(self) -> str:
        return _split_pool_assets(self.value, self.id)[1]

    @property
    def reserve_a(self) -> int:
        amount = find_unit(self.value, self.asset_a)
        return amount.quantity if amount else 0

    @property
    def reserve_b(self) -> int:
        amount = find_unit(self.value, self.asset_b)
        return amount.quantity if amount else 0


class PoolHistory(BaseModel):
    model_config = ConfigDict(frozen=True)

    tx_hash: str
    time: datetime
    tx_index: int | None = None
    block_height: int | None = None

    @model_validator(mode="after")
    def _validate_time(self) -> PoolHistory:
        if self.time.tzinfo is None:
            raise ValueError("PoolHistory.time must be timezone-aware")
        return self


def check_valid_pool_output(address: str, value: Value, datum_hash: str | None) -> None:
    script_hash = get_script_hash_from_address(address)
    if script_hash != POOL_SCRIPT_HASH:
        raise InvalidPoolOutputError(f"expect pool address of {POOL_SCRIPT_HASH}, got {script_hash}")
    if find_unit(value, FACTORY_ASSET) is None:
        raise InvalidPoolOutputError("expect pool to have factory token")
    if not datum_hash:
        raise InvalidPoolOutputError(f"expect pool to have datum hash, got {datum_hash!r}")


def is_valid_pool_output(address: str, value: Value, datum_hash: str | None) -> bool:
    try:
        check_valid_pool_output(address, value, datum_hash)
    except InvalidPoolOutputError:
        return False
    return True


__all__ = [
    "AssetAmount",
    "InvalidPoolOutputError",
    "PoolHistory",
    "PoolState",
    "TxIn",
    "Value",
    "check_valid_pool_output",
    "find_unit",
    "is_valid_pool_output",
]
