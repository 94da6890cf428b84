from __future__ import annotations

from pycardano import Address, Network, ScriptHash, VerificationKeyHash

from domain.constants import FACTORY_ASSET, LOVELACE, POOL_NFT_POLICY_ID, POOL_SCRIPT_HASH
from domain.pool import AssetAmount, PoolState, TxIn

POOL_ID = "6aa2153e1ae896a95539c9d62f76cedcdabdcdf144e564b8955f609d660cf6a2"
OTHER_POOL_ID = "82e2b1fd27a7712a1a9cf750dfbea1a5778611b20e06dd6a611df7a643f8cb75"
TOKEN_MIN = "29d222ce763455e3d7a09a665ce554f00ac89d2e99a1a83d267170c64d494e"
TOKEN_WRT = "c0ee29a85b13209423b10447d3c2e6a50641a15c57770e27cb9d507357696e67526964657273"
DATUM_HASH = "d" * 64
TX_HASH = "a1" * 32

POOL_ADDRESS = Address(
    payment_part=ScriptHash(bytes.fromhex(POOL_SCRIPT_HASH)),
    staking_part=VerificationKeyHash(bytes.fromhex("33" * 28)),
    network=Network.MAINNET,
).encode()
USER_ADDRESS = Address(
    payment_part=VerificationKeyHash(bytes.fromhex("11" * 28)),
    network=Network.MAINNET,
).encode()
OTHER_SCRIPT_ADDRESS = Address(
    payment_part=ScriptHash(bytes.fromhex("22" * 28)),
    network=Network.MAINNET,
).encode()


def ada_pool_value(
    *,
    pool_id: str = POOL_ID,
    reserve_ada: int = 2_000_000_000,
    reserve_token: int = 500_000_000,
    with_factory: bool = True,
) -> list[AssetAmount]:
    value = [
        AssetAmount(unit=LOVELACE, quantity=reserve_ada),
        AssetAmount(unit=TOKEN_MIN, quantity=reserve_token),
        AssetAmount(unit=f"{POOL_NFT_POLICY_ID}{pool_id}", quantity=1),
    ]
    if with_factory:
        value.append(AssetAmount(unit=FACTORY_ASSET, quantity=1))
    return value


def make_pool(**kwargs: object) -> PoolState:
    return PoolState(
        address=POOL_ADDRESS,
        tx_in=TxIn(tx_hash=TX_HASH, index=0),
        value=ada_pool_value(**kwargs),  # type: ignore[arg-type]
        datum_hash=DATUM_HASH,
    )


def as_maestro_assets(value: list[AssetAmount]) -> list[dict[str, object]]:
    return [{"unit": amount.unit, "amount": amount.quantity} for amount in value]


def as_blockfrost_amount(value: list[AssetAmount]) -> list[dict[str, object]]:
    return [{"unit": amount.unit, "quantity": str(amount.quantity)} for amount in value]
