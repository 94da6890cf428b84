from __future__ import annotations

from enum import StrEnum


class CardanoNetwork(StrEnum):
    MAINNET = "mainnet"
    PREPROD = "preprod"
    PREVIEW = "preview"


# Minswap V1 protocol identifiers (hex encoded).
POOL_SCRIPT_HASH = "e1317b152faac13426e6a83e06ff88a4d62cce3c1634ab0a5ec13309"
POOL_NFT_POLICY_ID = "0be55d262b29f564998ff81efe21bdc0022621c12f15af08d0f2ddb1"
LP_POLICY_ID = "e4214b7cce62ac6fbba385d164df48e157eae5863521b4b67ca71d86"
FACTORY_POLICY_ID = "13aa2accf2e1561723aa26871e071fdf32c867cff7e7d50ad470d62f"
FACTORY_ASSET_NAME = "4d494e53574150"
FACTORY_ASSET = f"{FACTORY_POLICY_ID}{FACTORY_ASSET_NAME}"

POLICY_ID_LENGTH = 56
SCRIPT_HASH_SIZE = 28

LOVELACE = "lovelace"
LOVELACE_DECIMALS = 6

SCRIPT_HASH_BECH32_PREFIX = "script"
SCRIPT_PAYMENT_CRED_BECH32_PREFIX = "addr_shared_vkh"


__all__ = [
    "CardanoNetwork",
    "FACTORY_ASSET",
    "FACTORY_ASSET_NAME",
    "FACTORY_POLICY_ID",
    "LOVELACE",
    "LOVELACE_DECIMALS",
    "LP_POLICY_ID",
    "POLICY_ID_LENGTH",
    "POOL_NFT_POLICY_ID",
    "POOL_SCRIPT_HASH",
    "SCRIPT_HASH_BECH32_PREFIX",
    "SCRIPT_HASH_SIZE",
    "SCRIPT_PAYMENT_CRED_BECH32_PREFIX",
]
