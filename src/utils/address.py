from __future__ import annotations

import logging

from pycardano import Address, ScriptHash
from pycardano.crypto.bech32 import encode
from pycardano.exception import PyCardanoException

from domain.constants import SCRIPT_HASH_BECH32_PREFIX, SCRIPT_HASH_SIZE, SCRIPT_PAYMENT_CRED_BECH32_PREFIX

logger = logging.getLogger(__name__)


def get_script_hash_from_address(address: str) -> str | None:
    """Return the hex script hash of the address payment credential.

    `None` for key-hash payment credentials, reward addresses and strings that
    are not bech32 Shelley addresses (e.g. Byron base58 addresses).
    """
    try:
        decoded = Address.from_primitive(address)
    except (PyCardanoException, TypeError, ValueError):
        logger.debug("Cannot decode address %s as a Shelley address", address)
        return None
    payment_part = decoded.payment_part
    if not isinstance(payment_part, ScriptHash):
        return None
    return payment_part.payload.hex()


def _encode_hash(prefix: str, script_hash: str) -> str:
    raw = bytes.fromhex(script_hash)
    if len(raw) != SCRIPT_HASH_SIZE:
        msg = f"script hash must be {SCRIPT_HASH_SIZE} bytes, got {len(raw)}"
        raise ValueError(msg)
    encoded = encode(prefix, raw)
    if encoded is None:
        msg = f"cannot bech32 encode {script_hash} with prefix {prefix}"
        raise ValueError(msg)
    return encoded


def get_payment_cred_from_script_hash(script_hash: str) -> str:
    return _encode_hash(SCRIPT_PAYMENT_CRED_BECH32_PREFIX, script_hash)


def script_hash_to_bech32(script_hash: str) -> str:
    return _encode_hash(SCRIPT_HASH_BECH32_PREFIX, script_hash)


__all__ = [
    "get_payment_cred_from_script_hash",
    "get_script_hash_from_address",
    "script_hash_to_bech32",
]
