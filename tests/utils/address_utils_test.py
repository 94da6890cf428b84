from __future__ import annotations

import pytest
from pycardano import Address, Network, VerificationKeyHash

from domain.constants import POOL_SCRIPT_HASH
from tests.helpers.pool_builders import OTHER_SCRIPT_ADDRESS, POOL_ADDRESS, USER_ADDRESS
from utils.address import get_payment_cred_from_script_hash, get_script_hash_from_address, script_hash_to_bech32


def test_script_hash_is_extracted_from_base_address() -> None:
    assert get_script_hash_from_address(POOL_ADDRESS) == POOL_SCRIPT_HASH


def test_script_hash_is_extracted_from_enterprise_address() -> None:
    assert get_script_hash_from_address(OTHER_SCRIPT_ADDRESS) == "22" * 28


def test_key_hash_payment_credential_has_no_script_hash() -> None:
    assert get_script_hash_from_address(USER_ADDRESS) is None


def test_reward_address_has_no_script_hash() -> None:
    reward_address = Address(
        staking_part=VerificationKeyHash(bytes.fromhex("44" * 28)),
        network=Network.MAINNET,
    ).encode()

    assert get_script_hash_from_address(reward_address) is None


def test_undecodable_address_has_no_script_hash() -> None:
    byron_address = "DdzFFzCqrhsrcTVhLygT24QwTnNqQqQ8mZrq5jykUzMveU26sxaH529kMpo7VhPrt5pwW3wLYDd"

    assert get_script_hash_from_address(byron_address) is None


def test_payment_credential_uses_shared_vkh_prefix() -> None:
    credential = get_payment_cred_from_script_hash(POOL_SCRIPT_HASH)

    assert credential.startswith("addr_shared_vkh1")


def test_script_hash_bech32_uses_script_prefix() -> None:
    encoded = script_hash_to_bech32(POOL_SCRIPT_HASH)

    assert encoded.startswith("script1")
    assert encoded != get_payment_cred_from_script_hash(POOL_SCRIPT_HASH)


def test_encoding_rejects_wrong_hash_length() -> None:
    with pytest.raises(ValueError):
        script_hash_to_bech32("abcd")
