"""
Account identities.

An account is identified by the 28 byte hash of its public key. Devnet
accounts are derived from a wallet name so that the same name always maps to
the same identity, which is what the deployment script and the node API use
to pick a caller.
"""
import hashlib
from typing import Union

from ..errors import InvalidAccount

PubKeyHash = bytes

KEY_HASH_LENGTH = 28

# the "from" side of a mint and the "previous owner" at construction
NULL_ACCOUNT: PubKeyHash = bytes(KEY_HASH_LENGTH)


def key_hash(data: bytes) -> PubKeyHash:
    return hashlib.blake2b(data, digest_size=KEY_HASH_LENGTH).digest()


def get_account(wallet: str) -> PubKeyHash:
    """
    Derive the devnet account of the given wallet name
    """
    if not wallet:
        raise InvalidAccount(wallet, "wallet name must not be empty")
    return key_hash(f"nft_collection/devnet/{wallet}".encode())


def check_account(account) -> PubKeyHash:
    """
    Ensure that the account is a well-formed, non-null identity
    """
    if not isinstance(account, bytes) or len(account) != KEY_HASH_LENGTH:
        raise InvalidAccount(account)
    if account == NULL_ACCOUNT:
        raise InvalidAccount(account, "the null account is not a valid account")
    return account


def account_from_hex(account: str) -> PubKeyHash:
    try:
        raw = bytes.fromhex(account)
    except (TypeError, ValueError):
        raise InvalidAccount(account, f"account is not valid hex: {account!r}")
    return check_account(raw)


def account_to_hex(account: Union[PubKeyHash, bytearray]) -> str:
    return bytes(account).hex()
