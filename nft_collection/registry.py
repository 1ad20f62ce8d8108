"""
The NFT collection registry.

The registry assigns token ids starting at 1, records owner and token URI of
every minted item and keeps a collection-wide URI that only the owner of the
collection (the account that deployed it) may change.

Mutating operations are serialized through the write side of a read/write
lock, so every mint gets a fresh id and no collection URI update is lost.
Reads only take the shared side and never block each other.
Every operation either applies completely or raises and leaves the state
untouched.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .errors import NotFound, Unauthorized
from .events import EventLog, OwnershipTransferred, Transfer
from .locks import ReadWriteLock
from .utils.keys import NULL_ACCOUNT, PubKeyHash, account_to_hex, check_account

_LOGGER = logging.getLogger(__name__)

TokenId = int

FIRST_TOKEN_ID: TokenId = 1


@dataclass(frozen=True)
class Item:
    """
    A minted token
    """

    owner: PubKeyHash
    token_uri: str


class Registry:
    def __init__(
        self,
        deployer: PubKeyHash,
        name: str,
        symbol: str,
        address: PubKeyHash,
    ):
        self._owner = check_account(deployer)
        self._address = check_account(address)
        self._name = name
        self._symbol = symbol
        self._next_id: TokenId = FIRST_TOKEN_ID
        self._items: Dict[TokenId, Item] = {}
        self._owned: Dict[PubKeyHash, List[TokenId]] = {}
        self._collection_uri = ""
        self._lock = ReadWriteLock()
        self.events = EventLog()
        self.events.emit(OwnershipTransferred(NULL_ACCOUNT, deployer))

    def __repr__(self):
        return f"Registry(name={self._name!r}, address={account_to_hex(self._address)})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def symbol(self) -> str:
        return self._symbol

    @property
    def owner(self) -> PubKeyHash:
        return self._owner

    @property
    def address(self) -> PubKeyHash:
        return self._address

    def connect(self, caller: PubKeyHash) -> "ConnectedRegistry":
        """
        Return a view of this registry on which every call is made by the given caller
        """
        return ConnectedRegistry(self, caller)

    def mint(
        self, to: PubKeyHash, token_uri: str, caller: Optional[PubKeyHash] = None
    ) -> TokenId:
        """
        Mint a new token to the given account and return its id.
        Anyone may mint.
        """
        check_account(to)
        with self._lock.write():
            token_id = self._next_id
            self._items[token_id] = Item(owner=to, token_uri=token_uri)
            self._owned.setdefault(to, []).append(token_id)
            self._next_id = token_id + 1
            self.events.append(Transfer(NULL_ACCOUNT, to, token_id))
        _LOGGER.info(
            f"Minted token {token_id} to {account_to_hex(to)}"
            + (f" (caller {account_to_hex(caller)})" if caller is not None else "")
        )
        self.events.dispatch()
        return token_id

    def set_collection_uri(self, collection_uri: str, caller: PubKeyHash) -> None:
        """
        Overwrite the collection URI. Only the owner of the collection may do this.
        """
        with self._lock.write():
            if caller != self._owner:
                _LOGGER.warning(
                    f"Denied collection URI update by {account_to_hex(caller or b'')}"
                )
                raise Unauthorized(caller)
            self._collection_uri = collection_uri

    def _item(self, token_id: TokenId) -> Item:
        # bool and float keys would hash equal to their int counterparts
        if type(token_id) is not int:
            raise NotFound(token_id)
        try:
            return self._items[token_id]
        except KeyError:
            raise NotFound(token_id)

    def owner_of(self, token_id: TokenId) -> PubKeyHash:
        with self._lock.read():
            return self._item(token_id).owner

    def token_uri(self, token_id: TokenId) -> str:
        with self._lock.read():
            return self._item(token_id).token_uri

    def total_supply(self) -> int:
        with self._lock.read():
            return self._next_id - FIRST_TOKEN_ID

    def collection_uri(self) -> str:
        with self._lock.read():
            return self._collection_uri

    def balance_of(self, account: PubKeyHash) -> int:
        check_account(account)
        with self._lock.read():
            return len(self._owned.get(account, []))

    def tokens_of(self, account: PubKeyHash) -> List[TokenId]:
        check_account(account)
        with self._lock.read():
            return list(self._owned.get(account, []))


class ConnectedRegistry:
    """
    A registry bound to a caller, reads are forwarded unchanged
    """

    def __init__(self, registry: Registry, caller: PubKeyHash):
        self.registry = registry
        self.caller = caller

    def mint(self, to: PubKeyHash, token_uri: str) -> TokenId:
        return self.registry.mint(to, token_uri, caller=self.caller)

    def set_collection_uri(self, collection_uri: str) -> None:
        self.registry.set_collection_uri(collection_uri, caller=self.caller)

    def __getattr__(self, item):
        return getattr(self.registry, item)
