"""
Mirrors the notifications of a registry into the database.

The indexer is a passive subscriber: the registry does not wait for it and a
failure while indexing never affects the registry.
"""
import logging
import threading
from typing import Optional

from ..events import Transfer
from ..registry import Registry
from ..utils.keys import account_to_hex
from .db_models import Collection, Item, TransferEvent, sqlite_db

_LOGGER = logging.getLogger(__name__)


def add_collection(registry: Registry) -> Collection:
    """
    Store the registry in the database.
    """
    collection, created = Collection.get_or_create(
        address=account_to_hex(registry.address),
        defaults={
            "name": registry.name,
            "symbol": registry.symbol,
            "owner": account_to_hex(registry.owner),
            "collection_uri": registry.collection_uri(),
        },
    )
    return collection


class RegistryIndexer:
    def __init__(self, registry: Registry):
        self.registry = registry
        self.collection: Optional[Collection] = None
        self._handle: Optional[int] = None
        self._sync_lock = threading.Lock()

    def attach(self) -> "RegistryIndexer":
        """
        Start mirroring the registry. Tokens minted before attaching are
        caught up from the registry itself.
        """
        with sqlite_db.atomic():
            self.collection = add_collection(self.registry)
        self._handle = self.registry.events.subscribe(
            self.process_event, Transfer, replay=True
        )
        _LOGGER.info(
            f"Indexing {self.registry.name} at {account_to_hex(self.registry.address)}"
        )
        return self

    def detach(self) -> None:
        if self._handle is not None:
            self.registry.events.unsubscribe(self._handle)
            self._handle = None

    def process_event(self, event: Transfer) -> None:
        """
        Process a transfer and update the database accordingly.
        """
        with sqlite_db.atomic():
            item, created = Item.get_or_create(
                collection=self.collection,
                token_id=event.token_id,
                defaults={
                    "owner": account_to_hex(event.to_account),
                    "token_uri": self.registry.token_uri(event.token_id),
                },
            )
            if not created:
                # already mirrored while catching up
                return
            TransferEvent.create(
                collection=self.collection,
                item=item,
                from_account=account_to_hex(event.from_account),
                to_account=account_to_hex(event.to_account),
                token_id=event.token_id,
            )
        _LOGGER.debug(f"Indexed transfer of token {event.token_id}")

    def sync_collection(self) -> None:
        """
        Mirror the current collection URI.
        Reading the registry and writing the row happen under one lock, so the
        last sync always stores the value the registry holds at that time.
        """
        with self._sync_lock:
            collection_uri = self.registry.collection_uri()
            Collection.update(collection_uri=collection_uri).where(
                Collection.id == self.collection.id
            ).execute()
