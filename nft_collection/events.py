"""
Notifications emitted by a registry.

Events are appended to an ordered log and then delivered to any number of
passive subscribers. Delivery is one-way: a subscriber cannot influence the
registry, and a subscriber that fails is logged and skipped.
"""
import itertools
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Tuple, Type

from .utils.keys import PubKeyHash, account_to_hex

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Event(ABC):
    @abstractmethod
    def as_dict(self) -> dict:
        """
        JSON friendly representation, accounts are hex encoded
        """


@dataclass(frozen=True)
class Transfer(Event):
    """
    Emitted once per mint, from the null account to the recipient
    """

    from_account: PubKeyHash
    to_account: PubKeyHash
    token_id: int

    def as_dict(self) -> dict:
        return {
            "event": "Transfer",
            "from": account_to_hex(self.from_account),
            "to": account_to_hex(self.to_account),
            "token_id": self.token_id,
        }


@dataclass(frozen=True)
class OwnershipTransferred(Event):
    """
    Emitted when the owner of the collection is set, i.e. at construction
    """

    previous_owner: PubKeyHash
    new_owner: PubKeyHash

    def as_dict(self) -> dict:
        return {
            "event": "OwnershipTransferred",
            "previous_owner": account_to_hex(self.previous_owner),
            "new_owner": account_to_hex(self.new_owner),
        }


Subscriber = Callable[[Event], None]


class EventLog:
    """
    Append-only log of the events of one registry with publish/subscribe on top.

    Events are appended while the registry holds its write lock and delivered
    afterwards, strictly in log order, so subscribers may read from the
    registry they are subscribed to.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._dispatch_lock = threading.RLock()
        self._events: List[Event] = []
        self._delivered = 0
        self._subscribers: Dict[int, Tuple[Subscriber, Optional[Type[Event]]]] = {}
        self._handles = itertools.count(1)

    def subscribe(
        self,
        callback: Subscriber,
        event_type: Optional[Type[Event]] = None,
        replay: bool = False,
    ) -> int:
        """
        Register a callback for all events or only for the given event type.
        With replay, the callback first receives every event delivered so far,
        so that together with the live events it sees the whole log in order.
        Errors raised while replaying propagate and nothing is registered.
        Returns a handle that can be passed to unsubscribe.
        """
        # no dispatch can interleave between the replay and the registration
        with self._dispatch_lock:
            if replay:
                with self._lock:
                    delivered = self._events[: self._delivered]
                for event in delivered:
                    if event_type is None or isinstance(event, event_type):
                        callback(event)
            with self._lock:
                handle = next(self._handles)
                self._subscribers[handle] = (callback, event_type)
        return handle

    def unsubscribe(self, handle: int) -> None:
        with self._lock:
            self._subscribers.pop(handle, None)

    def append(self, event: Event) -> None:
        with self._lock:
            self._events.append(event)

    def dispatch(self) -> None:
        """
        Deliver all events that have not been delivered yet
        """
        with self._dispatch_lock:
            while True:
                with self._lock:
                    if self._delivered >= len(self._events):
                        return
                    event = self._events[self._delivered]
                    self._delivered += 1
                    subscribers = list(self._subscribers.values())
                for callback, event_type in subscribers:
                    if event_type is not None and not isinstance(event, event_type):
                        continue
                    try:
                        callback(event)
                    except Exception:
                        _LOGGER.exception(
                            f"Subscriber {callback!r} failed to handle {event}"
                        )

    def emit(self, event: Event) -> None:
        self.append(event)
        self.dispatch()

    def filter(self, event_type: Type[Event]) -> List[Event]:
        with self._lock:
            return [e for e in self._events if isinstance(e, event_type)]

    def __iter__(self) -> Iterator[Event]:
        with self._lock:
            return iter(list(self._events))

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
