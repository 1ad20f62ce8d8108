"""
The local development node.

Holds every registry deployed in this process and hands out their addresses.
An address is the hash of the deployer and the deployment nonce of the node,
so repeated deployments, even by the same account, never collide.
"""
import logging
import threading
from typing import Dict, List, Optional

from .errors import NotFound
from .registry import Registry
from .utils import network
from .utils.keys import PubKeyHash, account_to_hex, check_account, get_account, key_hash

_LOGGER = logging.getLogger(__name__)


def registry_address(deployer: PubKeyHash, nonce: int) -> PubKeyHash:
    return key_hash(deployer + nonce.to_bytes(8, "big"))


class LocalNode:
    def __init__(
        self,
        name: str = network.collection_name,
        symbol: str = network.collection_symbol,
    ):
        self.name = name
        self.symbol = symbol
        self._nonce = 0
        self._lock = threading.Lock()
        self._registries: Dict[PubKeyHash, Registry] = {}

    def account(self, wallet: str) -> PubKeyHash:
        return get_account(wallet)

    def deploy(
        self,
        deployer: PubKeyHash,
        name: Optional[str] = None,
        symbol: Optional[str] = None,
    ) -> Registry:
        """
        Deploy a new registry owned by the deployer
        """
        check_account(deployer)
        with self._lock:
            address = registry_address(deployer, self._nonce)
            registry = Registry(
                deployer,
                name if name is not None else self.name,
                symbol if symbol is not None else self.symbol,
                address=address,
            )
            self._nonce += 1
            self._registries[address] = registry
        _LOGGER.info(
            f"Deployed {registry.name} ({registry.symbol}) to {account_to_hex(address)}"
            f" on {network.network}"
        )
        return registry

    def registry(self, address: PubKeyHash) -> Registry:
        try:
            with self._lock:
                return self._registries[address]
        except KeyError:
            raise NotFound(
                address, f"no registry deployed at {account_to_hex(address)}"
            )

    @property
    def registries(self) -> List[PubKeyHash]:
        with self._lock:
            return list(self._registries)
