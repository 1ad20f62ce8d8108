"""
Deploy an NFT collection on the local node.

    python -m nft_collection.deploy --wallet deployer --collection-uri ipfs://...
"""
import logging
import sys
from typing import Optional

import click

from .errors import RegistryError
from .node import LocalNode
from .registry import Registry
from .utils import network
from .utils.keys import account_to_hex

_LOGGER = logging.getLogger(__name__)


def deploy(
    wallet: str = network.deployer_wallet,
    name: str = network.collection_name,
    symbol: str = network.collection_symbol,
    collection_uri: Optional[str] = None,
    node: Optional[LocalNode] = None,
) -> Registry:
    if node is None:
        node = LocalNode(name, symbol)
    deployer = node.account(wallet)
    click.echo(f"Deploying contracts with the account: {account_to_hex(deployer)}")

    registry = node.deploy(deployer, name, symbol)
    click.echo(f"NFTCollection deployed to: {account_to_hex(registry.address)}")

    if collection_uri:
        registry.connect(deployer).set_collection_uri(collection_uri)
        click.echo(f"Collection URI set to: {registry.collection_uri()}")
    return registry


@click.command()
@click.option(
    "--wallet",
    default=network.deployer_wallet,
    show_default=True,
    help="Name of the devnet wallet that deploys and owns the collection",
)
@click.option("--name", default=network.collection_name, show_default=True)
@click.option("--symbol", default=network.collection_symbol, show_default=True)
@click.option("--collection-uri", default=None, help="Initial collection URI")
@click.option("--log-level", default=network.log_level, show_default=True)
def main(
    wallet: str,
    name: str,
    symbol: str,
    collection_uri: Optional[str],
    log_level: str,
):
    """
    Deploy a new NFT collection.
    """
    logging.basicConfig(level=log_level.upper())
    try:
        deploy(wallet, name, symbol, collection_uri)
    except RegistryError as e:
        _LOGGER.error(f"Deployment failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
