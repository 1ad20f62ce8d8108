import pytest

from nft_collection.node import LocalNode
from nft_collection.utils.keys import get_account

COLLECTION_NAME = "SchoolProject"
COLLECTION_SYMBOL = "SCHL"


@pytest.fixture
def owner():
    return get_account("deployer")


@pytest.fixture
def addr1():
    return get_account("alice")


@pytest.fixture
def addr2():
    return get_account("bob")


@pytest.fixture
def registry(owner):
    return LocalNode(COLLECTION_NAME, COLLECTION_SYMBOL).deploy(owner)
