import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from nft_collection.errors import InvalidAccount, NotFound, Unauthorized
from nft_collection.events import OwnershipTransferred, Transfer
from nft_collection.node import LocalNode, registry_address
from nft_collection.registry import Registry
from nft_collection.utils.keys import NULL_ACCOUNT, get_account

TOKEN_URI = "ipfs://bafybeibbw5uwppsrijcfpj7w6b7q6g66iqzuy5tqwnrv5udcl2ku2vztky"
COLLECTION_URI = "ipfs://QmCollectionMetadata"


def test_name_and_symbol(registry):
    assert registry.name == "SchoolProject"
    assert registry.symbol == "SCHL"


def test_owner_is_deployer(registry, owner):
    assert registry.owner == owner


def test_initial_state(registry):
    assert registry.total_supply() == 0
    assert registry.collection_uri() == ""


def test_construction_emits_ownership_transferred(registry, owner):
    assert list(registry.events) == [OwnershipTransferred(NULL_ACCOUNT, owner)]


def test_null_deployer_rejected():
    with pytest.raises(InvalidAccount):
        Registry(
            NULL_ACCOUNT, "SchoolProject", "SCHL", registry_address(get_account("x"), 0)
        )


def test_null_address_rejected(owner):
    with pytest.raises(InvalidAccount):
        Registry(owner, "SchoolProject", "SCHL", NULL_ACCOUNT)


def test_address_is_never_null(registry):
    assert registry.address != NULL_ACCOUNT
    assert len(registry.address) == 28


def test_mint_assigns_token(registry, addr1):
    token_id = registry.mint(addr1, TOKEN_URI)

    assert token_id == 1
    assert registry.owner_of(1) == addr1
    assert registry.token_uri(1) == TOKEN_URI
    assert registry.total_supply() == 1


def test_mint_emits_transfer(registry, addr1):
    registry.mint(addr1, TOKEN_URI)

    assert registry.events.filter(Transfer) == [Transfer(NULL_ACCOUNT, addr1, 1)]


def test_each_mint_emits_exactly_one_transfer(registry, addr1, addr2):
    received = []
    registry.events.subscribe(received.append, Transfer)

    registry.mint(addr1, "ipfs://a")
    assert received == [Transfer(NULL_ACCOUNT, addr1, 1)]
    registry.mint(addr2, "ipfs://b")
    assert received == [
        Transfer(NULL_ACCOUNT, addr1, 1),
        Transfer(NULL_ACCOUNT, addr2, 2),
    ]


def test_token_uris_are_independent(registry, addr1, addr2):
    registry.mint(addr1, "ipfs://first")
    registry.mint(addr2, "ipfs://second")

    assert registry.token_uri(1) == "ipfs://first"
    assert registry.token_uri(2) == "ipfs://second"
    assert registry.owner_of(1) == addr1
    assert registry.owner_of(2) == addr2


def test_same_uri_minted_twice(registry, addr1, addr2):
    registry.mint(addr1, TOKEN_URI)
    registry.mint(addr2, TOKEN_URI)

    assert registry.token_uri(1) == TOKEN_URI
    assert registry.token_uri(2) == TOKEN_URI
    assert registry.total_supply() == 2


@pytest.mark.parametrize("token_id", [0, -1, 1, 2, 999])
def test_unknown_token_not_found(registry, token_id):
    with pytest.raises(NotFound) as exc_info:
        registry.owner_of(token_id)
    assert exc_info.value.key == token_id
    with pytest.raises(NotFound):
        registry.token_uri(token_id)


@pytest.mark.parametrize("token_id", [True, 1.0, "1", None])
def test_non_integer_token_not_found(registry, addr1, token_id):
    registry.mint(addr1, TOKEN_URI)
    with pytest.raises(NotFound):
        registry.owner_of(token_id)
    with pytest.raises(NotFound):
        registry.token_uri(token_id)


def test_token_after_last_minted_not_found(registry, addr1):
    registry.mint(addr1, TOKEN_URI)
    with pytest.raises(NotFound):
        registry.owner_of(2)


def test_mint_to_null_account_rejected(registry):
    with pytest.raises(InvalidAccount):
        registry.mint(NULL_ACCOUNT, TOKEN_URI)
    assert registry.total_supply() == 0
    assert registry.events.filter(Transfer) == []


def test_mint_to_malformed_account_rejected(registry):
    with pytest.raises(InvalidAccount):
        registry.mint(b"\x01" * 3, TOKEN_URI)
    with pytest.raises(InvalidAccount):
        registry.mint("alice", TOKEN_URI)
    assert registry.total_supply() == 0


def test_anyone_may_mint(registry, addr1, addr2):
    token_id = registry.connect(addr1).mint(addr2, TOKEN_URI)
    assert registry.owner_of(token_id) == addr2


def test_owner_sets_collection_uri(registry, owner):
    registry.set_collection_uri(COLLECTION_URI, caller=owner)
    assert registry.collection_uri() == COLLECTION_URI


def test_only_owner_sets_collection_uri(registry, owner, addr1):
    with pytest.raises(Unauthorized, match="caller is not the owner") as exc_info:
        registry.connect(addr1).set_collection_uri(COLLECTION_URI)
    assert exc_info.value.caller == addr1
    assert registry.collection_uri() == ""

    registry.connect(owner).set_collection_uri(COLLECTION_URI)
    assert registry.collection_uri() == COLLECTION_URI


def test_failed_collection_uri_update_keeps_value(registry, owner, addr1):
    registry.set_collection_uri("ipfs://old", caller=owner)
    events_before = len(registry.events)

    with pytest.raises(Unauthorized):
        registry.set_collection_uri("ipfs://new", caller=addr1)
    with pytest.raises(Unauthorized):
        registry.set_collection_uri("ipfs://new", caller=None)

    assert registry.collection_uri() == "ipfs://old"
    assert len(registry.events) == events_before


def test_collection_uri_stored_exactly(registry, owner):
    uri = "ipfs://Qmäöü/ metadata.json?x=1 "
    registry.set_collection_uri(uri, caller=owner)
    assert registry.collection_uri() == uri
    registry.set_collection_uri("", caller=owner)
    assert registry.collection_uri() == ""


def test_balance_and_tokens_of(registry, addr1, addr2):
    registry.mint(addr1, "ipfs://1")
    registry.mint(addr2, "ipfs://2")
    registry.mint(addr1, "ipfs://3")

    assert registry.balance_of(addr1) == 2
    assert registry.tokens_of(addr1) == [1, 3]
    assert registry.balance_of(addr2) == 1
    assert registry.balance_of(get_account("carol")) == 0
    with pytest.raises(InvalidAccount):
        registry.balance_of(NULL_ACCOUNT)


def test_connected_registry_forwards_reads(registry, addr1):
    connected = registry.connect(addr1)
    connected.mint(addr1, TOKEN_URI)
    assert connected.name == "SchoolProject"
    assert connected.owner_of(1) == addr1
    assert connected.total_supply() == 1


@given(st.lists(st.sampled_from(["alice", "bob", "carol"]), max_size=30))
@settings(max_examples=25)
def test_ids_strictly_increasing_without_gaps(wallets):
    registry = LocalNode("SchoolProject", "SCHL").deploy(get_account("deployer"))
    ids = [
        registry.mint(get_account(wallet), f"ipfs://{i}")
        for i, wallet in enumerate(wallets)
    ]
    assert ids == list(range(1, len(wallets) + 1))
    assert registry.total_supply() == len(wallets)
    for i, (token_id, wallet) in enumerate(zip(ids, wallets)):
        assert registry.owner_of(token_id) == get_account(wallet)
        assert registry.token_uri(token_id) == f"ipfs://{i}"
    assert [t.token_id for t in registry.events.filter(Transfer)] == ids
