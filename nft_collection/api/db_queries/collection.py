from typing import Optional

from ..db_models import Collection, Item, TransferEvent


def query_collection(address: str) -> Optional[dict]:
    collection = Collection.get_or_none(Collection.address == address)
    if collection is None:
        return None
    return {
        "address": collection.address,
        "name": collection.name,
        "symbol": collection.symbol,
        "owner": collection.owner,
        "collection_uri": collection.collection_uri,
        "indexed_items": collection.items.count(),
    }


def query_items_of_owner(address: str, owner: str):
    """
    Get all indexed tokens of an owner
    :param address: The address of the collection
    :param owner: The hex encoded account of the owner
    :return: A list of tokens ordered by id
    """
    query = (
        Item.select()
        .join(Collection)
        .where(Collection.address == address, Item.owner == owner)
        .order_by(Item.token_id)
    )
    return [
        {"token_id": item.token_id, "token_uri": item.token_uri} for item in query
    ]


def query_transfers(
    address: str, account: Optional[str] = None, limit: int = 100, offset: int = 0
):
    """
    Get the transfer history of a collection, oldest first
    :param address: The address of the collection
    :param account: Only transfers to this hex encoded account
    :param limit: The maximum number of transfers
    :param offset: The number of transfers to skip
    :return: A list of transfers
    """
    query = (
        TransferEvent.select()
        .join(Collection)
        .where(Collection.address == address)
    )
    if account is not None:
        query = query.where(TransferEvent.to_account == account)
    query = query.order_by(TransferEvent.id).limit(limit).offset(offset)
    return [
        {
            "from": transfer.from_account,
            "to": transfer.to_account,
            "token_id": transfer.token_id,
            "indexed_at": transfer.indexed_at.isoformat(),
        }
        for transfer in query
    ]
