import datetime

from .db import *


class Collection(BaseModel):
    """
    Mirrors a deployed registry
    """

    address = AccountField(unique=True, index=True)
    name = CharField()
    symbol = CharField()
    owner = AccountField()
    collection_uri = TextField(default="")


class Item(BaseModel):
    """
    Mirrors a minted token
    """

    collection = ForeignKeyField(Collection, backref="items", on_delete="CASCADE")
    token_id = IntegerField()
    owner = AccountField(index=True)
    token_uri = TextField()

    class Meta:
        indexes = ((("collection", "token_id"), True),)


class TransferEvent(BaseModel):
    """
    One Transfer notification, in the order the registry emitted them
    """

    collection = ForeignKeyField(
        Collection, backref="transfers", on_delete="CASCADE"
    )
    item = ForeignKeyField(Item, backref="transfers", on_delete="CASCADE")
    from_account = AccountField()
    to_account = AccountField(index=True)
    token_id = IntegerField()
    indexed_at = DateTimeField(default=datetime.datetime.now)
