import logging

from .db import sqlite_db, PRAGMAS, BaseModel
from .collection import Collection, Item, TransferEvent

MODELS = [Collection, Item, TransferEvent]


def init_db(path: str, debug_sql: bool = False):
    """
    Point the models at the given database file and create missing tables.
    """
    if debug_sql:
        logger = logging.getLogger("peewee")
        logger.addHandler(logging.StreamHandler())
        logger.setLevel(logging.DEBUG)
    if not sqlite_db.is_closed():
        sqlite_db.close()
    sqlite_db.init(path, pragmas=PRAGMAS)
    sqlite_db.create_tables(MODELS)
    return sqlite_db
