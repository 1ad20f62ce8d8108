from peewee import *

# initialized by init_db, so that the server and tests can choose the file
sqlite_db = SqliteDatabase(None)

PRAGMAS = {
    "journal_mode": "wal",
    "foreign_keys": 1,
    "ignore_check_constraints": 0,
}


class BaseModel(Model):
    class Meta:
        database = sqlite_db


# hex encoded 28 byte key hash
AccountField = lambda **kwargs: CharField(max_length=56, **kwargs)
