import pytest

from nft_collection.api.db_models import init_db, sqlite_db


@pytest.fixture
def db(tmp_path):
    database = init_db(str(tmp_path / "nft_collection_test.db"))
    yield database
    sqlite_db.close()
