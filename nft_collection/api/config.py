import os

from ..utils import network

db_path = os.environ.get("NFT_DB_PATH", "nft_collection.db")
debug_sql = os.environ.get("NFT_DEBUG_SQL", "").lower() in ("1", "true", "yes")

deployer_wallet = network.deployer_wallet
collection_name = network.collection_name
collection_symbol = network.collection_symbol
