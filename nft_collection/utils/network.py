"""
Network configuration, read from the environment and an optional .env file.
"""
import os

from dotenv import load_dotenv

load_dotenv()

network = os.environ.get("NFT_NETWORK", "localhost")
deployer_wallet = os.environ.get("NFT_DEPLOYER_WALLET", "deployer")
collection_name = os.environ.get("NFT_COLLECTION_NAME", "SchoolProject")
collection_symbol = os.environ.get("NFT_COLLECTION_SYMBOL", "SCHL")
log_level = os.environ.get("NFT_LOG_LEVEL", "INFO").upper()
