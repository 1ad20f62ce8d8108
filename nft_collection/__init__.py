"""
A minimal NFT collection registry with a local development node,
a deployment script, an event indexer and an HTTP node API.
"""

__version__ = "0.1.0"
