"""
The node API.

Hosts one live registry, deployed at startup by the configured deployer
wallet, and mirrors its notifications into the database. Mutating calls are
serialized by the registry itself; reads run concurrently.

The caller of a request is taken from the X-Caller header (hex encoded
account) or, for devnet wallets, the X-Wallet header (wallet name).
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

import click
import pydantic
import uvicorn
from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from . import config
from .db_models import init_db, sqlite_db
from .db_queries import collection as collection_queries
from .event_processor import RegistryIndexer
from ..errors import InvalidAccount, NotFound, Unauthorized
from ..node import LocalNode
from ..registry import Registry
from ..utils.keys import PubKeyHash, account_from_hex, account_to_hex, get_account

# logger setup
_LOGGER = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db(config.db_path, debug_sql=config.debug_sql)
    node = LocalNode(config.collection_name, config.collection_symbol)
    registry = node.deploy(get_account(config.deployer_wallet))
    indexer = RegistryIndexer(registry).attach()
    app.state.node = node
    app.state.registry = registry
    app.state.indexer = indexer
    yield
    indexer.detach()
    sqlite_db.close()


app = FastAPI(
    default_response_class=ORJSONResponse,
    title="NFT Collection Node API.",
    description="The NFT Collection Node API hosts a registry of non-fungible tokens and serves its state and history.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return ORJSONResponse({"detail": str(exc)}, status_code=404)


@app.exception_handler(Unauthorized)
async def unauthorized_handler(request: Request, exc: Unauthorized):
    return ORJSONResponse({"detail": str(exc)}, status_code=403)


@app.exception_handler(InvalidAccount)
async def invalid_account_handler(request: Request, exc: InvalidAccount):
    return ORJSONResponse({"detail": str(exc)}, status_code=400)


def get_registry(request: Request) -> Registry:
    return request.app.state.registry


def get_caller(
    x_caller: Optional[str] = Header(None),
    x_wallet: Optional[str] = Header(None),
) -> Optional[PubKeyHash]:
    if x_caller:
        return account_from_hex(x_caller)
    if x_wallet:
        return get_account(x_wallet)
    return None


def require_caller(caller: Optional[PubKeyHash] = Depends(get_caller)) -> PubKeyHash:
    if caller is None:
        raise HTTPException(
            status_code=401, detail="Missing caller, set X-Caller or X-Wallet"
        )
    return caller


class MintRequest(pydantic.BaseModel):
    to: str
    token_uri: str


class CollectionURIRequest(pydantic.BaseModel):
    collection_uri: str


#################################################################################################
#                                            Endpoints                                          #
#################################################################################################

LimitQuery = Query(
    default=100,
    ge=1,
    le=1000,
    description="Maximum number of results",
    examples=[10, 100],
)
OffsetQuery = Query(
    default=0,
    ge=0,
    description="Number of results to skip",
    examples=[0, 100],
)
AccountQuery = Query(
    default=None,
    description="Hex encoded account (28 bytes)",
    examples=["dcbc64ce3cc4aeac225a45dd67dfc3717f732f6303556efb6dd8024f"],
)


@app.get("/api/v1/health")
def health(registry: Registry = Depends(get_registry)):
    return ORJSONResponse(
        {
            "status": "ok",
            "address": account_to_hex(registry.address),
        }
    )


@app.get("/api/v1/collection")
def collection(registry: Registry = Depends(get_registry)):
    """
    Get the state of the hosted collection
    """
    return ORJSONResponse(
        {
            "address": account_to_hex(registry.address),
            "name": registry.name,
            "symbol": registry.symbol,
            "owner": account_to_hex(registry.owner),
            "collection_uri": registry.collection_uri(),
            "total_supply": registry.total_supply(),
        }
    )


@app.get("/api/v1/collection/indexed")
def indexed_collection(registry: Registry = Depends(get_registry)):
    """
    Get the collection as mirrored in the database
    """
    result = collection_queries.query_collection(account_to_hex(registry.address))
    if result is None:
        raise HTTPException(status_code=404, detail="Collection is not indexed")
    return ORJSONResponse(result)


@app.get("/api/v1/tokens/{token_id}")
def token(token_id: int, registry: Registry = Depends(get_registry)):
    """
    Get owner and token URI of a token
    """
    return ORJSONResponse(
        {
            "token_id": token_id,
            "owner": account_to_hex(registry.owner_of(token_id)),
            "token_uri": registry.token_uri(token_id),
        }
    )


@app.get("/api/v1/tokens/{token_id}/owner")
def token_owner(token_id: int, registry: Registry = Depends(get_registry)):
    return ORJSONResponse(
        {"token_id": token_id, "owner": account_to_hex(registry.owner_of(token_id))}
    )


@app.get("/api/v1/tokens/{token_id}/uri")
def token_uri(token_id: int, registry: Registry = Depends(get_registry)):
    return ORJSONResponse(
        {"token_id": token_id, "token_uri": registry.token_uri(token_id)}
    )


@app.get("/api/v1/accounts/{account}/tokens")
def account_tokens(account: str, registry: Registry = Depends(get_registry)):
    """
    Get the tokens held by an account
    """
    owner = account_from_hex(account)
    tokens = registry.tokens_of(owner)
    return ORJSONResponse(
        {"account": account_to_hex(owner), "balance": len(tokens), "tokens": tokens}
    )


@app.get("/api/v1/accounts/{account}/tokens/indexed")
def indexed_account_tokens(account: str, registry: Registry = Depends(get_registry)):
    """
    Get the tokens of an account as mirrored in the database
    """
    owner = account_to_hex(account_from_hex(account))
    return ORJSONResponse(
        collection_queries.query_items_of_owner(
            account_to_hex(registry.address), owner
        )
    )


@app.get("/api/v1/events")
def events(
    limit: int = LimitQuery,
    offset: int = OffsetQuery,
    registry: Registry = Depends(get_registry),
):
    """
    Get the notifications emitted by the registry, oldest first
    """
    selected = list(registry.events)[offset : offset + limit]
    return ORJSONResponse([event.as_dict() for event in selected])


@app.get("/api/v1/transfers")
def transfers(
    account: Optional[str] = AccountQuery,
    limit: int = LimitQuery,
    offset: int = OffsetQuery,
    registry: Registry = Depends(get_registry),
):
    """
    Get the indexed transfer history of the collection, oldest first
    """
    if account is not None:
        account = account_to_hex(account_from_hex(account))
    return ORJSONResponse(
        collection_queries.query_transfers(
            account_to_hex(registry.address), account, limit, offset
        )
    )


@app.post("/api/v1/mint")
def mint(
    request: MintRequest,
    caller: PubKeyHash = Depends(require_caller),
    registry: Registry = Depends(get_registry),
):
    """
    Mint a new token to the given account
    """
    to = account_from_hex(request.to)
    token_id = registry.mint(to, request.token_uri, caller=caller)
    return ORJSONResponse(
        {
            "token_id": token_id,
            "owner": account_to_hex(to),
            "token_uri": request.token_uri,
        }
    )


@app.post("/api/v1/collection/uri")
def set_collection_uri(
    request: CollectionURIRequest,
    http_request: Request,
    caller: PubKeyHash = Depends(require_caller),
    registry: Registry = Depends(get_registry),
):
    """
    Update the collection URI, only allowed for the owner of the collection
    """
    registry.set_collection_uri(request.collection_uri, caller=caller)
    http_request.app.state.indexer.sync_collection()
    return ORJSONResponse({"collection_uri": registry.collection_uri()})


@click.command()
@click.option("--host", default="127.0.0.1", help="Interface to bind to")
@click.option("--port", default=8000, type=int, help="Port to listen on")
def main(host: str, port: int):
    """
    Start the node API.
    """
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
