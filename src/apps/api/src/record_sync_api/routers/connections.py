"""Target connection endpoints."""
from fastapi import APIRouter
from pydantic import BaseModel, Field

from record_sync_core.connections import Connection, list_connections, save_connection
from record_sync_core.connections.models import DEFAULT_API_VERSION

router = APIRouter(prefix="/connections", tags=["connections"])


class ConnectionCreate(BaseModel):
    """Request to register a target connection."""

    target_id: str = Field(..., min_length=1)
    base_url: str = Field(..., min_length=1)
    api_version: str = DEFAULT_API_VERSION
    access_token: str = Field(..., min_length=1)
    refresh_token: str | None = None
    token_url: str | None = None


@router.post("")
def register_connection(body: ConnectionCreate):
    """Register or replace a target connection."""
    saved = save_connection(Connection(**body.model_dump()))
    return saved.public()


@router.get("")
def get_connections():
    """List registered connections. Tokens are never returned."""
    return {"connections": [c.public() for c in list_connections()]}
