"""Connection models."""
from typing import Callable

from pydantic import BaseModel, Field

DEFAULT_API_VERSION = "60.0"


class Connection(BaseModel):
    """A registered target system, as stored."""

    target_id: str
    base_url: str
    api_version: str = DEFAULT_API_VERSION
    access_token: str
    refresh_token: str | None = None
    token_url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def public(self) -> dict:
        """Connection fields safe to return to clients."""
        return self.model_dump(exclude={"access_token", "refresh_token"})


class ConnectionContext(BaseModel):
    """What the remote-write client needs to talk to one target."""

    target_id: str
    base_url: str
    api_version: str = DEFAULT_API_VERSION
    access_token: str = Field(repr=False)
    refresh_hook: Callable[[], str] | None = Field(default=None, exclude=True, repr=False)

    @property
    def api_root(self) -> str:
        return f"{self.base_url.rstrip('/')}/services/data/v{self.api_version}"

    def refresh(self) -> bool:
        """Run the refresh hook and adopt the new token. Returns False when there is no hook."""
        if self.refresh_hook is None:
            return False
        self.access_token = self.refresh_hook()
        return True
