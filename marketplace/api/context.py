"""
Per-request GraphQL context.
Built by a FastAPI dependency, so it works for both HTTP and websocket requests.

Browsers cannot set headers on a websocket, so subscription clients may send the
bearer credential in the ``connection_init`` payload instead, e.g.
``{"Authorization": "Bearer <token>"}``. Strawberry stores that payload on
``connection_params`` after the context is built, which is why the identity is
resolved on access rather than up front.
"""
from typing import Any, Optional

from fastapi import Depends
from strawberry.fastapi import BaseContext

from marketplace.core.dependencies import (
    authenticate,
    bearer_token_dependency,
    event_bus_dependency,
    extract_bearer_token,
    store_dependency,
)
from marketplace.db.store import DataStore
from marketplace.models.token import TokenClaims
from marketplace.services.event_bus import EventBus


def token_from_connection_params(params: Any) -> Optional[str]:
    """Pull a bearer token out of a websocket ``connection_init`` payload."""
    if not isinstance(params, dict):
        return None
    for key, value in params.items():
        if key.lower() == "authorization" and isinstance(value, str):
            return extract_bearer_token(value)
    return None


class MarketplaceContext(BaseContext):
    def __init__(
        self,
        store: DataStore,
        event_bus: EventBus,
        token: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.store = store
        self.event_bus = event_bus
        self._header_token = token

    @property
    def token(self) -> Optional[str]:
        """The header token, falling back to the websocket init payload."""
        return self._header_token or token_from_connection_params(self.connection_params)

    @property
    def identity(self) -> Optional[TokenClaims]:
        # checked on every access so a logout takes effect on open connections too
        return authenticate(self.token, self.store)


def get_context(
    store: DataStore = Depends(store_dependency),
    event_bus: EventBus = Depends(event_bus_dependency),
    token: Optional[str] = Depends(bearer_token_dependency),
) -> MarketplaceContext:
    """Attach the caller's credential (if any) to every operation."""
    return MarketplaceContext(store=store, event_bus=event_bus, token=token)
