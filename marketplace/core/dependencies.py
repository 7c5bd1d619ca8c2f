"""
Authentication guard and FastAPI dependency helpers.

A missing or unusable bearer token never rejects a request on its own: it only
leaves the caller anonymous. Operations that need an identity call
``require_auth`` / ``require_ownership`` themselves.
"""
from typing import Optional
import logging

from jose import JWTError
from starlette.requests import HTTPConnection

from marketplace.core.errors import ForbiddenError, UnauthenticatedError
from marketplace.core.security import decode_token
from marketplace.db.store import DataStore
from marketplace.models.token import TokenClaims
from marketplace.repositories.session_repository import SessionRepository
from marketplace.services.event_bus import EventBus

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


# ---------------------------------------------------------------------------
# Guard
# ---------------------------------------------------------------------------

def authenticate(token: Optional[str], store: DataStore) -> Optional[TokenClaims]:
    """
    Return the identity embedded in *token*, or None.

    The token must carry a valid signature, must not be expired, and must still
    belong to an open session (logout closes it).
    """
    if not token:
        return None
    try:
        payload = decode_token(token)
        claims = TokenClaims.from_payload(payload)
    except JWTError as exc:
        logger.warning("Rejected bearer token: %s", exc)
        return None
    except (KeyError, TypeError, ValueError):
        logger.warning("Bearer token is missing identity claims")
        return None

    if not SessionRepository(store).is_active(token):
        logger.warning("Bearer token for user id=%s has no active session", claims.id)
        return None
    logger.debug("Authenticated user id=%s", claims.id)
    return claims


def require_auth(identity: Optional[TokenClaims]) -> TokenClaims:
    """Return *identity* or raise when the caller is anonymous."""
    if identity is None:
        raise UnauthenticatedError(
            "Authentication required",
            details="You must be logged in to perform this action",
        )
    return identity


def require_ownership(identity: Optional[TokenClaims], owner_id: int) -> TokenClaims:
    """Require an identity whose id equals *owner_id*."""
    user = require_auth(identity)
    if user.id != owner_id:
        logger.warning("User id=%s denied access to resource owned by id=%s", user.id, owner_id)
        raise ForbiddenError(
            "Access denied",
            details="You can only access your own resources",
        )
    return user


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Pull the token out of an ``Authorization: Bearer <token>`` header value."""
    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


# ---------------------------------------------------------------------------
# Request dependencies
# ---------------------------------------------------------------------------

def store_dependency(connection: HTTPConnection) -> DataStore:
    """Return the store owned by the running application."""
    return connection.app.state.store


def event_bus_dependency(connection: HTTPConnection) -> EventBus:
    return connection.app.state.event_bus


def bearer_token_dependency(connection: HTTPConnection) -> Optional[str]:
    return extract_bearer_token(connection.headers.get("authorization"))
