"""
Authentication service: orchestrates login and logout.
"""
from typing import Optional
import logging

from marketplace.core.dependencies import require_auth
from marketplace.core.errors import AuthenticationError
from marketplace.core.security import create_access_token, verify_password
from marketplace.core.validation import validate_email, validate_required
from marketplace.db.store import DataStore
from marketplace.models.token import TokenClaims
from marketplace.models.user import User
from marketplace.repositories.session_repository import SessionRepository
from marketplace.repositories.user_repository import UserRepository
from marketplace.schemas.user import UserLoginInput

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, store: DataStore) -> None:
        self._user_repo = UserRepository(store)
        self._session_repo = SessionRepository(store)

    # ------------------------------------------------------------------
    # Login
    # ------------------------------------------------------------------

    def login(self, data: UserLoginInput) -> tuple[str, User]:
        """
        Validate credentials, open a session and return ``(token, user)``.
        Unknown email and wrong password fail with the same error.
        """
        validate_required(data.email, "email")
        validate_required(data.password, "password")
        validate_email(data.email)

        logger.info("Authenticating user '%s'", data.email)
        user = self._user_repo.get_by_email(data.email)

        if not user or not verify_password(data.password, user.hashed_password):
            logger.warning("Invalid login attempt for '%s'", data.email)
            raise AuthenticationError(
                "Invalid credentials",
                details="Invalid email or password",
            )

        token = create_access_token(user)
        self._session_repo.add(token, user.id)
        logger.info("Login successful for user id=%s", user.id)
        return token, user

    # ------------------------------------------------------------------
    # Logout
    # ------------------------------------------------------------------

    def logout(self, identity: Optional[TokenClaims], token: Optional[str]) -> None:
        """Close the caller's session; the token stops authenticating at once."""
        user = require_auth(identity)
        if token:
            self._session_repo.revoke(token)
        logger.info("User id=%s logged out", user.id)
