"""
User management service: registration, retrieval, profile update and deletion.

Business rules enforced here:
- Emails are unique across all users.
- Only the account holder may update or delete their account.
- Deleting an account removes the user's listings and orders and closes
  every session they hold.
"""
from typing import Optional
import logging

from marketplace.core.errors import ConflictError, InternalError, NotFoundError
from marketplace.core.dependencies import require_ownership
from marketplace.core.security import hash_password
from marketplace.core.validation import (
    validate_email,
    validate_password,
    validate_required,
    validate_username,
)
from marketplace.db.store import DataStore, DuplicateRecordError
from marketplace.models.token import TokenClaims
from marketplace.models.user import User
from marketplace.repositories.listing_repository import ListingRepository
from marketplace.repositories.order_repository import OrderRepository
from marketplace.repositories.session_repository import SessionRepository
from marketplace.repositories.user_repository import UserRepository
from marketplace.schemas.user import UserCreateInput, UserUpdateInput

logger = logging.getLogger(__name__)


def _duplicate_email() -> ConflictError:
    return ConflictError(
        "Email already exists",
        field="email",
        reason="A user with this email already exists",
    )


class UserService:
    def __init__(self, store: DataStore) -> None:
        self._repo = UserRepository(store)
        self._listing_repo = ListingRepository(store)
        self._order_repo = OrderRepository(store)
        self._session_repo = SessionRepository(store)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_user(self, user_id: int) -> User:
        """Return a user or raise NOT_FOUND."""
        logger.info("Fetching user id=%s", user_id)
        user = self._repo.get_by_id(user_id)
        if not user:
            logger.warning("User id=%s not found", user_id)
            raise NotFoundError.for_entity("User", user_id)
        return user

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def register_user(self, data: UserCreateInput) -> User:
        logger.info("Registering user %s", data.username)
        validate_required(data.username, "username")
        validate_required(data.email, "email")
        validate_required(data.password, "password")
        validate_username(data.username)
        validate_email(data.email)
        validate_password(data.password)

        if self._repo.get_by_email(data.email):
            logger.warning("Duplicate email registration attempt: %s", data.email)
            raise _duplicate_email()

        try:
            user = self._repo.create(
                username=data.username,
                email=data.email,
                hashed_password=hash_password(data.password),
            )
        except DuplicateRecordError:
            # lost a race with a parallel registration between check and insert
            logger.warning("Duplicate email registration attempt: %s", data.email)
            raise _duplicate_email()
        logger.info("User registered id=%s", user.id)
        return user

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_user(
        self,
        user_id: int,
        data: UserUpdateInput,
        identity: Optional[TokenClaims],
    ) -> User:
        logger.info("Updating user id=%s", user_id)
        require_ownership(identity, user_id)
        self.get_user(user_id)

        updates: dict = {}

        if data.username:
            validate_username(data.username)
            updates["username"] = data.username

        if data.email:
            validate_email(data.email)
            existing = self._repo.get_by_email(data.email)
            if existing and existing.id != user_id:
                logger.warning("Duplicate email update attempt: %s", data.email)
                raise _duplicate_email()
            updates["email"] = data.email

        if data.password:
            validate_password(data.password)
            updates["hashed_password"] = hash_password(data.password)

        try:
            updated_user = self._repo.update(user_id, **updates)
        except DuplicateRecordError:
            logger.warning("Duplicate email update attempt: %s", data.email)
            raise _duplicate_email()
        if updated_user is None:
            raise NotFoundError.for_entity("User", user_id)
        logger.info("User updated id=%s", user_id)
        return updated_user

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_user(self, user_id: int, identity: Optional[TokenClaims]) -> None:
        logger.info("Deleting user id=%s", user_id)
        require_ownership(identity, user_id)
        self.get_user(user_id)

        if not self._repo.delete(user_id):
            logger.error("User id=%s vanished during deletion", user_id)
            raise InternalError(
                "Failed to delete user",
                details="An error occurred while deleting the user",
            )
        self._listing_repo.delete_by_owner(user_id)
        self._order_repo.delete_by_buyer(user_id)
        self._session_repo.revoke_all_for_user(user_id)
        logger.info("User deleted id=%s", user_id)
