"""
Repository layer for User records.
All access to the `users` table lives here.
"""
from typing import Optional
import logging

from marketplace.core.logging_config import log_store_timing
from marketplace.db.store import DataStore
from marketplace.models.user import User

logger = logging.getLogger(__name__)


class UserRepository:
    """Data access layer for user records."""

    def __init__(self, store: DataStore) -> None:
        self._table = store.users

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_store_timing
    def get_by_id(self, user_id: int) -> Optional[User]:
        """Return a user by id or None if missing."""
        logger.trace("Fetching user by id=%s", user_id)
        return self._table.get(user_id)

    @log_store_timing
    def get_by_email(self, email: str) -> Optional[User]:
        logger.trace("Fetching user by email=%s", email)
        return self._table.find(lambda user: user.email == email)

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_store_timing
    def create(self, username: str, email: str, hashed_password: str) -> User:
        """Insert a new user record; raises ``DuplicateRecordError`` if the email is taken."""
        logger.info("Creating user record username=%s", username)
        return self._table.insert(
            lambda new_id, now: User(
                id=new_id,
                username=username,
                email=email,
                hashed_password=hashed_password,
                created_at=now,
                updated_at=now,
            ),
            unique=lambda user: user.email == email,
        )

    @log_store_timing
    def update(self, user_id: int, **fields) -> Optional[User]:
        """Update user fields and return the merged record; emails stay unique."""
        if not fields:
            logger.trace("No user fields to update id=%s", user_id)
            return self.get_by_id(user_id)

        logger.info("Updating user record id=%s", user_id)
        unique = None
        if "email" in fields:
            unique = lambda user: user.email == fields["email"]  # noqa: E731
        return self._table.update(user_id, unique=unique, **fields)

    @log_store_timing
    def delete(self, user_id: int) -> bool:
        logger.info("Deleting user record id=%s", user_id)
        return self._table.delete(user_id)
