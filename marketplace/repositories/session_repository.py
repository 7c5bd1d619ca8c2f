"""
Repository layer for active login sessions.
Tokens are never written to the log.
"""
import logging

from marketplace.db.store import DataStore

logger = logging.getLogger(__name__)


class SessionRepository:
    def __init__(self, store: DataStore) -> None:
        self._sessions = store.sessions

    def add(self, token: str, user_id: int) -> None:
        self._sessions.add(token, user_id)
        logger.info("Session opened for user id=%s", user_id)

    def is_active(self, token: str) -> bool:
        return self._sessions.contains(token)

    def revoke(self, token: str) -> bool:
        """Remove a single session and return True if it existed."""
        revoked = self._sessions.remove(token)
        logger.info("Session revoked=%s", revoked)
        return revoked

    def revoke_all_for_user(self, user_id: int) -> int:
        count = self._sessions.remove_for_user(user_id)
        logger.info("Revoked %s sessions for user id=%s", count, user_id)
        return count
