"""
In-memory data store.

A ``DataStore`` owns one ``Table`` per entity kind plus the session table. It is
constructed by the application factory and handed to repositories, so every
test can work against a fresh instance.

Each table serialises identifier assignment and read-modify-write sequences
behind its own lock; reads filter over a snapshot taken under that lock.
"""
import dataclasses
import itertools
import logging
import math
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Generic, Iterable, Optional, TypeVar

from marketplace.core.logging_config import log_store_timing
from marketplace.models.listing import Listing
from marketplace.models.order import Order
from marketplace.models.user import User

logger = logging.getLogger(__name__)

T = TypeVar("T")
Predicate = Callable[[T], bool]


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class DuplicateRecordError(Exception):
    """Raised when a write would break a uniqueness constraint of a table."""


class Table(Generic[T]):
    """Insertion-ordered records of one kind, addressed by integer ``id``."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._rows: list[T] = []
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)

    def __repr__(self) -> str:
        return f"Table({self.name!r})"

    @log_store_timing
    def insert(
        self,
        build: Callable[[int, datetime], T],
        unique: Optional[Predicate] = None,
    ) -> T:
        """
        Assign the next id, stamp the time and append the record built by *build*.

        When *unique* is given and any stored record matches it, nothing is
        inserted and ``DuplicateRecordError`` is raised; the check and the append
        happen under the same lock.
        """
        with self._lock:
            if unique is not None and any(unique(row) for row in self._rows):
                raise DuplicateRecordError(self.name)
            record = build(next(self._ids), utcnow())
            self._rows.append(record)
        logger.trace("Inserted %s id=%s", self.name, record.id)  # type: ignore[attr-defined]
        return record

    @log_store_timing
    def get(self, record_id: int) -> Optional[T]:
        with self._lock:
            for row in self._rows:
                if row.id == record_id:  # type: ignore[attr-defined]
                    return row
        return None

    @log_store_timing
    def find(self, predicate: Predicate) -> Optional[T]:
        """Return the first record matching *predicate*, or None."""
        for row in self.select(predicate):
            return row
        return None

    @log_store_timing
    def select(self, *predicates: Predicate) -> list[T]:
        """Return every record matching all *predicates*, in insertion order."""
        with self._lock:
            snapshot = list(self._rows)
        return [row for row in snapshot if all(p(row) for p in predicates)]

    @log_store_timing
    def update(
        self,
        record_id: int,
        unique: Optional[Predicate] = None,
        **fields,
    ) -> Optional[T]:
        """
        Shallow-merge *fields* over the record and re-stamp ``updated_at``.
        *unique* works as in ``insert`` and is checked against the other records.
        """
        with self._lock:
            if unique is not None and any(
                unique(row) for row in self._rows if row.id != record_id  # type: ignore[attr-defined]
            ):
                raise DuplicateRecordError(self.name)
            for index, row in enumerate(self._rows):
                if row.id == record_id:  # type: ignore[attr-defined]
                    merged = dataclasses.replace(row, **fields, updated_at=utcnow())
                    self._rows[index] = merged
                    return merged
        return None

    @log_store_timing
    def delete(self, record_id: int) -> bool:
        with self._lock:
            for index, row in enumerate(self._rows):
                if row.id == record_id:  # type: ignore[attr-defined]
                    del self._rows[index]
                    return True
        return False

    @log_store_timing
    def delete_where(self, predicate: Predicate) -> int:
        """Remove every record matching *predicate* and return how many went."""
        with self._lock:
            kept = [row for row in self._rows if not predicate(row)]
            removed = len(self._rows) - len(kept)
            self._rows = kept
        return removed


class SessionTable:
    """Currently valid access tokens mapped to the user they were issued for."""

    def __init__(self) -> None:
        self._tokens: dict[str, int] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)

    def add(self, token: str, user_id: int) -> None:
        with self._lock:
            self._tokens[token] = user_id

    def remove(self, token: str) -> bool:
        with self._lock:
            return self._tokens.pop(token, None) is not None

    def contains(self, token: str) -> bool:
        with self._lock:
            return token in self._tokens

    def remove_for_user(self, user_id: int) -> int:
        with self._lock:
            stale = [t for t, owner in self._tokens.items() if owner == user_id]
            for token in stale:
                del self._tokens[token]
        return len(stale)


class DataStore:
    """All marketplace state for one server process."""

    def __init__(self) -> None:
        self.users: Table[User] = Table("users")
        self.listings: Table[Listing] = Table("listings")
        self.orders: Table[Order] = Table("orders")
        self.sessions = SessionTable()
        logger.info("In-memory data store created")


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

@dataclass
class Page(Generic[T]):
    items: list[T]
    total: int
    pages: int
    current_page: int
    has_next_page: bool
    has_previous_page: bool


def paginate(records: Iterable[T], page: int, limit: int) -> Page[T]:
    """Slice *records* into 1-indexed pages of *limit*; out-of-range pages are empty."""
    rows = list(records)
    total = len(rows)
    pages = math.ceil(total / limit)
    offset = (page - 1) * limit
    return Page(
        items=rows[offset:offset + limit],
        total=total,
        pages=pages,
        current_page=page,
        has_next_page=page < pages,
        has_previous_page=page > 1,
    )
