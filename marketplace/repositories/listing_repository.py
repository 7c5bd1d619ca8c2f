"""
Repository layer for Listing records.
All access to the `listings` table lives here, including search filters.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
import logging

from marketplace.core.logging_config import log_store_timing
from marketplace.db.store import DataStore
from marketplace.models.listing import Listing, ListingCondition

logger = logging.getLogger(__name__)


@dataclass
class ListingFilter:
    """Search criteria; fields left as None impose no constraint."""

    search: Optional[str] = None
    price_min: Optional[Decimal] = None
    price_max: Optional[Decimal] = None
    category: Optional[str] = None
    condition: Optional[ListingCondition] = None

    def predicates(self) -> list:
        checks = []
        if self.search:
            term = self.search.lower()
            checks.append(
                lambda listing: term in listing.title.lower()
                or term in listing.description.lower()
            )
        if self.price_min is not None:
            checks.append(lambda listing: listing.price >= self.price_min)
        if self.price_max is not None:
            checks.append(lambda listing: listing.price <= self.price_max)
        if self.category:
            checks.append(lambda listing: listing.category == self.category)
        if self.condition:
            checks.append(lambda listing: listing.condition == self.condition)
        return checks


class ListingRepository:
    def __init__(self, store: DataStore) -> None:
        self._table = store.listings

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_store_timing
    def get_by_id(self, listing_id: int) -> Optional[Listing]:
        logger.trace("Fetching listing id=%s", listing_id)
        return self._table.get(listing_id)

    @log_store_timing
    def search(self, criteria: Optional[ListingFilter] = None) -> list[Listing]:
        """Return listings matching every criterion, in creation order."""
        criteria = criteria or ListingFilter()
        logger.trace("Searching listings criteria=%s", criteria)
        return self._table.select(*criteria.predicates())

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_store_timing
    def create(
        self,
        title: str,
        description: str,
        price: Decimal,
        user_id: int,
        category: Optional[str] = None,
        condition: Optional[ListingCondition] = None,
        location: Optional[str] = None,
        images: Optional[list[str]] = None,
    ) -> Listing:
        logger.info("Creating listing record title=%s", title)
        return self._table.insert(
            lambda new_id, now: Listing(
                id=new_id,
                title=title,
                description=description,
                price=price,
                user_id=user_id,
                category=category,
                condition=condition,
                location=location,
                images=list(images or []),
                created_at=now,
                updated_at=now,
            )
        )

    @log_store_timing
    def update(self, listing_id: int, **fields) -> Optional[Listing]:
        """Update arbitrary fields on a listing."""
        if not fields:
            logger.trace("No listing fields to update id=%s", listing_id)
            return self.get_by_id(listing_id)

        logger.info("Updating listing record id=%s", listing_id)
        return self._table.update(listing_id, **fields)

    @log_store_timing
    def delete(self, listing_id: int) -> bool:
        logger.info("Deleting listing record id=%s", listing_id)
        return self._table.delete(listing_id)

    @log_store_timing
    def delete_by_owner(self, user_id: int) -> int:
        removed = self._table.delete_where(lambda listing: listing.user_id == user_id)
        logger.info("Deleted %s listings owned by user id=%s", removed, user_id)
        return removed
