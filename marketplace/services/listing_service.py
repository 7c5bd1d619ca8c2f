"""
Listing management service.
Anyone can browse listings; any authenticated user can create one and becomes
its owner; only the owner can update or delete it.
"""
from decimal import Decimal
from typing import Optional
import logging
import time

from marketplace.core.dependencies import require_auth, require_ownership
from marketplace.core.errors import InternalError, NotFoundError
from marketplace.core.validation import validate_price, validate_required
from marketplace.db.store import DataStore
from marketplace.models.listing import Listing
from marketplace.models.token import TokenClaims
from marketplace.repositories.listing_repository import ListingFilter, ListingRepository
from marketplace.schemas.listing import (
    ListingCreateInput,
    ListingFilterInput,
    ListingUpdateInput,
)
from marketplace.services.event_bus import NEW_LISTING, EventBus

logger = logging.getLogger(__name__)


def placeholder_image_refs(images: Optional[list[str]]) -> list[str]:
    """Stand-in references for uploaded images; no file is stored."""
    if not images:
        return []
    stamp = int(time.time() * 1000)
    return [f"listing_{stamp}_{index}.jpg" for index in range(len(images))]


class ListingService:
    """Business logic for listing operations."""

    def __init__(self, store: DataStore, event_bus: Optional[EventBus] = None) -> None:
        self._repo = ListingRepository(store)
        self._event_bus = event_bus

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_listing(self, listing_id: int) -> Listing:
        """Fetch a listing by id or raise NOT_FOUND."""
        logger.info("Fetching listing id=%s", listing_id)
        listing = self._repo.get_by_id(listing_id)
        if not listing:
            logger.warning("Listing id=%s not found", listing_id)
            raise NotFoundError.for_entity("Listing", listing_id)
        return listing

    def list_listings(self, data: Optional[ListingFilterInput] = None) -> list[Listing]:
        """Return listings matching every supplied filter field."""
        criteria = ListingFilter()
        if data is not None:
            criteria = ListingFilter(
                search=data.search,
                price_min=Decimal(str(data.price_min)) if data.price_min is not None else None,
                price_max=Decimal(str(data.price_max)) if data.price_max is not None else None,
                category=data.category,
                condition=data.condition,
            )
        logger.info("Listing listings criteria=%s", criteria)
        return self._repo.search(criteria)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_listing(self, data: ListingCreateInput, identity: Optional[TokenClaims]) -> Listing:
        user = require_auth(identity)
        logger.info("Creating listing %s for user id=%s", data.title, user.id)

        validate_required(data.title, "title")
        validate_required(data.description, "description")
        validate_required(data.price, "price")
        price = validate_price(data.price)

        listing = self._repo.create(
            title=data.title,
            description=data.description,
            price=price,
            user_id=user.id,
            category=data.category,
            condition=data.condition,
            location=data.location,
            images=placeholder_image_refs(data.images),
        )
        logger.info("Listing created id=%s", listing.id)

        if self._event_bus is not None:
            self._event_bus.publish(NEW_LISTING, listing)
        return listing

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_listing(
        self,
        listing_id: int,
        data: ListingUpdateInput,
        identity: Optional[TokenClaims],
    ) -> Listing:
        logger.info("Updating listing id=%s", listing_id)
        require_auth(identity)
        listing = self.get_listing(listing_id)
        require_ownership(identity, listing.user_id)

        update_fields: dict = {}
        if data.title is not None:
            validate_required(data.title, "title")
            update_fields["title"] = data.title
        if data.description is not None:
            validate_required(data.description, "description")
            update_fields["description"] = data.description
        if data.price is not None:
            update_fields["price"] = validate_price(data.price)
        if data.category is not None:
            update_fields["category"] = data.category
        if data.condition is not None:
            update_fields["condition"] = data.condition
        if data.location is not None:
            update_fields["location"] = data.location
        if data.images is not None:
            update_fields["images"] = placeholder_image_refs(data.images)

        updated = self._repo.update(listing_id, **update_fields)
        if updated is None:
            raise NotFoundError.for_entity("Listing", listing_id)
        logger.info("Listing updated id=%s", listing_id)
        return updated

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_listing(self, listing_id: int, identity: Optional[TokenClaims]) -> None:
        logger.info("Deleting listing id=%s", listing_id)
        require_auth(identity)
        listing = self.get_listing(listing_id)
        require_ownership(identity, listing.user_id)

        if not self._repo.delete(listing_id):
            logger.error("Listing id=%s vanished during deletion", listing_id)
            raise InternalError(
                "Failed to delete listing",
                details="An error occurred while deleting the listing",
            )
        logger.info("Listing deleted id=%s", listing_id)
