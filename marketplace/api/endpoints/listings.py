"""
Listing operations:
  query        listing(id)              – A single listing
  query        listings(filter)         – Search listings
  mutation     createListing(input)     – Publish a listing (authenticated)
  mutation     updateListing(id, input) – Edit your listing
  mutation     deleteListing(id)        – Remove your listing
  subscription newListing               – Stream of newly published listings
"""
from typing import AsyncGenerator, Optional
import logging

import strawberry
from strawberry.types import Info

from marketplace.schemas.common import MessageResponse
from marketplace.schemas.listing import (
    ListingCreateInput,
    ListingFilterInput,
    ListingType,
    ListingUpdateInput,
)
from marketplace.services.event_bus import NEW_LISTING
from marketplace.services.listing_service import ListingService

logger = logging.getLogger(__name__)


def _service(info: Info) -> ListingService:
    return ListingService(info.context.store, info.context.event_bus)


@strawberry.type
class ListingQuery:
    @strawberry.field
    def listing(self, info: Info, id: int) -> ListingType:
        return ListingType.from_model(_service(info).get_listing(id))

    @strawberry.field
    def listings(
        self, info: Info, filter: Optional[ListingFilterInput] = None
    ) -> list[ListingType]:
        return [ListingType.from_model(item) for item in _service(info).list_listings(filter)]


@strawberry.type
class ListingMutation:
    @strawberry.mutation
    def create_listing(self, info: Info, input: ListingCreateInput) -> ListingType:
        listing = _service(info).create_listing(input, info.context.identity)
        return ListingType.from_model(listing)

    @strawberry.mutation
    def update_listing(self, info: Info, id: int, input: ListingUpdateInput) -> ListingType:
        listing = _service(info).update_listing(id, input, info.context.identity)
        return ListingType.from_model(listing)

    @strawberry.mutation
    def delete_listing(self, info: Info, id: int) -> MessageResponse:
        _service(info).delete_listing(id, info.context.identity)
        return MessageResponse(message="Listing deleted successfully")


@strawberry.type
class ListingSubscription:
    @strawberry.subscription
    async def new_listing(self, info: Info) -> AsyncGenerator[ListingType, None]:
        logger.info("Client subscribed to new listings")
        async for listing in info.context.event_bus.subscribe(NEW_LISTING):
            yield ListingType.from_model(listing)
