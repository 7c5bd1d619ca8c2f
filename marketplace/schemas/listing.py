"""
GraphQL schemas for Listing requests and responses.
"""
from datetime import datetime
from typing import Optional

import strawberry
from strawberry.types import Info

from marketplace.models.listing import Listing, ListingCondition
from marketplace.repositories.user_repository import UserRepository
from marketplace.schemas.user import UserType

ListingConditionEnum = strawberry.enum(ListingCondition, name="ListingCondition")


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

@strawberry.input
class ListingCreateInput:
    title: str
    description: str
    price: float
    category: Optional[str] = None
    condition: Optional[ListingConditionEnum] = None
    location: Optional[str] = None
    images: Optional[list[str]] = None


@strawberry.input
class ListingUpdateInput:
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    category: Optional[str] = None
    condition: Optional[ListingConditionEnum] = None
    location: Optional[str] = None
    images: Optional[list[str]] = None


@strawberry.input
class ListingFilterInput:
    search: Optional[str] = None
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    category: Optional[str] = None
    condition: Optional[ListingConditionEnum] = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

@strawberry.type(name="Listing")
class ListingType:
    id: int
    title: str
    description: str
    price: float
    category: Optional[str]
    condition: Optional[ListingConditionEnum]
    location: Optional[str]
    images: list[str]
    user_id: int
    created_at: datetime
    updated_at: datetime

    @strawberry.field
    def user(self, info: Info) -> Optional[UserType]:
        """The seller; null once the account is gone."""
        owner = UserRepository(info.context.store).get_by_id(self.user_id)
        return UserType.from_model(owner) if owner else None

    @classmethod
    def from_model(cls, listing: Listing) -> "ListingType":
        return cls(
            id=listing.id,
            title=listing.title,
            description=listing.description,
            price=float(listing.price),
            category=listing.category,
            condition=listing.condition,
            location=listing.location,
            images=list(listing.images),
            user_id=listing.user_id,
            created_at=listing.created_at,
            updated_at=listing.updated_at,
        )
