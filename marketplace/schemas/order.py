"""
GraphQL schemas for Order requests and responses.
"""
from datetime import datetime
from typing import Optional

import strawberry
from strawberry.types import Info

from marketplace.models.order import Order, OrderStatus, ShippingAddress
from marketplace.repositories.listing_repository import ListingRepository
from marketplace.repositories.user_repository import UserRepository
from marketplace.schemas.common import PaginationInfo
from marketplace.schemas.listing import ListingType
from marketplace.schemas.user import UserType

OrderStatusEnum = strawberry.enum(OrderStatus, name="OrderStatus")


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

@strawberry.input
class ShippingAddressInput:
    street: str
    city: str
    state: str
    zip_code: str
    country: str

    def to_model(self) -> ShippingAddress:
        return ShippingAddress(
            street=self.street,
            city=self.city,
            state=self.state,
            zip_code=self.zip_code,
            country=self.country,
        )


@strawberry.input
class OrderCreateInput:
    listing_id: int
    quantity: int
    shipping_address: ShippingAddressInput
    buyer_notes: Optional[str] = None


@strawberry.input
class OrderUpdateInput:
    quantity: Optional[int] = None
    shipping_address: Optional[ShippingAddressInput] = None
    buyer_notes: Optional[str] = None


@strawberry.input
class OrderFilterInput:
    user_id: Optional[int] = None
    status: Optional[OrderStatusEnum] = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

@strawberry.type(name="ShippingAddress")
class ShippingAddressType:
    street: str
    city: str
    state: str
    zip_code: str
    country: str


@strawberry.type(name="Order")
class OrderType:
    id: int
    user_id: int
    listing_id: int
    quantity: int
    total_price: float
    status: OrderStatusEnum
    shipping_address: ShippingAddressType
    buyer_notes: Optional[str]
    cancel_reason: Optional[str]
    cancelled_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    @strawberry.field
    def user(self, info: Info) -> Optional[UserType]:
        buyer = UserRepository(info.context.store).get_by_id(self.user_id)
        return UserType.from_model(buyer) if buyer else None

    @strawberry.field
    def listing(self, info: Info) -> Optional[ListingType]:
        """The purchased listing; null if the seller removed it."""
        listing = ListingRepository(info.context.store).get_by_id(self.listing_id)
        return ListingType.from_model(listing) if listing else None

    @classmethod
    def from_model(cls, order: Order) -> "OrderType":
        address = order.shipping_address
        return cls(
            id=order.id,
            user_id=order.user_id,
            listing_id=order.listing_id,
            quantity=order.quantity,
            total_price=float(order.total_price),
            status=order.status,
            shipping_address=ShippingAddressType(
                street=address.street,
                city=address.city,
                state=address.state,
                zip_code=address.zip_code,
                country=address.country,
            ),
            buyer_notes=order.buyer_notes,
            cancel_reason=order.cancel_reason,
            cancelled_at=order.cancelled_at,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


@strawberry.type
class OrdersResponse:
    orders: list[OrderType]
    pagination: PaginationInfo


@strawberry.type
class CancelOrderResponse:
    message: str
    order: OrderType
