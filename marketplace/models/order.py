"""
Domain model representing a stored Order record and its embedded shipping address.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# Position along the fulfilment path; CANCELLED sits outside it.
FULFILMENT_RANK = {
    OrderStatus.PENDING: 0,
    OrderStatus.CONFIRMED: 1,
    OrderStatus.SHIPPED: 2,
    OrderStatus.DELIVERED: 3,
}

DEFAULT_CANCEL_REASON = "No reason provided"


@dataclass(frozen=True)
class ShippingAddress:
    street: str
    city: str
    state: str
    zip_code: str
    country: str


@dataclass
class Order:
    id: int
    user_id: int
    listing_id: int
    quantity: int
    total_price: Decimal
    status: OrderStatus
    shipping_address: ShippingAddress
    created_at: datetime
    updated_at: datetime
    buyer_notes: Optional[str] = None
    cancel_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
