"""
Repository layer for Order records.
All access to the `orders` table lives here, including filtered pagination.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional
import logging

from marketplace.core.logging_config import log_store_timing
from marketplace.db.store import DataStore, Page, paginate, utcnow
from marketplace.models.order import (
    DEFAULT_CANCEL_REASON,
    Order,
    OrderStatus,
    ShippingAddress,
)

logger = logging.getLogger(__name__)


@dataclass
class OrderFilter:
    user_id: Optional[int] = None
    status: Optional[OrderStatus] = None

    def predicates(self) -> list:
        checks = []
        if self.user_id is not None:
            checks.append(lambda order: order.user_id == self.user_id)
        if self.status is not None:
            checks.append(lambda order: order.status == self.status)
        return checks


class OrderRepository:
    """Data access layer for order records."""

    def __init__(self, store: DataStore) -> None:
        self._table = store.orders

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_store_timing
    def get_by_id(self, order_id: int) -> Optional[Order]:
        logger.trace("Fetching order id=%s", order_id)
        return self._table.get(order_id)

    @log_store_timing
    def list_filtered(self, criteria: OrderFilter, page: int, limit: int) -> Page[Order]:
        """Return one page of orders matching *criteria*."""
        logger.trace("Listing orders criteria=%s page=%s limit=%s", criteria, page, limit)
        return paginate(self._table.select(*criteria.predicates()), page, limit)

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_store_timing
    def create(
        self,
        user_id: int,
        listing_id: int,
        quantity: int,
        total_price: Decimal,
        shipping_address: ShippingAddress,
        buyer_notes: Optional[str] = None,
    ) -> Order:
        """Insert a new order; every order starts out PENDING."""
        logger.info("Creating order record user_id=%s listing_id=%s", user_id, listing_id)
        return self._table.insert(
            lambda new_id, now: Order(
                id=new_id,
                user_id=user_id,
                listing_id=listing_id,
                quantity=quantity,
                total_price=total_price,
                status=OrderStatus.PENDING,
                shipping_address=shipping_address,
                buyer_notes=buyer_notes,
                created_at=now,
                updated_at=now,
            )
        )

    @log_store_timing
    def update(self, order_id: int, **fields) -> Optional[Order]:
        if not fields:
            logger.trace("No order fields to update id=%s", order_id)
            return self.get_by_id(order_id)

        logger.info("Updating order record id=%s", order_id)
        return self._table.update(order_id, **fields)

    @log_store_timing
    def update_status(self, order_id: int, status: OrderStatus) -> Optional[Order]:
        logger.info("Updating order id=%s status=%s", order_id, status.value)
        return self._table.update(order_id, status=status)

    @log_store_timing
    def cancel(self, order_id: int, reason: Optional[str] = None) -> Optional[Order]:
        """Mark the order CANCELLED, stamping the time and the reason."""
        logger.info("Cancelling order record id=%s", order_id)
        cancelled_at: datetime = utcnow()
        return self._table.update(
            order_id,
            status=OrderStatus.CANCELLED,
            cancelled_at=cancelled_at,
            cancel_reason=reason or DEFAULT_CANCEL_REASON,
        )

    @log_store_timing
    def delete(self, order_id: int) -> bool:
        logger.info("Deleting order record id=%s", order_id)
        return self._table.delete(order_id)

    @log_store_timing
    def delete_by_buyer(self, user_id: int) -> int:
        removed = self._table.delete_where(lambda order: order.user_id == user_id)
        logger.info("Deleted %s orders placed by user id=%s", removed, user_id)
        return removed
