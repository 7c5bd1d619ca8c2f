"""
Order management service.

Business rules enforced here:
- Orders are private: every operation requires the buyer's own session.
- The total price is listing price x quantity, taken when the order is placed
  and re-taken from the listing's current price whenever the quantity changes.
- Status only moves forward along PENDING -> CONFIRMED -> SHIPPED -> DELIVERED,
  or to CANCELLED from any state before DELIVERED. CANCELLED is terminal.
"""
from decimal import Decimal
from typing import Any, Optional
import logging

from marketplace.core.dependencies import require_auth, require_ownership
from marketplace.core.errors import (
    ForbiddenError,
    InternalError,
    InvalidOperationError,
    NotFoundError,
)
from marketplace.core.validation import (
    validate_order_status,
    validate_pagination,
    validate_quantity,
    validate_required,
)
from marketplace.db.store import DataStore, Page
from marketplace.models.order import FULFILMENT_RANK, Order, OrderStatus
from marketplace.models.token import TokenClaims
from marketplace.repositories.listing_repository import ListingRepository
from marketplace.repositories.order_repository import OrderFilter, OrderRepository
from marketplace.schemas.common import PaginationInput
from marketplace.schemas.order import OrderCreateInput, OrderFilterInput, OrderUpdateInput
from marketplace.services.event_bus import ORDER_STATUS_CHANGED, EventBus

logger = logging.getLogger(__name__)


def line_total(price: Decimal, quantity: int) -> Decimal:
    return price * quantity


class OrderService:
    """Business logic for placing, reading and progressing orders."""

    def __init__(self, store: DataStore, event_bus: Optional[EventBus] = None) -> None:
        self._repo = OrderRepository(store)
        self._listing_repo = ListingRepository(store)
        self._event_bus = event_bus

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def _find_order(self, order_id: int) -> Order:
        order = self._repo.get_by_id(order_id)
        if not order:
            logger.warning("Order id=%s not found", order_id)
            raise NotFoundError.for_entity("Order", order_id)
        return order

    def _get_owned_order(self, order_id: int, identity: Optional[TokenClaims]) -> Order:
        """Authenticate, then look the order up, then check the caller owns it."""
        require_auth(identity)
        order = self._find_order(order_id)
        require_ownership(identity, order.user_id)
        return order

    def get_order(self, order_id: int, identity: Optional[TokenClaims]) -> Order:
        logger.info("Fetching order id=%s", order_id)
        user = require_auth(identity)
        order = self._find_order(order_id)
        if order.user_id != user.id:
            logger.warning("User id=%s denied access to order id=%s", user.id, order_id)
            raise ForbiddenError(
                "Access denied",
                details="You can only access your own orders",
            )
        return order

    def list_orders(
        self,
        identity: Optional[TokenClaims],
        data: Optional[OrderFilterInput] = None,
        pagination: Optional[PaginationInput] = None,
    ) -> Page[Order]:
        """Return one page of the caller's orders; asking for someone else's is forbidden."""
        user = require_auth(identity)
        requested_user_id = data.user_id if data is not None else None
        if requested_user_id is not None and requested_user_id != user.id:
            logger.warning(
                "User id=%s requested orders of user id=%s", user.id, requested_user_id
            )
            raise ForbiddenError(
                "Access denied",
                details="You can only access your own orders",
            )

        pagination = pagination or PaginationInput()
        validate_pagination(pagination.page, pagination.limit)
        criteria = OrderFilter(
            user_id=user.id,
            status=data.status if data is not None else None,
        )
        logger.info(
            "Listing orders for user id=%s page=%s limit=%s",
            user.id,
            pagination.page,
            pagination.limit,
        )
        return self._repo.list_filtered(criteria, pagination.page, pagination.limit)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_order(self, data: OrderCreateInput, identity: Optional[TokenClaims]) -> Order:
        user = require_auth(identity)
        logger.info("Creating order for listing id=%s by user id=%s", data.listing_id, user.id)

        validate_required(data.listing_id, "listingId")
        validate_required(data.quantity, "quantity")
        validate_required(data.shipping_address, "shippingAddress")
        validate_quantity(data.quantity)

        listing = self._listing_repo.get_by_id(data.listing_id)
        if not listing:
            logger.warning("Listing id=%s not found for order", data.listing_id)
            raise NotFoundError.for_entity("Listing", data.listing_id)

        order = self._repo.create(
            user_id=user.id,
            listing_id=listing.id,
            quantity=data.quantity,
            total_price=line_total(listing.price, data.quantity),
            shipping_address=data.shipping_address.to_model(),
            buyer_notes=data.buyer_notes,
        )
        logger.info("Order created id=%s total=%s", order.id, order.total_price)
        return order

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_order(
        self,
        order_id: int,
        data: OrderUpdateInput,
        identity: Optional[TokenClaims],
    ) -> Order:
        logger.info("Updating order id=%s", order_id)
        order = self._get_owned_order(order_id, identity)

        updates: dict[str, Any] = {}
        if data.quantity is not None:
            validate_quantity(data.quantity)
            updates["quantity"] = data.quantity
            # re-read so the total follows the listing's current price
            listing = self._listing_repo.get_by_id(order.listing_id)
            if listing:
                updates["total_price"] = line_total(listing.price, data.quantity)
            else:
                logger.warning(
                    "Listing id=%s gone, keeping recorded total for order id=%s",
                    order.listing_id,
                    order_id,
                )
        if data.shipping_address is not None:
            updates["shipping_address"] = data.shipping_address.to_model()
        if data.buyer_notes is not None:
            updates["buyer_notes"] = data.buyer_notes

        updated = self._repo.update(order_id, **updates)
        if updated is None:
            raise NotFoundError.for_entity("Order", order_id)
        logger.info("Order updated id=%s", order_id)
        return updated

    def update_order_status(
        self,
        order_id: int,
        status: Any,
        identity: Optional[TokenClaims],
    ) -> Order:
        logger.info("Updating status of order id=%s to %s", order_id, status)
        order = self._get_owned_order(order_id, identity)
        new_status = validate_order_status(status)

        if new_status == OrderStatus.CANCELLED:
            return self._cancel(order, None)

        self._ensure_forward_move(order, new_status)
        updated = self._repo.update_status(order_id, new_status)
        if updated is None:
            raise NotFoundError.for_entity("Order", order_id)
        self._publish_status_change(updated)
        return updated

    def _ensure_forward_move(self, order: Order, new_status: OrderStatus) -> None:
        if order.status == OrderStatus.CANCELLED:
            logger.warning("Cannot change status of cancelled order id=%s", order.id)
            raise InvalidOperationError(
                "Cannot change status of a cancelled order",
                details="Cancelled orders cannot change status",
            )
        if FULFILMENT_RANK[new_status] <= FULFILMENT_RANK[order.status]:
            logger.warning(
                "Rejected status move %s -> %s for order id=%s",
                order.status.value,
                new_status.value,
                order.id,
            )
            raise InvalidOperationError(
                f"Cannot change order status from {order.status.value} to {new_status.value}",
                details="Order status can only move forward",
            )

    # ------------------------------------------------------------------
    # Cancel / delete
    # ------------------------------------------------------------------

    def cancel_order(
        self,
        order_id: int,
        identity: Optional[TokenClaims],
        reason: Optional[str] = None,
    ) -> Order:
        logger.info("Cancelling order id=%s", order_id)
        order = self._get_owned_order(order_id, identity)
        return self._cancel(order, reason)

    def _cancel(self, order: Order, reason: Optional[str]) -> Order:
        if order.status == OrderStatus.CANCELLED:
            logger.warning("Order id=%s is already cancelled", order.id)
            raise InvalidOperationError(
                "Order is already cancelled",
                details="This order has already been cancelled",
            )
        if order.status == OrderStatus.DELIVERED:
            logger.warning("Order id=%s is delivered and cannot be cancelled", order.id)
            raise InvalidOperationError(
                "Cannot cancel delivered order",
                details="Delivered orders cannot be cancelled",
            )

        cancelled = self._repo.cancel(order.id, reason)
        if cancelled is None:
            raise NotFoundError.for_entity("Order", order.id)
        logger.info("Order cancelled id=%s", order.id)
        self._publish_status_change(cancelled)
        return cancelled

    def delete_order(self, order_id: int, identity: Optional[TokenClaims]) -> None:
        logger.info("Deleting order id=%s", order_id)
        self._get_owned_order(order_id, identity)
        if not self._repo.delete(order_id):
            logger.error("Order id=%s vanished during deletion", order_id)
            raise InternalError(
                "Failed to delete order",
                details="An error occurred while deleting the order",
            )
        logger.info("Order deleted id=%s", order_id)

    def _publish_status_change(self, order: Order) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(ORDER_STATUS_CHANGED, order)
