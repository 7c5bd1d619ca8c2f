"""
Order operations (all require authentication, all scoped to the caller's orders):
  query        order(id)                   – One of your orders
  query        orders(filter, pagination)  – Page through your orders
  mutation     createOrder(input)          – Buy a listing
  mutation     updateOrder(id, input)      – Change quantity, address or notes
  mutation     deleteOrder(id)             – Remove an order
  mutation     cancelOrder(id, cancelReason)
  mutation     updateOrderStatus(id, status)
  subscription orderStatusChanged(orderId) – Status changes on your orders
"""
from typing import AsyncGenerator, Optional
import logging

import strawberry
from strawberry.types import Info

from marketplace.core.dependencies import require_auth
from marketplace.schemas.common import MessageResponse, PaginationInfo, PaginationInput
from marketplace.schemas.order import (
    CancelOrderResponse,
    OrderCreateInput,
    OrderFilterInput,
    OrdersResponse,
    OrderStatusEnum,
    OrderType,
    OrderUpdateInput,
)
from marketplace.services.event_bus import ORDER_STATUS_CHANGED
from marketplace.services.order_service import OrderService

logger = logging.getLogger(__name__)


def _service(info: Info) -> OrderService:
    return OrderService(info.context.store, info.context.event_bus)


@strawberry.type
class OrderQuery:
    @strawberry.field
    def order(self, info: Info, id: int) -> OrderType:
        return OrderType.from_model(_service(info).get_order(id, info.context.identity))

    @strawberry.field
    def orders(
        self,
        info: Info,
        filter: Optional[OrderFilterInput] = None,
        pagination: Optional[PaginationInput] = None,
    ) -> OrdersResponse:
        page = _service(info).list_orders(info.context.identity, filter, pagination)
        return OrdersResponse(
            orders=[OrderType.from_model(order) for order in page.items],
            pagination=PaginationInfo.from_page(page),
        )


@strawberry.type
class OrderMutation:
    @strawberry.mutation
    def create_order(self, info: Info, input: OrderCreateInput) -> OrderType:
        return OrderType.from_model(_service(info).create_order(input, info.context.identity))

    @strawberry.mutation
    def update_order(self, info: Info, id: int, input: OrderUpdateInput) -> OrderType:
        order = _service(info).update_order(id, input, info.context.identity)
        return OrderType.from_model(order)

    @strawberry.mutation
    def delete_order(self, info: Info, id: int) -> MessageResponse:
        _service(info).delete_order(id, info.context.identity)
        return MessageResponse(message="Order deleted successfully")

    @strawberry.mutation
    def cancel_order(
        self, info: Info, id: int, cancel_reason: Optional[str] = None
    ) -> CancelOrderResponse:
        order = _service(info).cancel_order(id, info.context.identity, cancel_reason)
        return CancelOrderResponse(
            message="Order cancelled successfully",
            order=OrderType.from_model(order),
        )

    @strawberry.mutation
    def update_order_status(self, info: Info, id: int, status: OrderStatusEnum) -> OrderType:
        order = _service(info).update_order_status(id, status, info.context.identity)
        return OrderType.from_model(order)


@strawberry.type
class OrderSubscription:
    @strawberry.subscription
    async def order_status_changed(
        self, info: Info, order_id: Optional[int] = None
    ) -> AsyncGenerator[OrderType, None]:
        user = require_auth(info.context.identity)
        logger.info("User id=%s subscribed to order status changes", user.id)
        async for order in info.context.event_bus.subscribe(ORDER_STATUS_CHANGED):
            if order.user_id != user.id:
                continue
            if order_id is not None and order.id != order_id:
                continue
            yield OrderType.from_model(order)
