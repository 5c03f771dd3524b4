from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import transaction

from apps.catalog.services.inventory_service import InventoryService
from apps.orders.domain.state_machine import OrderLifecycleStateMachine, OrderStatus
from apps.orders.models import Order
from apps.orders.services.order_service import OrderService

logger = logging.getLogger("bakery.orders")


@dataclass(frozen=True)
class CancelOrderCommand:
    order_id: str
    user: object


def cancel_and_restock(order: Order) -> Order:
    """
    Mark a locked order cancelled and put every line's quantity back on the
    shelf. Payment status is left as it is.
    """
    items = list(order.items.all())
    InventoryService.lock_products(item.product_id for item in items)
    order.order_status = OrderStatus.CANCELLED
    order.save(update_fields=["order_status", "updated_at"])
    InventoryService.apply_deltas((item.product_id, item.quantity) for item in items)
    return order


class CancelOrderUseCase:
    @staticmethod
    @transaction.atomic
    def execute(cmd: CancelOrderCommand) -> Order:
        order = OrderService.lock(order_id=cmd.order_id, user=cmd.user)
        OrderLifecycleStateMachine.assert_can_cancel(order.order_status)
        cancel_and_restock(order)
        logger.info(
            "order_cancelled",
            extra={"order_id": order.order_id, "user_id": getattr(cmd.user, "id", None)},
        )
        return OrderService.get(order_id=order.order_id)
