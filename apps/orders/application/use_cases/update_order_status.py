from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from apps.orders.application.use_cases.cancel_order import cancel_and_restock
from apps.orders.domain.errors import OrderValidationError
from apps.orders.domain.state_machine import OrderLifecycleStateMachine, OrderStatus
from apps.orders.models import Order
from apps.orders.services.order_service import OrderService

logger = logging.getLogger("bakery.orders")


@dataclass(frozen=True)
class UpdateOrderStatusCommand:
    order_id: str
    status: str
    actor: object
    assigned_to_id: int | None = None
    estimated_delivery: datetime | None = None


class UpdateOrderStatusUseCase:
    """Operator-driven fulfilment moves: one stage forward, or cancel early."""

    @staticmethod
    @transaction.atomic
    def execute(cmd: UpdateOrderStatusCommand) -> Order:
        order = OrderService.lock(order_id=cmd.order_id)
        target = (cmd.status or "").strip().lower()
        previous = order.order_status
        OrderLifecycleStateMachine.assert_operator_transition(
            current=previous,
            target=target,
            payment_status=order.payment_status,
        )

        update_fields = []
        if cmd.assigned_to_id is not None:
            assignee = get_user_model().objects.filter(id=cmd.assigned_to_id).first()
            if assignee is None:
                raise OrderValidationError("Delivery person not found.", field="assignedTo")
            order.assigned_to = assignee
            update_fields.append("assigned_to")
        if cmd.estimated_delivery is not None:
            order.estimated_delivery = cmd.estimated_delivery
            update_fields.append("estimated_delivery")
        if update_fields:
            order.save(update_fields=[*update_fields, "updated_at"])

        if target == OrderStatus.CANCELLED:
            cancel_and_restock(order)
        else:
            order.order_status = target
            fields = ["order_status", "updated_at"]
            if target == OrderStatus.DELIVERED:
                order.delivered_at = timezone.now()
                fields.append("delivered_at")
            order.save(update_fields=fields)

        logger.info(
            "order_status_changed",
            extra={
                "order_id": order.order_id,
                "from_status": previous,
                "to_status": target,
                "actor_id": getattr(cmd.actor, "id", None),
            },
        )
        return OrderService.get(order_id=order.order_id)
