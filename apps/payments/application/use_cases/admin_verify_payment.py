from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import transaction
from django.utils import timezone

from apps.orders.domain.state_machine import OrderStatus, PaymentStatus
from apps.orders.models import Order
from apps.orders.services.order_service import OrderService

logger = logging.getLogger("bakery.payments")


@dataclass(frozen=True)
class AdminVerifyPaymentCommand:
    order_id: str
    actor: object


class AdminVerifyPaymentUseCase:
    @staticmethod
    @transaction.atomic
    def execute(cmd: AdminVerifyPaymentCommand) -> Order:
        order = OrderService.lock(order_id=cmd.order_id)
        if order.payment_status == PaymentStatus.PAID:
            return OrderService.get(order_id=order.order_id)

        order.payment_status = PaymentStatus.PAID
        update_fields = ["payment_status", "updated_at"]
        if order.paid_at is None:
            order.paid_at = timezone.now()
            update_fields.append("paid_at")
        # Only a pending order moves; later stages are never pulled back.
        if order.order_status == OrderStatus.PENDING:
            order.order_status = OrderStatus.CONFIRMED
            update_fields.append("order_status")
        order.save(update_fields=update_fields)

        logger.info(
            "payment_verified",
            extra={
                "order_id": order.order_id,
                "actor_id": getattr(cmd.actor, "id", None),
                "payment_method": order.payment_method,
            },
        )
        return OrderService.get(order_id=order.order_id)
