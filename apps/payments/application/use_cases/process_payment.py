from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import transaction
from django.utils import timezone

from apps.orders.domain.state_machine import OrderLifecycleStateMachine, OrderStatus, PaymentStatus
from apps.orders.models import Order
from apps.orders.services.order_service import OrderService
from apps.payments.application.facade import PaymentMethodFacade
from apps.payments.domain.methods import is_self_confirming

logger = logging.getLogger("bakery.payments")


@dataclass(frozen=True)
class ProcessPaymentCommand:
    order_id: str
    user: object
    payment_method: str
    transaction_id: str | None = None
    phone_number: str | None = None


@dataclass(frozen=True)
class ProcessPaymentResult:
    order: Order
    instructions: str | None


class ProcessPaymentUseCase:
    """
    Record the buyer's payment proof against their order.

    Selecting any non-cash method is taken as proof of payment: the order becomes
    paid and confirmed whether or not a transaction id was supplied. Cash leaves
    both statuses where they are. Delivered and cancelled orders accept no
    further payment.
    """

    @staticmethod
    @transaction.atomic
    def execute(cmd: ProcessPaymentCommand) -> ProcessPaymentResult:
        method = PaymentMethodFacade.get(cmd.payment_method)
        order = OrderService.lock(order_id=cmd.order_id, user=cmd.user)
        # A cancelled order has already returned its stock; reviving it would
        # let a second cancel restock again.
        OrderLifecycleStateMachine.assert_not_terminal(order.order_status)

        order.payment_method = method.code
        order.payment_transaction_id = cmd.transaction_id or ""
        order.payment_phone_number = cmd.phone_number or ""
        order.payment_account_number = method.account or ""
        order.payment_bank_name = method.name
        order.payment_receipt_url = ""
        order.paid_at = timezone.now()
        update_fields = [
            "payment_method",
            "payment_transaction_id",
            "payment_phone_number",
            "payment_account_number",
            "payment_bank_name",
            "payment_receipt_url",
            "paid_at",
            "updated_at",
        ]

        if is_self_confirming(method.code):
            order.payment_status = PaymentStatus.PAID
            order.order_status = OrderStatus.CONFIRMED
            update_fields += ["payment_status", "order_status"]

        order.save(update_fields=update_fields)
        logger.info(
            "payment_recorded",
            extra={
                "order_id": order.order_id,
                "payment_method": method.code,
                "payment_status": order.payment_status,
                "has_transaction_id": bool(cmd.transaction_id),
            },
        )
        return ProcessPaymentResult(
            order=OrderService.get(order_id=order.order_id),
            instructions=method.instructions,
        )
