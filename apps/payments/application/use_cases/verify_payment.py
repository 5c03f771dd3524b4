from __future__ import annotations

from dataclasses import dataclass

from apps.orders.domain.state_machine import PaymentStatus
from apps.orders.models import Order
from apps.orders.services.order_service import OrderService


@dataclass(frozen=True)
class VerifyPaymentCommand:
    order_id: str
    user: object


@dataclass(frozen=True)
class VerifyPaymentResult:
    order: Order
    verified: bool


class VerifyPaymentUseCase:
    @staticmethod
    def execute(cmd: VerifyPaymentCommand) -> VerifyPaymentResult:
        # Reports the stored status only; nothing is changed here.
        order = OrderService.get_for_user(order_id=cmd.order_id, user=cmd.user)
        return VerifyPaymentResult(order=order, verified=order.payment_status == PaymentStatus.PAID)
