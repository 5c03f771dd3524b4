from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from django.db.models import Count, Q, Sum

from apps.orders.domain.state_machine import PaymentStatus
from apps.orders.models import Order


@dataclass(frozen=True)
class PaymentStats:
    total_payments: int
    pending: int
    verified: int
    total_amount: Decimal

    def as_dict(self) -> dict:
        return {
            "totalPayments": self.total_payments,
            "pending": self.pending,
            "verified": self.verified,
            "totalAmount": str(self.total_amount),
        }


class PaymentStatsUseCase:
    @staticmethod
    def execute() -> PaymentStats:
        paid = Q(payment_status=PaymentStatus.PAID)
        row = Order.objects.aggregate(
            total=Count("id"),
            pending=Count("id", filter=Q(payment_status=PaymentStatus.PENDING)),
            verified=Count("id", filter=paid),
            amount=Sum("total_amount", filter=paid),
        )
        return PaymentStats(
            total_payments=row["total"] or 0,
            pending=row["pending"] or 0,
            verified=row["verified"] or 0,
            total_amount=row["amount"] or Decimal("0"),
        )
