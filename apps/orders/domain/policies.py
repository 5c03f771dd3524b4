from __future__ import annotations

import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable
from uuid import uuid4

from django.conf import settings

from apps.payments.domain.methods import PaymentMethod

from .errors import OrderValidationError

ORDER_ID_PREFIX = "ORD"


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    delivery_fee: Decimal
    total_amount: Decimal


def delivery_fee_amount() -> Decimal:
    return Decimal(str(getattr(settings, "BAKERY_DELIVERY_FEE", "20")))


def free_delivery_threshold() -> Decimal:
    return Decimal(str(getattr(settings, "BAKERY_FREE_DELIVERY_THRESHOLD", "100")))


def delivery_fee_for(subtotal: Decimal) -> Decimal:
    # Strictly above the threshold; exactly 100 still pays delivery.
    if subtotal > free_delivery_threshold():
        return Decimal("0")
    return delivery_fee_amount()


def compute_totals(lines: Iterable[tuple[Decimal, int]]) -> OrderTotals:
    """Totals for (unit_price, quantity) lines."""
    subtotal = sum((Decimal(price) * quantity for price, quantity in lines), Decimal("0"))
    fee = delivery_fee_for(subtotal)
    return OrderTotals(subtotal=subtotal, delivery_fee=fee, total_amount=subtotal + fee)


def generate_order_id(*, now_ms: int | None = None) -> str:
    """`ORD-<epoch millis>-<random hex>`; the hex suffix carries 40 random bits."""
    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{ORDER_ID_PREFIX}-{timestamp}-{uuid4().hex[:10].upper()}"


def validate_payment_method(raw: str) -> str:
    method = (raw or "").strip().lower()
    if method not in {choice.value for choice in PaymentMethod}:
        raise OrderValidationError("Invalid payment method.", field="paymentMethod")
    return method


def validate_quantity(raw) -> int:
    try:
        quantity = int(raw)
    except (TypeError, ValueError):
        raise OrderValidationError("Quantity must be a whole number.", field="quantity") from None
    if quantity < 1:
        raise OrderValidationError("Quantity must be at least 1.", field="quantity")
    return quantity
