from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from .errors import InvalidTransitionError


class OrderStatus(StrEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(StrEnum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


@dataclass(frozen=True)
class TrackingInfo:
    progress: int
    message: str


_TRACKING: dict[str, TrackingInfo] = {
    OrderStatus.PENDING: TrackingInfo(10, "Order received"),
    OrderStatus.CONFIRMED: TrackingInfo(25, "Order confirmed"),
    OrderStatus.PREPARING: TrackingInfo(40, "Preparing your order"),
    OrderStatus.READY: TrackingInfo(60, "Ready for delivery"),
    OrderStatus.OUT_FOR_DELIVERY: TrackingInfo(80, "Out for delivery"),
    OrderStatus.DELIVERED: TrackingInfo(100, "Delivered"),
    OrderStatus.CANCELLED: TrackingInfo(0, "Cancelled"),
}
_UNKNOWN_TRACKING = TrackingInfo(0, "Unknown")

CANCELLABLE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.CONFIRMED})
TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})

# Forward moves an operator may make. Cancellation is only reachable from the
# same statuses a customer may cancel from.
_OPERATOR_TRANSITIONS: dict[str, frozenset[str]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY}),
    OrderStatus.READY: frozenset({OrderStatus.OUT_FOR_DELIVERY}),
    OrderStatus.OUT_FOR_DELIVERY: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

# Valid (order_status, payment_status) pairs:
#
#   order_status      pending  paid  failed  refunded
#   pending           yes      no    yes     no
#   confirmed         yes      yes   no      no
#   preparing         yes      yes   no      no
#   ready             yes      yes   no      no
#   out_for_delivery  yes      yes   no      no
#   delivered         yes      yes   no      no
#   cancelled         yes      yes   yes     yes
#
# A recorded non-cash payment always confirms the order, so pending+paid never
# occurs. Cash orders stay payment-pending until an admin verifies them, which
# may happen after delivery. Refunds only follow a cancellation.
_VALID_COMBINATIONS: dict[str, frozenset[str]] = {
    OrderStatus.PENDING: frozenset({PaymentStatus.PENDING, PaymentStatus.FAILED}),
    OrderStatus.CONFIRMED: frozenset({PaymentStatus.PENDING, PaymentStatus.PAID}),
    OrderStatus.PREPARING: frozenset({PaymentStatus.PENDING, PaymentStatus.PAID}),
    OrderStatus.READY: frozenset({PaymentStatus.PENDING, PaymentStatus.PAID}),
    OrderStatus.OUT_FOR_DELIVERY: frozenset({PaymentStatus.PENDING, PaymentStatus.PAID}),
    OrderStatus.DELIVERED: frozenset({PaymentStatus.PENDING, PaymentStatus.PAID}),
    OrderStatus.CANCELLED: frozenset(PaymentStatus),
}


def track(status: str) -> TrackingInfo:
    return _TRACKING.get(status, _UNKNOWN_TRACKING)


def is_valid_combination(order_status: str, payment_status: str) -> bool:
    return payment_status in _VALID_COMBINATIONS.get(order_status, frozenset())


class OrderLifecycleStateMachine:
    """
    Order status rules.

    - A customer may cancel while the order is pending or confirmed.
    - Operators move orders forward one stage at a time; delivered and
      cancelled are terminal.
    - Payment status is a separate axis; `is_valid_combination` documents which
      pairs may coexist.
    """

    @staticmethod
    def can_cancel(current: str) -> bool:
        return current in CANCELLABLE_STATUSES

    @staticmethod
    def assert_can_cancel(current: str) -> None:
        if current not in CANCELLABLE_STATUSES:
            raise InvalidTransitionError(
                "Cannot cancel order at this stage",
                current=current,
                target=OrderStatus.CANCELLED,
            )

    @staticmethod
    def assert_not_terminal(current: str) -> None:
        if current in TERMINAL_STATUSES:
            raise InvalidTransitionError(
                f"Order is already {current}",
                current=current,
            )

    @staticmethod
    def allowed_targets(current: str) -> frozenset[str]:
        return _OPERATOR_TRANSITIONS.get(current, frozenset())

    @staticmethod
    def assert_operator_transition(*, current: str, target: str, payment_status: str) -> None:
        if target not in _OPERATOR_TRANSITIONS:
            raise InvalidTransitionError(f"Unknown order status: {target}", current=current, target=target)
        if target not in _OPERATOR_TRANSITIONS.get(current, frozenset()):
            raise InvalidTransitionError(
                f"Cannot move order from {current} to {target}",
                current=current,
                target=target,
            )
        if not is_valid_combination(target, payment_status):
            raise InvalidTransitionError(
                f"Order cannot be {target} while payment is {payment_status}",
                current=current,
                target=target,
            )
