from __future__ import annotations

from apps.orders.domain.errors import OrderDomainError


class PaymentDomainError(OrderDomainError):
    pass


class PaymentMethodInvalidError(PaymentDomainError):
    def __init__(self, method: str):
        super().__init__(f"Unknown payment method: {method}", field="paymentMethod")
        self.method = method
