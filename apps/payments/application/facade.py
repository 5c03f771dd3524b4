from __future__ import annotations

from apps.payments.domain.errors import PaymentMethodInvalidError
from apps.payments.domain.methods import PAYMENT_METHODS, PaymentMethodInfo


class PaymentMethodFacade:
    """Read access to the static payment method table."""

    _registry = PAYMENT_METHODS

    @classmethod
    def get(cls, method_code: str) -> PaymentMethodInfo:
        key = (method_code or "").strip().lower()
        if key not in cls._registry:
            raise PaymentMethodInvalidError(method_code)
        return cls._registry[key]

    @classmethod
    def available_methods(cls) -> dict[str, dict]:
        return {str(code): info.as_dict() for code, info in cls._registry.items()}
