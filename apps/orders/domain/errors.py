from __future__ import annotations


class OrderDomainError(ValueError):
    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field


class OrderValidationError(OrderDomainError):
    pass


class OrderNotFoundError(OrderDomainError):
    def __init__(self, message: str = "Order not found", *, field: str | None = None):
        super().__init__(message, field=field)


class InvalidTransitionError(OrderDomainError):
    def __init__(self, message: str, *, current: str = "", target: str = ""):
        super().__init__(message)
        self.current = current
        self.target = target


class ProductUnavailableError(OrderDomainError):
    def __init__(self, product_id, message: str | None = None):
        super().__init__(message or f"Product {product_id} not available", field="items")
        self.product_id = product_id
