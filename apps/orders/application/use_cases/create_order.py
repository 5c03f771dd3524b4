from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import transaction

from apps.catalog.services.inventory_service import InventoryService
from apps.orders.domain.errors import OrderValidationError, ProductUnavailableError
from apps.orders.domain.policies import (
    compute_totals,
    generate_order_id,
    validate_payment_method,
    validate_quantity,
)
from apps.orders.domain.state_machine import OrderStatus, PaymentStatus
from apps.orders.models import Order, OrderItem
from apps.orders.services.order_service import OrderService

logger = logging.getLogger("bakery.orders")


@dataclass(frozen=True)
class OrderLineInput:
    product_id: object
    quantity: object


@dataclass(frozen=True)
class CreateOrderCommand:
    user: object
    items: list[OrderLineInput]
    delivery_address: dict
    payment_method: str
    notes: str = ""


_MAX_PRODUCT_ID = 2**63 - 1


def _parse_product_id(raw) -> int | None:
    try:
        product_id = int(raw)
    except (TypeError, ValueError):
        return None
    # Ids outside the integer column range cannot exist.
    if not 0 < product_id <= _MAX_PRODUCT_ID:
        return None
    return product_id


class CreateOrderUseCase:
    @staticmethod
    @transaction.atomic
    def execute(cmd: CreateOrderCommand) -> Order:
        if not cmd.items:
            raise OrderValidationError("Order must contain at least one item.", field="items")
        if not isinstance(cmd.delivery_address, dict):
            raise OrderValidationError("Delivery address must be an object.", field="deliveryAddress")
        payment_method = validate_payment_method(cmd.payment_method)

        quantities = [validate_quantity(item.quantity) for item in cmd.items]
        product_ids = [_parse_product_id(item.product_id) for item in cmd.items]
        products = InventoryService.lock_products(pid for pid in product_ids if pid is not None)

        # Every line is checked before anything is written.
        lines = []
        for item, product_id, quantity in zip(cmd.items, product_ids, quantities):
            product = products.get(product_id) if product_id is not None else None
            if product is None or not product.is_available:
                raise ProductUnavailableError(item.product_id)
            lines.append((product, quantity))

        totals = compute_totals((product.price, quantity) for product, quantity in lines)

        order = Order.objects.create(
            order_id=generate_order_id(),
            user=cmd.user,
            subtotal=totals.subtotal,
            delivery_fee=totals.delivery_fee,
            total_amount=totals.total_amount,
            delivery_address=cmd.delivery_address,
            payment_method=payment_method,
            payment_status=PaymentStatus.PENDING,
            order_status=OrderStatus.PENDING,
            notes=cmd.notes or "",
        )
        OrderItem.objects.bulk_create(
            [
                OrderItem(order=order, product=product, quantity=quantity, price=product.price, size=product.size)
                for product, quantity in lines
            ]
        )
        InventoryService.apply_deltas((product.id, -quantity) for product, quantity in lines)

        logger.info(
            "order_created",
            extra={
                "order_id": order.order_id,
                "user_id": getattr(cmd.user, "id", None),
                "total_amount": str(order.total_amount),
                "payment_method": payment_method,
            },
        )
        return OrderService.get(order_id=order.order_id)
