from __future__ import annotations

from django.db.models import QuerySet

from apps.orders.domain.errors import OrderNotFoundError
from apps.orders.models import Order


class OrderService:
    @staticmethod
    def _with_relations(queryset: QuerySet[Order]) -> QuerySet[Order]:
        return queryset.select_related(
            "user__customer_profile", "assigned_to__customer_profile"
        ).prefetch_related("items__product")

    @staticmethod
    def list_for_user(user) -> QuerySet[Order]:
        return OrderService._with_relations(Order.objects.filter(user=user)).order_by("-created_at", "-id")

    @staticmethod
    def list_all(*, payment_status: str | None = None) -> QuerySet[Order]:
        queryset = Order.objects.all()
        if payment_status:
            queryset = queryset.filter(payment_status=payment_status)
        return OrderService._with_relations(queryset).order_by("-created_at", "-id")

    @staticmethod
    def get_for_user(*, order_id: str, user) -> Order:
        order = OrderService._with_relations(Order.objects.filter(order_id=order_id, user=user)).first()
        if order is None:
            raise OrderNotFoundError()
        return order

    @staticmethod
    def get(*, order_id: str) -> Order:
        order = OrderService._with_relations(Order.objects.filter(order_id=order_id)).first()
        if order is None:
            raise OrderNotFoundError()
        return order

    @staticmethod
    def lock(*, order_id: str, user=None) -> Order:
        """Fetch and row-lock an order; must run inside `transaction.atomic`."""
        queryset = Order.objects.select_for_update().filter(order_id=order_id)
        if user is not None:
            queryset = queryset.filter(user=user)
        order = queryset.first()
        if order is None:
            raise OrderNotFoundError()
        return order
