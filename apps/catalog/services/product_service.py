from __future__ import annotations

from decimal import Decimal

from django.db.models import QuerySet

from ..models import Product

BREAD_PRICING = {
    Product.SIZE_SMALL: Decimal("5"),
    Product.SIZE_LARGE: Decimal("11"),
}


class ProductService:
    @staticmethod
    def list_products(*, category: str | None = None, available_only: bool = True) -> QuerySet[Product]:
        queryset = Product.objects.all().order_by("-created_at", "-id")
        if category:
            queryset = queryset.filter(category=category)
        if available_only:
            queryset = queryset.filter(is_available=True)
        return queryset

    @staticmethod
    def get_product(product_id) -> Product | None:
        try:
            return Product.objects.filter(id=int(product_id)).first()
        except (TypeError, ValueError):
            return None

    @staticmethod
    def bread_pricing() -> dict[str, Decimal]:
        return dict(BREAD_PRICING)
