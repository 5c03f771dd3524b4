from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from django.db import transaction
from django.db.models import F

from ..models import Product


class InventoryService:
    """Stock bookkeeping for order placement and cancellation."""

    @staticmethod
    def lock_products(product_ids: Iterable[int]) -> dict[int, Product]:
        """Lock the product rows for the current transaction, keyed by id."""
        ids = sorted({int(pid) for pid in product_ids})
        products = Product.objects.select_for_update().filter(id__in=ids).order_by("id")
        return {product.id: product for product in products}

    @staticmethod
    @transaction.atomic
    def apply_deltas(deltas: Iterable[tuple[int, int]]) -> None:
        """
        Add each (product_id, delta) to the product's stock.

        Lines for the same product are merged and applied as one `F()` update,
        so the write never depends on a stale in-memory stock value. There is no
        floor check; stock may go negative.
        """
        merged: dict[int, int] = defaultdict(int)
        for product_id, delta in deltas:
            merged[int(product_id)] += int(delta)
        for product_id in sorted(merged):
            delta = merged[product_id]
            if delta:
                Product.objects.filter(id=product_id).update(stock=F("stock") + delta)
