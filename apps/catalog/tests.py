from __future__ import annotations

from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIClient

from apps.catalog.models import Product
from apps.catalog.services.inventory_service import InventoryService


class InventoryServiceTests(TestCase):
    def test_deltas_for_same_product_are_merged(self):
        product = Product.objects.create(name="Dabo", size="small", price=Decimal("5.00"), stock=10)
        InventoryService.apply_deltas([(product.id, -3), (product.id, -4), (product.id, 2)])
        product.refresh_from_db()
        self.assertEqual(product.stock, 5)

    def test_no_floor_on_stock(self):
        product = Product.objects.create(name="Dabo", size="small", price=Decimal("5.00"), stock=1)
        InventoryService.apply_deltas([(product.id, -5)])
        product.refresh_from_db()
        self.assertEqual(product.stock, -4)

    def test_lock_products_skips_missing_ids(self):
        product = Product.objects.create(name="Dabo", size="small", price=Decimal("5.00"))
        locked = InventoryService.lock_products([product.id, 424242])
        self.assertEqual(list(locked), [product.id])


class CatalogApiTests(TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.client = APIClient()
        self.bread = Product.objects.create(name="Dabo", size="small", price=Decimal("5.00"), stock=10)
        self.cake = Product.objects.create(
            name="Black forest", category=Product.CATEGORY_CAKE, size="large", price=Decimal("250.00")
        )
        self.hidden = Product.objects.create(
            name="Seasonal bun", size="medium", price=Decimal("7.00"), is_available=False
        )

    def test_list_is_public_and_hides_unavailable(self):
        response = self.client.get("/api/products/")
        self.assertEqual(response.status_code, 200)
        names = {product["name"] for product in response.json()["products"]}
        self.assertEqual(names, {"Dabo", "Black forest"})

    def test_filter_by_category(self):
        response = self.client.get("/api/products/?category=cake")
        products = response.json()["products"]
        self.assertEqual([product["name"] for product in products], ["Black forest"])
        self.assertTrue(products[0]["isAvailable"])

    def test_detail_and_missing(self):
        response = self.client.get(f"/api/products/{self.bread.id}/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["product"]["stock"], 10)
        self.assertEqual(self.client.get("/api/products/999999/").status_code, 404)

    def test_bread_pricing(self):
        response = self.client.get("/api/products/bread-pricing/")
        self.assertEqual(response.json()["pricing"], {"small": "5", "large": "11"})
