from __future__ import annotations

from decimal import Decimal

from django.contrib import admin
from django.contrib.auth import get_user_model
from django.test import RequestFactory, SimpleTestCase, TestCase, override_settings
from rest_framework.test import APIClient

from apps.catalog.models import Product
from apps.orders.admin import OrderItemInline
from apps.orders.application.use_cases.cancel_order import CancelOrderCommand, CancelOrderUseCase
from apps.orders.application.use_cases.create_order import (
    CreateOrderCommand,
    CreateOrderUseCase,
    OrderLineInput,
)
from apps.orders.application.use_cases.update_order_status import (
    UpdateOrderStatusCommand,
    UpdateOrderStatusUseCase,
)
from apps.orders.domain.errors import (
    InvalidTransitionError,
    OrderNotFoundError,
    OrderValidationError,
    ProductUnavailableError,
)
from apps.orders.domain.policies import compute_totals, delivery_fee_for, generate_order_id
from apps.orders.domain.state_machine import (
    OrderLifecycleStateMachine,
    OrderStatus,
    PaymentStatus,
    is_valid_combination,
    track,
)
from apps.orders.models import Order


def make_product(**overrides) -> Product:
    data = {
        "name": "Dabo",
        "category": Product.CATEGORY_BREAD,
        "size": Product.SIZE_SMALL,
        "price": Decimal("10.00"),
        "is_available": True,
        "stock": 50,
    }
    data.update(overrides)
    return Product.objects.create(**data)


class OrderPolicyTests(SimpleTestCase):
    def test_delivery_fee_threshold_is_strict(self):
        self.assertEqual(delivery_fee_for(Decimal("30")), Decimal("20"))
        self.assertEqual(delivery_fee_for(Decimal("100")), Decimal("20"))
        self.assertEqual(delivery_fee_for(Decimal("100.01")), Decimal("0"))

    def test_totals_add_fee_to_subtotal(self):
        totals = compute_totals([(Decimal("10"), 3), (Decimal("2.50"), 2)])
        self.assertEqual(totals.subtotal, Decimal("35.00"))
        self.assertEqual(totals.delivery_fee, Decimal("20"))
        self.assertEqual(totals.total_amount, Decimal("55.00"))

    @override_settings(BAKERY_DELIVERY_FEE="15", BAKERY_FREE_DELIVERY_THRESHOLD="200")
    def test_fee_and_threshold_come_from_settings(self):
        self.assertEqual(delivery_fee_for(Decimal("150")), Decimal("15"))
        self.assertEqual(delivery_fee_for(Decimal("250")), Decimal("0"))

    def test_order_ids_keep_prefix_and_do_not_collide(self):
        ids = {generate_order_id(now_ms=1700000000000) for _ in range(2000)}
        self.assertEqual(len(ids), 2000)
        for order_id in ids:
            self.assertTrue(order_id.startswith("ORD-1700000000000-"))


class OrderStateMachineTests(SimpleTestCase):
    def test_tracking_table(self):
        expected = {
            "pending": (10, "Order received"),
            "confirmed": (25, "Order confirmed"),
            "preparing": (40, "Preparing your order"),
            "ready": (60, "Ready for delivery"),
            "out_for_delivery": (80, "Out for delivery"),
            "delivered": (100, "Delivered"),
            "cancelled": (0, "Cancelled"),
            "lost_in_oven": (0, "Unknown"),
            "": (0, "Unknown"),
        }
        for status, (progress, message) in expected.items():
            info = track(status)
            self.assertEqual((info.progress, info.message), (progress, message), status)

    def test_only_pending_and_confirmed_can_be_cancelled(self):
        for status in OrderStatus:
            expected = status in {OrderStatus.PENDING, OrderStatus.CONFIRMED}
            self.assertEqual(OrderLifecycleStateMachine.can_cancel(status), expected, status)
        with self.assertRaises(InvalidTransitionError):
            OrderLifecycleStateMachine.assert_can_cancel(OrderStatus.PREPARING)

    def test_operator_cannot_skip_stages_or_leave_terminal_states(self):
        OrderLifecycleStateMachine.assert_operator_transition(
            current="confirmed", target="preparing", payment_status="paid"
        )
        with self.assertRaises(InvalidTransitionError):
            OrderLifecycleStateMachine.assert_operator_transition(
                current="pending", target="ready", payment_status="pending"
            )
        with self.assertRaises(InvalidTransitionError):
            OrderLifecycleStateMachine.assert_operator_transition(
                current="delivered", target="cancelled", payment_status="paid"
            )
        with self.assertRaises(InvalidTransitionError):
            OrderLifecycleStateMachine.assert_operator_transition(
                current="ready", target="shipped", payment_status="paid"
            )

    def test_terminal_statuses_refuse_further_changes(self):
        for status in (OrderStatus.DELIVERED, OrderStatus.CANCELLED):
            with self.assertRaises(InvalidTransitionError):
                OrderLifecycleStateMachine.assert_not_terminal(status)
        for status in (OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PREPARING):
            OrderLifecycleStateMachine.assert_not_terminal(status)

    def test_combination_table(self):
        self.assertFalse(is_valid_combination("pending", "paid"))
        self.assertTrue(is_valid_combination("pending", "pending"))
        self.assertTrue(is_valid_combination("delivered", "pending"))
        self.assertFalse(is_valid_combination("delivered", "refunded"))
        for payment_status in PaymentStatus:
            self.assertTrue(is_valid_combination("cancelled", payment_status))


class OrderLifecycleUseCaseTests(TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = get_user_model().objects.create_user(username="buyer", password="StrongPass12345!")
        self.bread = make_product(price=Decimal("10.00"), stock=50)

    def _create(self, *lines, method="cash", user=None) -> Order:
        return CreateOrderUseCase.execute(
            CreateOrderCommand(
                user=user or self.user,
                items=[OrderLineInput(product_id=product.id, quantity=qty) for product, qty in lines],
                delivery_address={"street": "A", "city": "B"},
                payment_method=method,
            )
        )

    def test_create_small_order_charges_delivery(self):
        order = self._create((self.bread, 3))
        self.assertEqual(order.subtotal, Decimal("30.00"))
        self.assertEqual(order.delivery_fee, Decimal("20.00"))
        self.assertEqual(order.total_amount, Decimal("50.00"))
        self.assertEqual(order.order_status, "pending")
        self.assertEqual(order.payment_status, "pending")
        self.bread.refresh_from_db()
        self.assertEqual(self.bread.stock, 47)

    def test_create_large_order_has_free_delivery(self):
        order = self._create((self.bread, 15))
        self.assertEqual(order.subtotal, Decimal("150.00"))
        self.assertEqual(order.delivery_fee, Decimal("0.00"))
        self.assertEqual(order.total_amount, Decimal("150.00"))

    def test_non_cash_orders_also_start_pending(self):
        order = self._create((self.bread, 1), method="telebirr")
        self.assertEqual(order.payment_status, "pending")
        self.assertEqual(order.order_status, "pending")

    def test_line_items_capture_price_and_size(self):
        order = self._create((self.bread, 2))
        self.bread.price = Decimal("12.00")
        self.bread.save()
        item = order.items.get()
        self.assertEqual(item.price, Decimal("10.00"))
        self.assertEqual(item.size, "small")
        order.refresh_from_db()
        self.assertEqual(order.total_amount, Decimal("40.00"))

    def test_stock_may_go_negative(self):
        scarce = make_product(name="Cake", price=Decimal("5.00"), stock=1)
        self._create((scarce, 4))
        scarce.refresh_from_db()
        self.assertEqual(scarce.stock, -3)

    def test_unavailable_product_aborts_whole_order(self):
        disabled = make_product(name="Old bun", is_available=False, stock=10)
        with self.assertRaises(ProductUnavailableError):
            self._create((self.bread, 2), (disabled, 1))
        self.assertFalse(Order.objects.exists())
        self.bread.refresh_from_db()
        self.assertEqual(self.bread.stock, 50)

    def test_missing_product_aborts_order(self):
        with self.assertRaises(ProductUnavailableError):
            CreateOrderUseCase.execute(
                CreateOrderCommand(
                    user=self.user,
                    items=[OrderLineInput(product_id="999999", quantity=1)],
                    delivery_address={},
                    payment_method="cash",
                )
            )

    def test_empty_items_and_bad_method_rejected(self):
        with self.assertRaises(OrderValidationError):
            CreateOrderUseCase.execute(
                CreateOrderCommand(user=self.user, items=[], delivery_address={}, payment_method="cash")
            )
        with self.assertRaises(OrderValidationError):
            self._create((self.bread, 1), method="bitcoin")

    def test_order_ids_are_unique(self):
        ids = {self._create((self.bread, 1)).order_id for _ in range(5)}
        self.assertEqual(len(ids), 5)
        for order_id in ids:
            self.assertTrue(order_id.startswith("ORD-"))

    def test_cancel_restores_each_line(self):
        roll = make_product(name="Roll", price=Decimal("3.00"), stock=20)
        order = self._create((self.bread, 3), (roll, 5))
        # Stock moves between order and cancel are not reconciled.
        Product.objects.filter(id=self.bread.id).update(stock=7)

        cancelled = CancelOrderUseCase.execute(CancelOrderCommand(order_id=order.order_id, user=self.user))

        self.assertEqual(cancelled.order_status, "cancelled")
        self.assertEqual(cancelled.payment_status, "pending")
        self.bread.refresh_from_db()
        roll.refresh_from_db()
        self.assertEqual(self.bread.stock, 10)
        self.assertEqual(roll.stock, 20)

    def test_cancel_confirmed_order_keeps_payment_status(self):
        order = self._create((self.bread, 1))
        Order.objects.filter(id=order.id).update(order_status="confirmed", payment_status="paid")
        cancelled = CancelOrderUseCase.execute(CancelOrderCommand(order_id=order.order_id, user=self.user))
        self.assertEqual(cancelled.order_status, "cancelled")
        self.assertEqual(cancelled.payment_status, "paid")

    def test_cancel_rejected_after_preparation_started(self):
        order = self._create((self.bread, 2))
        Order.objects.filter(id=order.id).update(order_status="preparing")
        with self.assertRaises(InvalidTransitionError):
            CancelOrderUseCase.execute(CancelOrderCommand(order_id=order.order_id, user=self.user))
        order.refresh_from_db()
        self.assertEqual(order.order_status, "preparing")
        self.bread.refresh_from_db()
        self.assertEqual(self.bread.stock, 48)

    def test_cancel_requires_ownership(self):
        other = get_user_model().objects.create_user(username="other", password="StrongPass12345!")
        order = self._create((self.bread, 1))
        with self.assertRaises(OrderNotFoundError):
            CancelOrderUseCase.execute(CancelOrderCommand(order_id=order.order_id, user=other))

    def test_operator_walks_order_to_delivery(self):
        staff = get_user_model().objects.create_user(username="staff", password="x", is_staff=True)
        courier = get_user_model().objects.create_user(username="courier", password="x")
        order = self._create((self.bread, 1))
        for status in ["confirmed", "preparing", "ready"]:
            order = UpdateOrderStatusUseCase.execute(
                UpdateOrderStatusCommand(order_id=order.order_id, status=status, actor=staff)
            )
        order = UpdateOrderStatusUseCase.execute(
            UpdateOrderStatusCommand(
                order_id=order.order_id, status="out_for_delivery", actor=staff, assigned_to_id=courier.id
            )
        )
        self.assertEqual(order.assigned_to_id, courier.id)
        order = UpdateOrderStatusUseCase.execute(
            UpdateOrderStatusCommand(order_id=order.order_id, status="delivered", actor=staff)
        )
        self.assertEqual(order.order_status, "delivered")
        self.assertIsNotNone(order.delivered_at)

    def test_operator_cancel_restores_stock(self):
        staff = get_user_model().objects.create_user(username="staff", password="x", is_staff=True)
        order = self._create((self.bread, 4))
        UpdateOrderStatusUseCase.execute(
            UpdateOrderStatusCommand(order_id=order.order_id, status="cancelled", actor=staff)
        )
        self.bread.refresh_from_db()
        self.assertEqual(self.bread.stock, 50)


class OrdersApiTests(TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.client = APIClient()
        self.user = get_user_model().objects.create_user(username="0911000001", password="StrongPass12345!")
        self.client.force_authenticate(user=self.user)
        self.product = make_product(price=Decimal("10.00"), stock=30)

    def _place(self, quantity=3, method="cash"):
        return self.client.post(
            "/api/orders/",
            data={
                "items": [{"productId": str(self.product.id), "quantity": quantity}],
                "deliveryAddress": {"street": "A", "city": "B"},
                "paymentMethod": method,
                "notes": "Ring twice",
            },
            format="json",
        )

    def test_create_order_contract(self):
        response = self._place()
        self.assertEqual(response.status_code, 201)
        payload = response.json()
        self.assertTrue(payload["success"])
        order = payload["order"]
        self.assertTrue(order["orderId"].startswith("ORD-"))
        self.assertEqual(Decimal(order["subtotal"]), Decimal("30"))
        self.assertEqual(Decimal(order["deliveryFee"]), Decimal("20"))
        self.assertEqual(Decimal(order["totalAmount"]), Decimal("50"))
        self.assertEqual(order["orderStatus"], "pending")
        self.assertEqual(order["paymentStatus"], "pending")
        self.assertEqual(order["deliveryAddress"], {"street": "A", "city": "B"})
        self.assertEqual(order["items"][0]["product"]["name"], "Dabo")
        self.assertEqual(order["items"][0]["quantity"], 3)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 27)

    def test_create_order_validation(self):
        bad_method = self._place(method="paypal")
        self.assertEqual(bad_method.status_code, 400)
        self.assertIn("paymentMethod", bad_method.json()["error"]["fields"])

        zero_qty = self._place(quantity=0)
        self.assertEqual(zero_qty.status_code, 400)

        no_items = self.client.post(
            "/api/orders/",
            data={"items": [], "deliveryAddress": {}, "paymentMethod": "cash"},
            format="json",
        )
        self.assertEqual(no_items.status_code, 400)

    def test_unavailable_product_returns_400(self):
        self.product.is_available = False
        self.product.save()
        response = self._place()
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], f"Product {self.product.id} not available")
        self.assertFalse(Order.objects.exists())

    def test_out_of_range_product_id_returns_400(self):
        huge_id = "9" * 30
        response = self.client.post(
            "/api/orders/",
            data={
                "items": [{"productId": huge_id, "quantity": 1}],
                "deliveryAddress": {"street": "A", "city": "B"},
                "paymentMethod": "cash",
            },
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], f"Product {huge_id} not available")
        self.assertFalse(Order.objects.exists())

    def test_my_orders_newest_first_and_scoped_to_owner(self):
        first = self._place().json()["order"]["orderId"]
        second = self._place(quantity=1).json()["order"]["orderId"]
        other = get_user_model().objects.create_user(username="0911000002", password="StrongPass12345!")
        CreateOrderUseCase.execute(
            CreateOrderCommand(
                user=other,
                items=[OrderLineInput(product_id=self.product.id, quantity=1)],
                delivery_address={},
                payment_method="cash",
            )
        )

        response = self.client.get("/api/orders/my-orders/")
        self.assertEqual(response.status_code, 200)
        ids = [order["orderId"] for order in response.json()["orders"]]
        self.assertEqual(ids, [second, first])

    def test_order_detail_and_404(self):
        order_id = self._place().json()["order"]["orderId"]
        response = self.client.get(f"/api/orders/{order_id}/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["order"]["orderId"], order_id)

        missing = self.client.get("/api/orders/ORD-0-NOPE/")
        self.assertEqual(missing.status_code, 404)
        self.assertFalse(missing.json()["success"])

    def test_cancel_endpoint(self):
        order_id = self._place().json()["order"]["orderId"]
        response = self.client.put(f"/api/orders/{order_id}/cancel/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["order"]["orderStatus"], "cancelled")
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 30)

        again = self.client.put(f"/api/orders/{order_id}/cancel/")
        self.assertEqual(again.status_code, 400)
        self.assertEqual(again.json()["message"], "Cannot cancel order at this stage")

    def test_cancel_preparing_order_rejected_unchanged(self):
        order_id = self._place().json()["order"]["orderId"]
        Order.objects.filter(order_id=order_id).update(order_status="preparing")
        response = self.client.put(f"/api/orders/{order_id}/cancel/")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(Order.objects.get(order_id=order_id).order_status, "preparing")
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 27)

    def test_track_endpoint(self):
        order_id = self._place().json()["order"]["orderId"]
        response = self.client.get(f"/api/orders/{order_id}/track/")
        self.assertEqual(response.status_code, 200)
        tracking = response.json()["tracking"]
        self.assertEqual(tracking["progress"], 10)
        self.assertEqual(tracking["message"], "Order received")
        self.assertIsNone(tracking["deliveredAt"])
        self.assertIsNone(tracking["assignedTo"])

        self.assertEqual(self.client.get("/api/orders/ORD-0-NOPE/track/").status_code, 404)

    def test_admin_status_endpoint(self):
        order_id = self._place().json()["order"]["orderId"]

        forbidden = self.client.put(f"/api/admin/orders/{order_id}/status/", data={"status": "confirmed"}, format="json")
        self.assertEqual(forbidden.status_code, 403)

        staff = get_user_model().objects.create_user(username="admin", password="x", is_staff=True)
        admin_client = APIClient()
        admin_client.force_authenticate(user=staff)

        skip = admin_client.put(f"/api/admin/orders/{order_id}/status/", data={"status": "ready"}, format="json")
        self.assertEqual(skip.status_code, 400)

        ok = admin_client.put(f"/api/admin/orders/{order_id}/status/", data={"status": "confirmed"}, format="json")
        self.assertEqual(ok.status_code, 200)
        self.assertEqual(ok.json()["order"]["orderStatus"], "confirmed")
        self.assertEqual(ok.json()["order"]["user"]["id"], self.user.id)

    def test_requires_authentication(self):
        anonymous = APIClient()
        self.assertEqual(anonymous.get("/api/orders/my-orders/").status_code, 401)


class OrderAdminTests(TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.staff = get_user_model().objects.create_superuser(username="root", password="x", email="root@example.com")
        self.request = RequestFactory().get("/admin/orders/order/")
        self.request.user = self.staff
        product = make_product(stock=10)
        self.order = CreateOrderUseCase.execute(
            CreateOrderCommand(
                user=self.staff,
                items=[OrderLineInput(product_id=product.id, quantity=2)],
                delivery_address={"street": "A"},
                payment_method="cash",
            )
        )

    def test_statuses_and_payment_fields_are_read_only(self):
        model_admin = admin.site._registry[Order]
        readonly = set(model_admin.get_readonly_fields(self.request, self.order))
        for field in (
            "order_status",
            "payment_status",
            "payment_method",
            "payment_transaction_id",
            "payment_account_number",
            "payment_phone_number",
            "payment_bank_name",
            "payment_receipt_url",
            "paid_at",
        ):
            self.assertIn(field, readonly)

    def test_line_items_cannot_be_added_or_removed(self):
        inline = OrderItemInline(Order, admin.site)
        self.assertFalse(inline.has_add_permission(self.request, self.order))
        self.assertFalse(inline.can_delete)
