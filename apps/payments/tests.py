from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase
from rest_framework.test import APIClient

from apps.catalog.models import Product
from apps.customers.models import Customer
from apps.orders.application.use_cases.cancel_order import CancelOrderCommand, CancelOrderUseCase
from apps.orders.application.use_cases.create_order import (
    CreateOrderCommand,
    CreateOrderUseCase,
    OrderLineInput,
)
from apps.orders.domain.errors import InvalidTransitionError, OrderNotFoundError
from apps.orders.models import Order
from apps.payments.application.facade import PaymentMethodFacade
from apps.payments.application.use_cases.admin_verify_payment import (
    AdminVerifyPaymentCommand,
    AdminVerifyPaymentUseCase,
)
from apps.payments.application.use_cases.payment_stats import PaymentStatsUseCase
from apps.payments.application.use_cases.process_payment import (
    ProcessPaymentCommand,
    ProcessPaymentUseCase,
)
from apps.payments.domain.errors import PaymentMethodInvalidError
from apps.payments.domain.methods import PAYMENT_METHODS, PaymentMethod


class PaymentMethodTableTests(SimpleTestCase):
    def test_table_covers_every_method(self):
        self.assertEqual(set(PAYMENT_METHODS), {choice.value for choice in PaymentMethod})

    def test_table_is_read_only(self):
        with self.assertRaises(TypeError):
            PAYMENT_METHODS["bitcoin"] = PAYMENT_METHODS["cash"]

    def test_known_accounts(self):
        self.assertEqual(PaymentMethodFacade.get("telebirr").account, "0969377085")
        self.assertEqual(PaymentMethodFacade.get("CBE").account, "1000668411901")
        self.assertIsNone(PaymentMethodFacade.get("cash").account)
        self.assertEqual(PaymentMethodFacade.get("dashen").instructions, "Coming Soon")
        self.assertEqual(PaymentMethodFacade.get("other").account, "Contact for details")

    def test_unknown_method(self):
        with self.assertRaises(PaymentMethodInvalidError):
            PaymentMethodFacade.get("paypal")

    def test_available_methods_shape(self):
        methods = PaymentMethodFacade.available_methods()
        self.assertEqual(
            methods["mpesa"],
            {"name": "M-Pesa Safari", "account": "0706377085", "instructions": "Send payment to M-Pesa 0706377085"},
        )


class PaymentUseCaseTests(TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = get_user_model().objects.create_user(username="buyer", password="StrongPass12345!")
        self.staff = get_user_model().objects.create_user(username="staff", password="x", is_staff=True)
        self.product = Product.objects.create(name="Dabo", size="small", price=Decimal("10.00"), stock=40)
        self.order = self._order(quantity=3)

    def _order(self, quantity: int, user=None) -> Order:
        return CreateOrderUseCase.execute(
            CreateOrderCommand(
                user=user or self.user,
                items=[OrderLineInput(product_id=self.product.id, quantity=quantity)],
                delivery_address={"street": "A", "city": "B"},
                payment_method="cash",
            )
        )

    def test_non_cash_payment_confirms_order(self):
        result = ProcessPaymentUseCase.execute(
            ProcessPaymentCommand(
                order_id=self.order.order_id,
                user=self.user,
                payment_method="telebirr",
                transaction_id="TX1",
            )
        )
        order = result.order
        self.assertEqual(order.payment_status, "paid")
        self.assertEqual(order.order_status, "confirmed")
        self.assertEqual(order.payment_method, "telebirr")
        self.assertEqual(order.payment_transaction_id, "TX1")
        self.assertEqual(order.payment_account_number, "0969377085")
        self.assertEqual(order.payment_bank_name, "Telebirr")
        self.assertIsNotNone(order.paid_at)
        self.assertEqual(result.instructions, "Send payment to Telebirr 0969377085")

    def test_non_cash_payment_without_transaction_id_still_paid(self):
        for method in ["cbe", "mpesa", "abisnya", "enat", "dashen", "other"]:
            order = self._order(quantity=1)
            result = ProcessPaymentUseCase.execute(
                ProcessPaymentCommand(order_id=order.order_id, user=self.user, payment_method=method)
            )
            self.assertEqual(result.order.payment_status, "paid", method)
            self.assertEqual(result.order.order_status, "confirmed", method)

    def test_cash_payment_leaves_statuses(self):
        result = ProcessPaymentUseCase.execute(
            ProcessPaymentCommand(
                order_id=self.order.order_id,
                user=self.user,
                payment_method="cash",
                phone_number="0911223344",
            )
        )
        self.assertEqual(result.order.payment_status, "pending")
        self.assertEqual(result.order.order_status, "pending")
        self.assertEqual(result.order.payment_bank_name, "Cash on Delivery")
        self.assertEqual(result.order.payment_phone_number, "0911223344")
        self.assertIsNone(result.instructions)

    def test_cash_payment_does_not_revert_confirmed_order(self):
        Order.objects.filter(id=self.order.id).update(order_status="preparing", payment_status="paid")
        result = ProcessPaymentUseCase.execute(
            ProcessPaymentCommand(order_id=self.order.order_id, user=self.user, payment_method="cash")
        )
        self.assertEqual(result.order.order_status, "preparing")
        self.assertEqual(result.order.payment_status, "paid")

    def test_non_cash_payment_on_preparing_order_confirms_without_touching_stock(self):
        Order.objects.filter(id=self.order.id).update(order_status="preparing")
        result = ProcessPaymentUseCase.execute(
            ProcessPaymentCommand(order_id=self.order.order_id, user=self.user, payment_method="cbe")
        )
        self.assertEqual(result.order.payment_status, "paid")
        self.assertEqual(result.order.order_status, "confirmed")
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 37)

    def test_payment_rejected_for_cancelled_order(self):
        CancelOrderUseCase.execute(CancelOrderCommand(order_id=self.order.order_id, user=self.user))
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 40)

        for method in ["telebirr", "cash"]:
            with self.assertRaises(InvalidTransitionError):
                ProcessPaymentUseCase.execute(
                    ProcessPaymentCommand(order_id=self.order.order_id, user=self.user, payment_method=method)
                )
        self.order.refresh_from_db()
        self.assertEqual(self.order.order_status, "cancelled")
        self.assertEqual(self.order.payment_status, "pending")
        self.assertEqual(self.order.payment_method, "cash")

        # Still cancelled, so a second cancel cannot restock again.
        with self.assertRaises(InvalidTransitionError):
            CancelOrderUseCase.execute(CancelOrderCommand(order_id=self.order.order_id, user=self.user))
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 40)

    def test_payment_rejected_for_delivered_order(self):
        Order.objects.filter(id=self.order.id).update(order_status="delivered")
        with self.assertRaises(InvalidTransitionError):
            ProcessPaymentUseCase.execute(
                ProcessPaymentCommand(order_id=self.order.order_id, user=self.user, payment_method="telebirr")
            )
        self.order.refresh_from_db()
        self.assertEqual(self.order.order_status, "delivered")
        self.assertEqual(self.order.payment_status, "pending")
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 37)

    def test_process_payment_requires_ownership(self):
        other = get_user_model().objects.create_user(username="other", password="x")
        with self.assertRaises(OrderNotFoundError):
            ProcessPaymentUseCase.execute(
                ProcessPaymentCommand(order_id=self.order.order_id, user=other, payment_method="cbe")
            )
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, "pending")

    def test_admin_verify_marks_cash_order_paid(self):
        order = AdminVerifyPaymentUseCase.execute(
            AdminVerifyPaymentCommand(order_id=self.order.order_id, actor=self.staff)
        )
        self.assertEqual(order.payment_status, "paid")
        self.assertEqual(order.order_status, "confirmed")
        self.assertIsNotNone(order.paid_at)

    def test_admin_verify_keeps_later_stage(self):
        Order.objects.filter(id=self.order.id).update(order_status="out_for_delivery")
        order = AdminVerifyPaymentUseCase.execute(
            AdminVerifyPaymentCommand(order_id=self.order.order_id, actor=self.staff)
        )
        self.assertEqual(order.payment_status, "paid")
        self.assertEqual(order.order_status, "out_for_delivery")

    def test_stats(self):
        big = self._order(quantity=15)
        ProcessPaymentUseCase.execute(
            ProcessPaymentCommand(order_id=big.order_id, user=self.user, payment_method="cbe", transaction_id="T")
        )
        Order.objects.filter(id=self._order(quantity=1).id).update(payment_status="failed")

        stats = PaymentStatsUseCase.execute()
        self.assertEqual(stats.total_payments, 3)
        self.assertEqual(stats.pending, 1)
        self.assertEqual(stats.verified, 1)
        self.assertEqual(stats.total_amount, Decimal("150.00"))


class PaymentsApiTests(TestCase):
    def setUp(self) -> None:
        super().setUp()
        User = get_user_model()
        self.user = User.objects.create_user(username="0911000010", email="buyer@example.com", password="StrongPass12345!")
        Customer.objects.create(user=self.user, full_name="Abebe Kebede", phone="0911000010")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

        self.staff = User.objects.create_user(username="admin", password="x", is_staff=True)
        self.admin_client = APIClient()
        self.admin_client.force_authenticate(user=self.staff)

        self.product = Product.objects.create(name="Dabo", size="large", price=Decimal("10.00"), stock=40)
        created = self.client.post(
            "/api/orders/",
            data={
                "items": [{"productId": self.product.id, "quantity": 3}],
                "deliveryAddress": {"street": "A", "city": "B"},
                "paymentMethod": "cash",
            },
            format="json",
        )
        self.order_id = created.json()["order"]["orderId"]

    def test_methods_endpoint(self):
        response = self.client.get("/api/payments/methods/")
        self.assertEqual(response.status_code, 200)
        methods = response.json()["methods"]
        self.assertEqual(set(methods), {choice.value for choice in PaymentMethod})
        self.assertEqual(methods["telebirr"]["account"], "0969377085")
        self.assertIsNone(methods["cash"]["account"])

    def test_process_endpoint_telebirr(self):
        response = self.client.post(
            "/api/payments/process/",
            data={"orderId": self.order_id, "paymentMethod": "telebirr", "transactionId": "TX1"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertTrue(payload["success"])
        self.assertEqual(payload["paymentInstructions"], "Send payment to Telebirr 0969377085")
        order = payload["order"]
        self.assertEqual(order["paymentStatus"], "paid")
        self.assertEqual(order["orderStatus"], "confirmed")
        self.assertEqual(order["paymentDetails"]["transactionId"], "TX1")
        self.assertEqual(order["paymentDetails"]["accountNumber"], "0969377085")
        self.assertEqual(order["paymentDetails"]["bankName"], "Telebirr")
        self.assertIsNotNone(order["paymentDetails"]["paidAt"])

    def test_process_endpoint_errors(self):
        bad_method = self.client.post(
            "/api/payments/process/",
            data={"orderId": self.order_id, "paymentMethod": "paypal"},
            format="json",
        )
        self.assertEqual(bad_method.status_code, 400)

        missing_order = self.client.post(
            "/api/payments/process/",
            data={"orderId": "ORD-0-NOPE", "paymentMethod": "cbe"},
            format="json",
        )
        self.assertEqual(missing_order.status_code, 404)

    def test_process_endpoint_rejects_cancelled_order(self):
        self.assertEqual(self.client.put(f"/api/orders/{self.order_id}/cancel/").status_code, 200)
        response = self.client.post(
            "/api/payments/process/",
            data={"orderId": self.order_id, "paymentMethod": "telebirr", "transactionId": "TX9"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()["success"])
        self.assertEqual(self.client.put(f"/api/orders/{self.order_id}/cancel/").status_code, 400)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 40)

    def test_verify_endpoint_reports_stored_status(self):
        before = self.client.post(f"/api/payments/verify/{self.order_id}/")
        self.assertEqual(before.status_code, 200)
        self.assertFalse(before.json()["verified"])
        self.assertEqual(Order.objects.get(order_id=self.order_id).payment_status, "pending")

        self.client.post(
            "/api/payments/process/",
            data={"orderId": self.order_id, "paymentMethod": "mpesa"},
            format="json",
        )
        after = self.client.post(f"/api/payments/verify/{self.order_id}/")
        self.assertTrue(after.json()["verified"])

        self.assertEqual(self.client.post("/api/payments/verify/ORD-0-NOPE/").status_code, 404)

    def test_admin_payments_list(self):
        response = self.admin_client.get("/api/admin/payments/")
        self.assertEqual(response.status_code, 200)
        payments = response.json()["payments"]
        self.assertEqual(len(payments), 1)
        self.assertEqual(payments[0]["orderId"], self.order_id)
        self.assertEqual(payments[0]["user"]["fullName"], "Abebe Kebede")
        self.assertEqual(payments[0]["user"]["phone"], "0911000010")

        paid_only = self.admin_client.get("/api/admin/payments/?status=paid")
        self.assertEqual(paid_only.json()["payments"], [])
        self.assertEqual(self.admin_client.get("/api/admin/payments/?status=lost").status_code, 400)

    def test_admin_endpoints_need_staff(self):
        self.assertEqual(self.client.get("/api/admin/payments/").status_code, 403)
        self.assertEqual(self.client.get("/api/admin/payments/stats/").status_code, 403)
        self.assertEqual(self.client.post(f"/api/admin/payments/{self.order_id}/verify/").status_code, 403)

    def test_admin_verify_and_stats(self):
        stats = self.admin_client.get("/api/admin/payments/stats/").json()["stats"]
        self.assertEqual(stats["totalPayments"], 1)
        self.assertEqual(stats["pending"], 1)
        self.assertEqual(stats["verified"], 0)
        self.assertEqual(Decimal(stats["totalAmount"]), Decimal("0"))

        verified = self.admin_client.post(f"/api/admin/payments/{self.order_id}/verify/")
        self.assertEqual(verified.status_code, 200)
        self.assertEqual(verified.json()["order"]["paymentStatus"], "paid")
        self.assertEqual(verified.json()["order"]["orderStatus"], "confirmed")

        stats = self.admin_client.get("/api/admin/payments/stats/").json()["stats"]
        self.assertEqual(stats["pending"], 0)
        self.assertEqual(stats["verified"], 1)
        self.assertEqual(Decimal(stats["totalAmount"]), Decimal("50"))

        self.assertEqual(self.admin_client.post("/api/admin/payments/ORD-0-NOPE/verify/").status_code, 404)
