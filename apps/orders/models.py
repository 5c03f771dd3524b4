from django.conf import settings
from django.db import models

from apps.orders.domain.state_machine import OrderStatus, PaymentStatus
from apps.payments.domain.methods import PaymentMethod


class Order(models.Model):
    STATUS_CHOICES = [
        (OrderStatus.PENDING, "Pending"),
        (OrderStatus.CONFIRMED, "Confirmed"),
        (OrderStatus.PREPARING, "Preparing"),
        (OrderStatus.READY, "Ready"),
        (OrderStatus.OUT_FOR_DELIVERY, "Out for delivery"),
        (OrderStatus.DELIVERED, "Delivered"),
        (OrderStatus.CANCELLED, "Cancelled"),
    ]

    PAYMENT_STATUS_CHOICES = [
        (PaymentStatus.PENDING, "Pending"),
        (PaymentStatus.PAID, "Paid"),
        (PaymentStatus.FAILED, "Failed"),
        (PaymentStatus.REFUNDED, "Refunded"),
    ]

    PAYMENT_METHOD_CHOICES = [
        (PaymentMethod.CASH, "Cash on Delivery"),
        (PaymentMethod.CBE, "Commercial Bank of Ethiopia"),
        (PaymentMethod.TELEBIRR, "Telebirr"),
        (PaymentMethod.MPESA, "M-Pesa Safari"),
        (PaymentMethod.ABISNYA, "Abisnya"),
        (PaymentMethod.ENAT, "Enat Bank"),
        (PaymentMethod.DASHEN, "Dashen Bank"),
        (PaymentMethod.OTHER, "Other"),
    ]

    order_id = models.CharField(max_length=40, unique=True, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="orders")
    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    delivery_fee = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    delivery_address = models.JSONField(default=dict, blank=True)

    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES)
    payment_status = models.CharField(
        max_length=20, choices=PAYMENT_STATUS_CHOICES, default=PaymentStatus.PENDING
    )
    payment_transaction_id = models.CharField(max_length=100, blank=True, default="")
    payment_account_number = models.CharField(max_length=100, blank=True, default="")
    payment_phone_number = models.CharField(max_length=32, blank=True, default="")
    payment_bank_name = models.CharField(max_length=100, blank=True, default="")
    payment_receipt_url = models.URLField(max_length=500, blank=True, default="")
    paid_at = models.DateTimeField(null=True, blank=True)

    order_status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=OrderStatus.PENDING)
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_orders",
    )
    estimated_delivery = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["user", "created_at"], name="orders_user_created_idx"),
            models.Index(fields=["payment_status"], name="orders_payment_status_idx"),
            models.Index(fields=["order_status"], name="orders_order_status_idx"),
        ]

    def __str__(self) -> str:
        return self.order_id


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey("catalog.Product", on_delete=models.PROTECT, related_name="order_items")
    quantity = models.PositiveIntegerField()
    price = models.DecimalField(max_digits=12, decimal_places=2)
    size = models.CharField(max_length=10, blank=True, default="")

    def __str__(self) -> str:
        return f"{self.order} - {self.product} x{self.quantity}"
