from __future__ import annotations

from rest_framework import serializers

from apps.catalog.interfaces.api.serializers import ProductSummarySerializer
from apps.customers.models import display_name, display_phone
from apps.orders.domain.state_machine import OrderStatus
from apps.orders.models import Order, OrderItem
from apps.payments.domain.methods import PaymentMethod


class OrderItemInputSerializer(serializers.Serializer):
    productId = serializers.CharField(max_length=64)
    quantity = serializers.IntegerField(min_value=1)


class OrderCreateInputSerializer(serializers.Serializer):
    items = serializers.ListField(child=OrderItemInputSerializer(), allow_empty=False)
    deliveryAddress = serializers.DictField()
    paymentMethod = serializers.ChoiceField(choices=[choice.value for choice in PaymentMethod])
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[choice.value for choice in OrderStatus])
    assignedTo = serializers.IntegerField(required=False, allow_null=True)
    estimatedDelivery = serializers.DateTimeField(required=False, allow_null=True)


def person_summary(user) -> dict | None:
    if user is None:
        return None
    return {
        "id": user.id,
        "fullName": display_name(user),
        "phone": display_phone(user),
        "email": user.email,
    }


class OrderItemSerializer(serializers.ModelSerializer):
    product = ProductSummarySerializer(read_only=True)

    class Meta:
        model = OrderItem
        fields = ["product", "quantity", "price", "size"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    orderId = serializers.CharField(source="order_id", read_only=True)
    user = serializers.IntegerField(source="user_id", read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)
    deliveryFee = serializers.DecimalField(source="delivery_fee", max_digits=12, decimal_places=2, read_only=True)
    totalAmount = serializers.DecimalField(source="total_amount", max_digits=12, decimal_places=2, read_only=True)
    deliveryAddress = serializers.JSONField(source="delivery_address", read_only=True)
    paymentMethod = serializers.CharField(source="payment_method", read_only=True)
    paymentStatus = serializers.CharField(source="payment_status", read_only=True)
    paymentDetails = serializers.SerializerMethodField()
    orderStatus = serializers.CharField(source="order_status", read_only=True)
    assignedTo = serializers.SerializerMethodField()
    estimatedDelivery = serializers.DateTimeField(source="estimated_delivery", read_only=True)
    deliveredAt = serializers.DateTimeField(source="delivered_at", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "orderId",
            "user",
            "items",
            "subtotal",
            "deliveryFee",
            "totalAmount",
            "deliveryAddress",
            "paymentMethod",
            "paymentStatus",
            "paymentDetails",
            "orderStatus",
            "assignedTo",
            "estimatedDelivery",
            "deliveredAt",
            "notes",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields

    def get_paymentDetails(self, obj: Order) -> dict:
        paid_at = obj.paid_at
        return {
            "transactionId": obj.payment_transaction_id or None,
            "accountNumber": obj.payment_account_number or None,
            "phoneNumber": obj.payment_phone_number or None,
            "bankName": obj.payment_bank_name or None,
            "receiptUrl": obj.payment_receipt_url or None,
            "paidAt": serializers.DateTimeField().to_representation(paid_at) if paid_at else None,
        }

    def get_assignedTo(self, obj: Order) -> dict | None:
        return person_summary(obj.assigned_to)


class AdminOrderSerializer(OrderSerializer):
    user = serializers.SerializerMethodField()

    def get_user(self, obj: Order) -> dict | None:
        return person_summary(obj.user)
