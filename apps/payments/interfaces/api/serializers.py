from __future__ import annotations

from rest_framework import serializers

from apps.payments.domain.methods import PaymentMethod


class ProcessPaymentSerializer(serializers.Serializer):
    orderId = serializers.CharField(max_length=40)
    paymentMethod = serializers.ChoiceField(choices=[choice.value for choice in PaymentMethod])
    transactionId = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    phoneNumber = serializers.CharField(max_length=32, required=False, allow_blank=True, allow_null=True)
