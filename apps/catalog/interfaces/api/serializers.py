from __future__ import annotations

from rest_framework import serializers

from apps.catalog.models import Product


class ProductSerializer(serializers.ModelSerializer):
    isAvailable = serializers.BooleanField(source="is_available")
    createdAt = serializers.DateTimeField(source="created_at")

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "category",
            "size",
            "price",
            "images",
            "isAvailable",
            "stock",
            "rating",
            "createdAt",
        ]
        read_only_fields = fields


class ProductSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ["id", "name", "price", "images", "size"]
        read_only_fields = fields
