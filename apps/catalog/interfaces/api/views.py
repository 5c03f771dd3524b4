from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.catalog.interfaces.api.serializers import ProductSerializer
from apps.catalog.services.product_service import ProductService


class ProductListAPI(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        category = (request.query_params.get("category") or "").strip().lower() or None
        include_unavailable = request.query_params.get("all") in {"1", "true"}
        products = ProductService.list_products(category=category, available_only=not include_unavailable)
        return Response({"success": True, "products": ProductSerializer(products, many=True).data})


class ProductDetailAPI(APIView):
    permission_classes = [AllowAny]

    def get(self, request, product_id: int):
        product = ProductService.get_product(product_id)
        if product is None:
            return Response(
                {"success": False, "error": {"message": "Product not found"}},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response({"success": True, "product": ProductSerializer(product).data})


class BreadPricingAPI(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        pricing = {size: str(price) for size, price in ProductService.bread_pricing().items()}
        return Response({"success": True, "pricing": pricing})
