from django.urls import path

from .views import BreadPricingAPI, ProductDetailAPI, ProductListAPI

urlpatterns = [
    path("products/", ProductListAPI.as_view(), name="api_products"),
    path("products/bread-pricing/", BreadPricingAPI.as_view(), name="api_products_bread_pricing"),
    path("products/<int:product_id>/", ProductDetailAPI.as_view(), name="api_product_detail"),
]
