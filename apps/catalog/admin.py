from django.contrib import admin

from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "category", "size", "price", "stock", "is_available", "created_at")
    search_fields = ("name", "description")
    list_filter = ("category", "size", "is_available")
