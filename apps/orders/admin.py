from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("product", "quantity", "price", "size")
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "order_id",
        "user",
        "total_amount",
        "payment_method",
        "payment_status",
        "order_status",
        "created_at",
    )
    search_fields = ("order_id", "user__username", "user__email", "payment_transaction_id")
    list_filter = ("order_status", "payment_status", "payment_method")
    list_select_related = ("user",)
    # Status and payment changes go through the API use cases.
    readonly_fields = (
        "order_id",
        "subtotal",
        "delivery_fee",
        "total_amount",
        "order_status",
        "payment_status",
        "payment_method",
        "payment_transaction_id",
        "payment_account_number",
        "payment_phone_number",
        "payment_bank_name",
        "payment_receipt_url",
        "paid_at",
        "delivered_at",
        "created_at",
        "updated_at",
    )
    inlines = [OrderItemInline]
