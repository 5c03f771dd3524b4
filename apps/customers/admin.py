from django.contrib import admin

from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "full_name", "phone", "created_at")
    search_fields = ("full_name", "phone", "user__username", "user__email")
    list_select_related = ("user",)
