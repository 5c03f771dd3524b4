from django.urls import path

from .views import (
    AdminOrderStatusAPI,
    MyOrdersAPI,
    OrderCancelAPI,
    OrderCreateAPI,
    OrderDetailAPI,
    OrderTrackAPI,
)

urlpatterns = [
    path("orders/", OrderCreateAPI.as_view(), name="api_orders_create"),
    path("orders/my-orders/", MyOrdersAPI.as_view(), name="api_orders_mine"),
    path("orders/<str:order_id>/", OrderDetailAPI.as_view(), name="api_order_detail"),
    path("orders/<str:order_id>/cancel/", OrderCancelAPI.as_view(), name="api_order_cancel"),
    path("orders/<str:order_id>/track/", OrderTrackAPI.as_view(), name="api_order_track"),
    path("admin/orders/<str:order_id>/status/", AdminOrderStatusAPI.as_view(), name="api_admin_order_status"),
]
