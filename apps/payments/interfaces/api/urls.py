from django.urls import path

from .views import (
    AdminPaymentListAPI,
    AdminPaymentStatsAPI,
    AdminVerifyPaymentAPI,
    PaymentMethodsAPI,
    ProcessPaymentAPI,
    VerifyPaymentAPI,
)

urlpatterns = [
    path("payments/methods/", PaymentMethodsAPI.as_view(), name="api_payment_methods"),
    path("payments/process/", ProcessPaymentAPI.as_view(), name="api_payment_process"),
    path("payments/verify/<str:order_id>/", VerifyPaymentAPI.as_view(), name="api_payment_verify"),
    path("admin/payments/", AdminPaymentListAPI.as_view(), name="api_admin_payments"),
    path("admin/payments/stats/", AdminPaymentStatsAPI.as_view(), name="api_admin_payment_stats"),
    path("admin/payments/<str:order_id>/verify/", AdminVerifyPaymentAPI.as_view(), name="api_admin_payment_verify"),
]
