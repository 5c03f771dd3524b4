from __future__ import annotations

from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.views import APIView

from apps.orders.domain.errors import OrderDomainError
from apps.orders.domain.state_machine import PaymentStatus
from apps.orders.interfaces.api.responses import api_error, api_success, domain_error_response
from apps.orders.interfaces.api.serializers import AdminOrderSerializer, OrderSerializer
from apps.orders.services.order_service import OrderService
from apps.payments.application.facade import PaymentMethodFacade
from apps.payments.application.use_cases.admin_verify_payment import (
    AdminVerifyPaymentCommand,
    AdminVerifyPaymentUseCase,
)
from apps.payments.application.use_cases.payment_stats import PaymentStatsUseCase
from apps.payments.application.use_cases.process_payment import (
    ProcessPaymentCommand,
    ProcessPaymentUseCase,
)
from apps.payments.application.use_cases.verify_payment import (
    VerifyPaymentCommand,
    VerifyPaymentUseCase,
)
from apps.payments.interfaces.api.serializers import ProcessPaymentSerializer


class PaymentMethodsAPI(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return api_success(methods=PaymentMethodFacade.available_methods())


class ProcessPaymentAPI(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = ProcessPaymentSerializer(data=request.data)
        if not serializer.is_valid():
            return api_error(message="Invalid input.", fields=serializer.errors)

        data = serializer.validated_data
        try:
            result = ProcessPaymentUseCase.execute(
                ProcessPaymentCommand(
                    order_id=data["orderId"],
                    user=request.user,
                    payment_method=data["paymentMethod"],
                    transaction_id=data.get("transactionId"),
                    phone_number=data.get("phoneNumber"),
                )
            )
        except OrderDomainError as exc:
            return domain_error_response(exc)

        return api_success(
            message="Payment processed successfully",
            order=OrderSerializer(result.order).data,
            paymentInstructions=result.instructions,
        )


class VerifyPaymentAPI(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, order_id: str):
        try:
            result = VerifyPaymentUseCase.execute(VerifyPaymentCommand(order_id=order_id, user=request.user))
        except OrderDomainError as exc:
            return domain_error_response(exc)
        return api_success(verified=result.verified, order=OrderSerializer(result.order).data)


class AdminPaymentListAPI(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request):
        payment_status = (request.query_params.get("status") or "").strip().lower() or None
        if payment_status and payment_status not in {choice.value for choice in PaymentStatus}:
            return api_error(message="Invalid payment status.", field="status")
        orders = OrderService.list_all(payment_status=payment_status)
        return api_success(payments=AdminOrderSerializer(orders, many=True).data)


class AdminPaymentStatsAPI(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request):
        return api_success(stats=PaymentStatsUseCase.execute().as_dict())


class AdminVerifyPaymentAPI(APIView):
    permission_classes = [IsAdminUser]

    def post(self, request, order_id: str):
        try:
            order = AdminVerifyPaymentUseCase.execute(
                AdminVerifyPaymentCommand(order_id=order_id, actor=request.user)
            )
        except OrderDomainError as exc:
            return domain_error_response(exc)
        return api_success(message="Payment verified successfully", order=AdminOrderSerializer(order).data)
