from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.views import APIView

from apps.orders.application.use_cases.cancel_order import CancelOrderCommand, CancelOrderUseCase
from apps.orders.application.use_cases.create_order import (
    CreateOrderCommand,
    CreateOrderUseCase,
    OrderLineInput,
)
from apps.orders.application.use_cases.track_order import TrackOrderCommand, TrackOrderUseCase
from apps.orders.application.use_cases.update_order_status import (
    UpdateOrderStatusCommand,
    UpdateOrderStatusUseCase,
)
from apps.orders.domain.errors import OrderDomainError
from apps.orders.interfaces.api.responses import api_error, api_success, domain_error_response
from apps.orders.interfaces.api.serializers import (
    AdminOrderSerializer,
    OrderCreateInputSerializer,
    OrderSerializer,
    OrderStatusUpdateSerializer,
    person_summary,
)
from apps.orders.services.order_service import OrderService


class OrderCreateAPI(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = OrderCreateInputSerializer(data=request.data)
        if not serializer.is_valid():
            return api_error(message="Invalid input.", fields=serializer.errors)

        data = serializer.validated_data
        try:
            order = CreateOrderUseCase.execute(
                CreateOrderCommand(
                    user=request.user,
                    items=[OrderLineInput(product_id=item["productId"], quantity=item["quantity"]) for item in data["items"]],
                    delivery_address=data["deliveryAddress"],
                    payment_method=data["paymentMethod"],
                    notes=data.get("notes") or "",
                )
            )
        except OrderDomainError as exc:
            return domain_error_response(exc)

        return api_success(
            message="Order created successfully",
            order=OrderSerializer(order).data,
            http_status=status.HTTP_201_CREATED,
        )


class MyOrdersAPI(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        orders = OrderService.list_for_user(request.user)
        return api_success(orders=OrderSerializer(orders, many=True).data)


class OrderDetailAPI(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, order_id: str):
        try:
            order = OrderService.get_for_user(order_id=order_id, user=request.user)
        except OrderDomainError as exc:
            return domain_error_response(exc)
        return api_success(order=OrderSerializer(order).data)


class OrderCancelAPI(APIView):
    permission_classes = [IsAuthenticated]

    def put(self, request, order_id: str):
        try:
            order = CancelOrderUseCase.execute(CancelOrderCommand(order_id=order_id, user=request.user))
        except OrderDomainError as exc:
            return domain_error_response(exc)
        return api_success(message="Order cancelled successfully", order=OrderSerializer(order).data)


class OrderTrackAPI(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, order_id: str):
        try:
            result = TrackOrderUseCase.execute(TrackOrderCommand(order_id=order_id, user=request.user))
        except OrderDomainError as exc:
            return domain_error_response(exc)

        return api_success(
            tracking={
                "progress": result.progress,
                "message": result.message,
                "estimatedDelivery": result.estimated_delivery,
                "deliveredAt": result.delivered_at,
                "assignedTo": person_summary(result.assigned_to),
            }
        )


class AdminOrderStatusAPI(APIView):
    permission_classes = [IsAdminUser]

    def put(self, request, order_id: str):
        serializer = OrderStatusUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return api_error(message="Invalid input.", fields=serializer.errors)

        data = serializer.validated_data
        try:
            order = UpdateOrderStatusUseCase.execute(
                UpdateOrderStatusCommand(
                    order_id=order_id,
                    status=data["status"],
                    actor=request.user,
                    assigned_to_id=data.get("assignedTo"),
                    estimated_delivery=data.get("estimatedDelivery"),
                )
            )
        except OrderDomainError as exc:
            return domain_error_response(exc)
        return api_success(order=AdminOrderSerializer(order).data)
