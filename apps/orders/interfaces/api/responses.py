from __future__ import annotations

from rest_framework import status
from rest_framework.response import Response

from apps.orders.domain.errors import OrderDomainError, OrderNotFoundError


def api_success(*, http_status: int = status.HTTP_200_OK, **payload) -> Response:
    return Response({"success": True, **payload}, status=http_status)


def api_error(
    *,
    message: str,
    field: str | None = None,
    fields: dict | None = None,
    http_status: int = status.HTTP_400_BAD_REQUEST,
) -> Response:
    payload: dict = {"success": False, "message": message, "error": {"message": message}}
    if field:
        payload["error"]["field"] = field
    if fields:
        payload["error"]["fields"] = fields
    return Response(payload, status=http_status)


def domain_error_response(exc: OrderDomainError) -> Response:
    if isinstance(exc, OrderNotFoundError):
        return api_error(message=str(exc), http_status=status.HTTP_404_NOT_FOUND)
    return api_error(message=str(exc), field=getattr(exc, "field", None))
