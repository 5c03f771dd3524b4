from __future__ import annotations

import logging

from django.http import HttpRequest, JsonResponse
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger("bakery.request")


def _error_payload(message: str, *, fields: dict | None = None) -> dict:
    payload: dict = {"success": False, "message": message, "error": {"message": message}}
    if fields:
        payload["error"]["fields"] = fields
    return payload


def handle_404(request: HttpRequest, exception=None) -> JsonResponse:
    return JsonResponse(_error_payload("Not found."), status=404)


def handle_500(request: HttpRequest) -> JsonResponse:
    logger.error(
        "server_error",
        extra={"status_code": 500, "error_code": "server_error", "path": request.path},
    )
    return JsonResponse(_error_payload("Internal server error."), status=500)


def api_exception_handler(exc, context):
    """
    Wrap DRF errors in the API envelope and turn anything unhandled into a 500
    that carries the exception message.
    """
    response = exception_handler(exc, context)
    if response is not None:
        data = response.data
        if isinstance(data, dict) and "detail" in data:
            response.data = _error_payload(str(data["detail"]))
        elif isinstance(data, dict):
            response.data = _error_payload("Invalid input.", fields=data)
        else:
            response.data = _error_payload(str(data))
        return response

    view = context.get("view")
    logger.exception(
        "api_unhandled_error",
        extra={"view": type(view).__name__ if view is not None else "", "error_code": "server_error"},
    )
    return Response(
        _error_payload(str(exc) or "Internal server error."),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
