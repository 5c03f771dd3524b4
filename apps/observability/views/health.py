from __future__ import annotations

import logging

from django.db import DatabaseError, connection
from django.http import HttpRequest, JsonResponse

logger = logging.getLogger("bakery.request")


def healthz(request: HttpRequest) -> JsonResponse:
    return JsonResponse({"status": "ok"})


def readyz(request: HttpRequest) -> JsonResponse:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        db_ok = True
    except DatabaseError:
        logger.warning("readiness_db_unavailable", exc_info=True)
        db_ok = False

    return JsonResponse(
        {"status": "ok" if db_ok else "unavailable", "db": db_ok},
        status=200 if db_ok else 503,
    )
