import time
from typing import Any, Dict

import structlog
from django.core.cache import cache
from django.db import connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.core.principal import principal_from_request

logger = structlog.get_logger(__name__)


def _timed(probe) -> Dict[str, Any]:
    start = time.monotonic()
    probe()
    return {
        "status": "up",
        "response_time_ms": round((time.monotonic() - start) * 1000, 2),
    }


def _probe_database() -> None:
    conn = connections["default"]
    conn.ensure_connection()
    with conn.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def _probe_cache() -> None:
    cache.set("_health_check", "ok", 10)
    if cache.get("_health_check") != "ok":
        raise ConnectionError("Cache read failed")


def health_check(request: HttpRequest) -> JsonResponse:
    """Liveness of the store's backing services (database and cache)."""
    services: Dict[str, Dict[str, Any]] = {}
    overall_healthy = True

    for name, probe in (("database", _probe_database), ("cache", _probe_cache)):
        try:
            services[name] = _timed(probe)
        except Exception:
            services[name] = {"status": "down"}
            overall_healthy = False
            logger.exception("health_check.probe_failed", service=name)

    state = "healthy" if overall_healthy else "unhealthy"
    logger.info("health_check.completed", status=state)

    return JsonResponse(
        {
            "status": state,
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=200 if overall_healthy else 503,
    )


class MeView(APIView):
    """The principal resolved from the bearer token.

    * No token  -> 401
    * Bad token -> 401
    * Valid JWT -> 200 with the caller's identity
    """

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        principal = principal_from_request(request)
        return Response(
            {
                "user_id": principal.user_id,
                "email": principal.email,
                "actor": principal.actor,
                "is_staff": request.user.is_staff,
            }
        )
