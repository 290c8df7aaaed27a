import time
from typing import Any, Dict

import structlog
from django.db import DatabaseError, connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

logger = structlog.get_logger(__name__)


def health_check(request: HttpRequest) -> JsonResponse:
    """Public liveness probe; reports whether the database answers."""
    services: Dict[str, Dict[str, Any]] = {}
    healthy = True

    try:
        start = time.monotonic()
        conn = connections["default"]
        conn.ensure_connection()
        with conn.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        services["database"] = {
            "status": "up",
            "response_time_ms": round((time.monotonic() - start) * 1000, 2),
        }
    except DatabaseError:
        services["database"] = {"status": "down"}
        healthy = False
        logger.exception("health.database_down")

    return JsonResponse(
        {
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=200 if healthy else 503,
    )
