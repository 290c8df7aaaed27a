import time
import uuid
from contextvars import ContextVar
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

logger = structlog.get_logger(__name__)

MAX_REQUEST_ID_LENGTH = 128


class CorrelationIdMiddleware:
    """Binds a correlation ID to every log line of a request.

    Reads the ``X-Request-ID`` header (generating a UUID4 when it is
    missing or oversized), stores it in a ContextVar and in the structlog
    context, and echoes it back in the ``X-Request-ID`` response header.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = request.META.get("HTTP_X_REQUEST_ID", "")
        if not cid or len(cid) > MAX_REQUEST_ID_LENGTH:
            cid = str(uuid.uuid4())
        correlation_id_var.set(cid)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=cid)

        start = time.monotonic()
        response = self.get_response(request)

        logger.info(
            "request.finished",
            method=request.method,
            path=request.path,
            status_code=response.status_code,
            duration_ms=round((time.monotonic() - start) * 1000, 2),
        )

        response["X-Request-ID"] = cid
        return response
