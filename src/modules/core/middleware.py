"""Request-scoped logging context."""

from __future__ import annotations

import time
import uuid
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class CorrelationIdMiddleware:
    """Tag every log line of a request with its correlation id.

    The id is taken from ``X-Request-ID`` or generated (UUID4) and
    echoed back on the response.  Method and path are bound alongside
    it, so ``order.placed`` or ``ledger.reserved`` lines can be traced
    back to the API call that caused them.  Responses with a 4xx/5xx
    status are logged at warning level.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=cid,
            method=request.method,
            path=request.path,
        )

        started = time.monotonic()
        response = self.get_response(request)
        elapsed_ms = round((time.monotonic() - started) * 1000, 2)

        log = logger.warning if response.status_code >= 400 else logger.info
        log("request.finished", status_code=response.status_code, duration_ms=elapsed_ms)

        response[REQUEST_ID_HEADER] = cid
        structlog.contextvars.clear_contextvars()
        return response
