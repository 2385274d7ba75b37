import time
import uuid
from contextvars import ContextVar
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class CorrelationIdMiddleware:
    """Tag every request with a correlation id.

    The id comes from the ``X-Request-ID`` header, or a fresh UUID4 when the
    caller sent none.  It is bound into structlog's context for the whole
    request, so service-layer log lines (``order.placed`` and friends)
    carry it, and it is echoed back in the response header.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        correlation_id_var.set(cid)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=cid)

        log = logger.bind(method=request.method, path=request.get_full_path())
        log.info("http.request_started")
        started = time.monotonic()

        response = self.get_response(request)

        log.info(
            "http.request_finished",
            status_code=response.status_code,
            duration_ms=round((time.monotonic() - started) * 1000, 2),
        )
        response[REQUEST_ID_HEADER] = cid
        return response
