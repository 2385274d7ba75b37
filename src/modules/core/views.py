"""Operational endpoints: health probe and the caller's identity."""

import time
from typing import Any, Callable, Dict

import structlog
from django.core.cache import cache
from django.db import connections
from django.db.models import Count, Q
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.core.models import EventStatus, OutboxEvent
from modules.participants.repositories.django_repository import (
    ParticipantDjangoRepository,
)
from modules.participants.services import ParticipantService

logger = structlog.get_logger(__name__)


def _ping_database() -> Dict[str, Any]:
    conn = connections["default"]
    conn.ensure_connection()
    with conn.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()
    return {}


def _ping_cache() -> Dict[str, Any]:
    cache.set("_health_check", "ok", 10)
    if cache.get("_health_check") != "ok":
        raise ConnectionError("Cache read failed")
    return {}


def _outbox_backlog() -> Dict[str, Any]:
    """Pending and failed outbox rows; a growing backlog means the relay is stalled."""
    return OutboxEvent.objects.aggregate(
        pending=Count("id", filter=Q(status=EventStatus.PENDING)),
        failed=Count("id", filter=Q(status=EventStatus.FAILED)),
    )


PROBES: Dict[str, Callable[[], Dict[str, Any]]] = {
    "database": _ping_database,
    "cache": _ping_cache,
    "outbox": _outbox_backlog,
}


def _run_probe(name: str, probe: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
    start = time.monotonic()
    try:
        details = probe()
    except Exception as exc:
        logger.error("health.probe_failed", service=name, error=str(exc))
        return {"status": "down"}
    return {
        "status": "up",
        "response_time_ms": round((time.monotonic() - start) * 1000, 2),
        **details,
    }


def health_check(request: HttpRequest) -> JsonResponse:
    services = {name: _run_probe(name, probe) for name, probe in PROBES.items()}
    healthy = all(result["status"] == "up" for result in services.values())

    logger.info("health.checked", status="healthy" if healthy else "unhealthy")

    return JsonResponse(
        {
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=200 if healthy else 503,
    )


class MeView(APIView):
    """The authenticated principal and the role it has chosen.

    * No token  -> 401
    * Valid JWT -> 200 ``{"principal": ..., "role": ...}``
    """

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        principal = request.user.get_username()
        service = ParticipantService(repository=ParticipantDjangoRepository())
        return Response(
            {
                "principal": principal,
                "role": service.get_role(principal),
            }
        )
