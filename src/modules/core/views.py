"""Operational endpoints."""

from __future__ import annotations

import time
from typing import Any, Callable, Dict

import structlog
from django.db import connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

from modules.stones.models import Stone

logger = structlog.get_logger(__name__)


def _database() -> Dict[str, Any]:
    with connections["default"].cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()
    return {}


def _inventory() -> Dict[str, Any]:
    return {"out_of_stock": Stone.objects.filter(quantity_in_stock=0).count()}


PROBES: Dict[str, Callable[[], Dict[str, Any]]] = {
    "database": _database,
    "inventory": _inventory,
}


def health_check(request: HttpRequest) -> JsonResponse:
    """GET /health: 200 when every probe passes, 503 otherwise.

    No authentication; used by load balancers and uptime checks.
    """
    services: Dict[str, Dict[str, Any]] = {}
    for name, probe in PROBES.items():
        started = time.monotonic()
        try:
            details = probe()
        except Exception:
            logger.exception("health.probe_failed", probe=name)
            services[name] = {"status": "down"}
            continue
        services[name] = {
            "status": "up",
            "response_time_ms": round((time.monotonic() - started) * 1000, 2),
            **details,
        }

    healthy = all(s["status"] == "up" for s in services.values())
    return JsonResponse(
        {
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=200 if healthy else 503,
    )
