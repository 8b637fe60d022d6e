"""
Core views providing infrastructure endpoints.

Views here are not part of the read-state domain; they exist for
orchestration (Docker health checks, load balancers).
"""

from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import JsonResponse


def health_check(request):
    """
    Report database and cache connectivity.

    The database is required: if it cannot answer SELECT 1 the endpoint
    returns 503. The cache only backs sessions and is reported as
    degraded without failing the check.

    Example Response:
        {"status": "healthy", "database": "connected", "cache": "connected"}
    """
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "cache": "unknown",
    }

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        health_status["database"] = "connected"
    except DatabaseError:
        health_status["database"] = "disconnected"
        health_status["status"] = "unhealthy"

    try:
        cache.set("health_check", "ok", timeout=1)
        connected = cache.get("health_check") == "ok"
        health_status["cache"] = "connected" if connected else "disconnected"
    except Exception:
        # django-redis raises its own connection errors
        health_status["cache"] = "disconnected"

    status_code = 200 if health_status["status"] == "healthy" else 503
    return JsonResponse(health_status, status=status_code)
