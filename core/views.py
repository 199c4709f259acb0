import time

from django.conf import settings
from django.db import connections
from django.db.utils import OperationalError
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from .responses import api_response


class HealthCheckView(APIView):
    """
    GET /api/health/ -> database reachability and round-trip time, for uptime checks.
    """
    permission_classes = [AllowAny]
    authentication_classes = []  # public endpoint

    def get(self, request, *args, **kwargs):
        started = time.perf_counter()

        try:
            connections["default"].ensure_connection()
            db_ok = True
        except OperationalError:
            db_ok = False

        return api_response(
            "Service is healthy" if db_ok else "Service is degraded",
            {
                "service": "vmatch-backend",
                "db": db_ok,
                "env": getattr(settings, "ENV", "unknown"),
                "latency_ms": int((time.perf_counter() - started) * 1000),
            },
        )
