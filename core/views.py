import time

from django.conf import settings
from django.db import connections
from django.db.utils import OperationalError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView


class HealthCheckView(APIView):
    """
    GET /api/health/

    Uptime check for the portal: database reachability, which storage
    backend holds submission uploads, and whether Celery runs inline.
    """
    permission_classes = [AllowAny]
    authentication_classes = []  # public endpoint
    throttle_classes = []

    def get(self, request, *args, **kwargs):
        started = time.monotonic()

        try:
            with connections["default"].cursor() as cursor:
                cursor.execute("SELECT 1")
            db_ok = True
        except OperationalError:
            db_ok = False

        return Response(
            {
                "status": "ok" if db_ok else "degraded",
                "db": db_ok,
                "storage": "s3" if getattr(settings, "USE_S3_MEDIA", False) else "local",
                "tasks_inline": getattr(settings, "CELERY_TASK_ALWAYS_EAGER", False),
                "env": getattr(settings, "ENV", "unknown"),
                "latency_ms": int((time.monotonic() - started) * 1000),
            },
            status=200 if db_ok else 503,
        )
