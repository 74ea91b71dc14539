"""
Operator API key authentication middleware.

Operator endpoints under /api/v1/ and the Prometheus scrape endpoint
require an API key from ``settings.OPERATOR_API_KEYS``. Scrapers send it
as a bearer token. The remote-script endpoint under
/api/v1/client/ carries its own credential (the license key) and is
not checked here.
"""

import hashlib
import hmac
import logging
from typing import Optional

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)

OPERATOR_PREFIX = "/api/v1/"
CLIENT_PREFIX = "/api/v1/client/"
METRICS_PATH = "/metrics/"


def _digest(value: str) -> bytes:
    return hashlib.sha256(value.encode()).digest()


class OperatorAPIKeyMiddleware(MiddlewareMixin):
    """
    Middleware for operator API key authentication.

    This middleware:
    1. Leaves every path outside /api/v1/ and /metrics/ alone
    2. Leaves the client API alone
    3. Returns 401 Unauthorized when the operator key is missing or unknown
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and validate authentication.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 401 if authentication fails, None otherwise
        """
        if not self._requires_key(request.path):
            return None

        header = getattr(settings, "OPERATOR_API_KEY_HEADER", "X-API-Key")
        api_key = request.headers.get(header) or request.headers.get(
            "Authorization", ""
        ).replace("Bearer ", "")

        if not api_key:
            return self._unauthorized(f"Missing API key. Provide {header} header.")

        presented = _digest(api_key)
        for configured in settings.OPERATOR_API_KEYS:
            if hmac.compare_digest(presented, _digest(configured)):
                request.operator_key_id = presented.hex()[:12]  # type: ignore
                return None

        logger.warning("Invalid operator API key attempted", extra={"path": request.path})
        return self._unauthorized("Invalid API key")

    @staticmethod
    def _requires_key(path: str) -> bool:
        if path == METRICS_PATH:
            return True
        return path.startswith(OPERATOR_PREFIX) and not path.startswith(CLIENT_PREFIX)

    @staticmethod
    def _unauthorized(message: str) -> JsonResponse:
        return JsonResponse(
            {"error": {"code": "UNAUTHORIZED", "message": message}},
            status=401,
        )
