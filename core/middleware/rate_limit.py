"""
Rate limiting middleware.

Limits how often a single client IP may call the remote-script API.
"""

import time
from typing import Callable, Tuple

from django.conf import settings
from django.core.cache import cache
from django.http import HttpRequest, HttpResponse, JsonResponse

from core.metrics import errors_total
from core.middleware.metrics import normalize_endpoint


class RateLimitMiddleware:
    """
    Fixed-window rate limiting per client IP for /api/v1/client/.

    Counters live in the Django cache so every worker shares them.
    Defaults: ``CLIENT_RATE_LIMIT`` requests per ``CLIENT_RATE_LIMIT_WINDOW``
    seconds.
    """

    PATH_PREFIX = "/api/v1/client/"

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response

    @property
    def limit(self) -> int:
        return getattr(settings, "CLIENT_RATE_LIMIT", 30)

    @property
    def window(self) -> int:
        return getattr(settings, "CLIENT_RATE_LIMIT_WINDOW", 60)

    def _client_ip(self, request: HttpRequest) -> str:
        return request.META.get("REMOTE_ADDR") or "unknown"

    def _check_rate_limit(self, client_ip: str) -> Tuple[bool, int, int]:
        """
        Count this request against the client's current window.

        Args:
            client_ip: Address the request came from

        Returns:
            Tuple of (is_allowed, remaining, reset_time)
        """
        window_start = int(time.time() / self.window)
        reset_time = (window_start + 1) * self.window
        cache_key = f"rate_limit:client:{client_ip}:{window_start}"

        # add() is a no-op when the key exists, so incr() never misses it
        cache.add(cache_key, 0, timeout=self.window)
        count = cache.incr(cache_key)

        if count > self.limit:
            return False, 0, reset_time
        return True, self.limit - count, reset_time

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """
        Process request with rate limiting.

        Args:
            request: HTTP request

        Returns:
            HTTP response with rate limit headers
        """
        if not request.path.startswith(self.PATH_PREFIX):
            return self.get_response(request)

        is_allowed, remaining, reset_time = self._check_rate_limit(self._client_ip(request))

        if not is_allowed:
            errors_total.labels(
                error_type="rate_limit_exceeded", endpoint=normalize_endpoint(request.path)
            ).inc()
            response = JsonResponse(
                {
                    "error": {
                        "code": "RATE_LIMIT_EXCEEDED",
                        "message": "Rate limit exceeded. Please try again later.",
                    }
                },
                status=429,
            )
            response["Retry-After"] = str(max(0, reset_time - int(time.time())))
        else:
            response = self.get_response(request)

        # Rate limit headers (RFC 6585)
        response["X-RateLimit-Limit"] = str(self.limit)
        response["X-RateLimit-Remaining"] = str(remaining)
        response["X-RateLimit-Reset"] = str(reset_time)
        return response
