import logging
import time
from typing import Callable

from django.conf import settings
from django.http import HttpRequest, HttpResponse

logger = logging.getLogger('coaching.requests')

TIMING_HEADER = 'Server-Timing'


class RequestTimingMiddleware:
    """Times API requests.

    Every response under `API_PREFIX` gets a Server-Timing header. Requests
    slower than SLOW_REQUEST_LOG_MS are logged at warning level, the rest at
    debug when enabled.
    """
    API_PREFIX = '/api/'

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]):
        self.get_response = get_response

    def __call__(self, request: HttpRequest):
        if not request.path.startswith(self.API_PREFIX):
            return self.get_response(request)

        started = time.perf_counter()
        response = self.get_response(request)
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        response[TIMING_HEADER] = f'app;dur={elapsed_ms:.1f}'

        if not bool(getattr(settings, 'SLOW_REQUEST_LOG_ENABLED', True)):
            return response

        user = getattr(request, 'user', None)
        username = user.get_username() if user is not None and user.is_authenticated else 'anonymous'
        threshold_ms = int(getattr(settings, 'SLOW_REQUEST_LOG_MS', 1200))
        level = logging.WARNING if elapsed_ms >= threshold_ms else logging.DEBUG
        logger.log(
            level,
            '%s method=%s path=%s status=%s duration_ms=%.2f user=%s',
            'SLOW_REQUEST' if level == logging.WARNING else 'REQUEST',
            request.method,
            request.path,
            response.status_code,
            elapsed_ms,
            username,
        )
        return response
