import logging
import time

logger = logging.getLogger(__name__)


class APIRequestLogMiddleware:
    """One log line per API request: ``METHOD path status in Nms``."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if not request.path.startswith("/api"):
            return self.get_response(request)
        started = time.monotonic()
        response = self.get_response(request)
        duration = int((time.monotonic() - started) * 1000)
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(level, "%s %s %s in %dms", request.method, request.path, response.status_code, duration)
        return response
