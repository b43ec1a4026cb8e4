"""
Blog Backend — Request Logging Middleware
===========================================

What:  Logs every request under the API prefix.
How:   One line on arrival (method and path, before routing) and one on
       completion (status and duration). The timestamp comes from the log
       format configured in main.setup_logging().

Log level by status:
    5xx → ERROR   4xx → WARNING   otherwise INFO

Request bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("blog.access")

API_PREFIX = "/api"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if not (path == API_PREFIX or path.startswith(API_PREFIX + "/")):
            return await call_next(request)

        method = request.method
        rid = request_id_var.get("")
        client_ip = request.client.host if request.client else "unknown"

        logger.info("%s %s [%s] from %s", method, request.url.path, rid, client_ip)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s]",
            method,
            path,
            status,
            duration_ms,
            rid,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
