"""
API Middleware: Request Logging

Logs one record per request with method, path, status and duration.
"""

from __future__ import annotations

import time
from typing import Optional
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from monthmesh.observability.logging import StructuredLogger


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Request logging middleware.

    Every log emitted while the request is handled carries its request_id,
    taken from x-request-id or generated, and echoed on the response.
    """

    def __init__(self, app: ASGIApp, logger: Optional[StructuredLogger] = None) -> None:
        super().__init__(app)
        self._logger = logger or StructuredLogger("monthmesh.api")

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get("x-request-id") or uuid4().hex
        start_time = time.perf_counter()

        with self._logger.context(request_id=request_id):
            try:
                response = await call_next(request)
            except Exception as e:
                self._logger.error(
                    "Request failed",
                    method=request.method,
                    path=request.url.path,
                    error=str(e),
                )
                raise

            duration_ms = (time.perf_counter() - start_time) * 1000
            log = self._logger.info if response.status_code < 400 else self._logger.warning
            log(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=round(duration_ms, 3),
            )

        response.headers["x-request-id"] = request_id
        return response
