# backoffice/shared/middleware/logging_middleware.py

"""
Middleware for HTTP request logging.

Logs every request and its response, tagged with a correlation id taken
from the ``X-Request-ID`` header (or generated) and echoed back.
"""

import time
import uuid
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from backoffice.adapters.configuration.config import settings

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class AsyncRequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for request logging.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        if settings.ENVIRONMENT == "production":
            logger.info(f"[{request_id}] Request: {request.method} {request.url.path}")
        else:
            query_params = dict(request.query_params)
            logger.info(
                f"[{request_id}] Request: {request.method} {request.url.path} | "
                f"Query: {query_params if query_params else 'N/A'} | "
                f"Client: {request.client.host if request.client else 'N/A'}"
            )

        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            f"[{request_id}] Response: {response.status_code} for {request.method} {request.url.path} | "
            f"Time: {elapsed:.4f}s"
        )
        return response
