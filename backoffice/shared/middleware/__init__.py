# backoffice/shared/middleware/__init__.py

from backoffice.shared.middleware.exception_middleware import AsyncExceptionMiddleware
from backoffice.shared.middleware.logging_middleware import AsyncRequestLoggingMiddleware

__all__ = [
    "AsyncExceptionMiddleware",
    "AsyncRequestLoggingMiddleware",
]
