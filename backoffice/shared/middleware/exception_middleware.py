# backoffice/shared/middleware/exception_middleware.py

"""
Middleware for centralized exception handling.

Domain exceptions know nothing about HTTP; this middleware maps their
``internal_code`` to a status code and renders every error as
``{"detail", "code", "errors"}``.
"""

import re
import time
import logging
from typing import Callable, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from starlette.middleware.base import BaseHTTPMiddleware
from jose.exceptions import JWTError, ExpiredSignatureError

from backoffice.domain.exceptions import DomainException
from backoffice.adapters.configuration.config import settings

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    "RESOURCE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "RESOURCE_ALREADY_EXISTS": status.HTTP_400_BAD_REQUEST,
    "RESOURCE_CONFLICT": status.HTTP_409_CONFLICT,
    "PERMISSION_DENIED": status.HTTP_403_FORBIDDEN,
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "INVALID_INPUT": status.HTTP_400_BAD_REQUEST,
    "DATABASE_OPERATION_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}

CONSTRAINT_PATTERNS = [
    r'duplicate key value violates unique constraint "(.*?)"',
    r'violates unique constraint "(.*?)"',
    r'constraint "(.*?)"',
    r'UNIQUE constraint failed: (.*)',
]


def _error(status_code: int, detail: str, code: str, errors=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "code": code, "errors": errors or {}},
    )


class AsyncExceptionMiddleware(BaseHTTPMiddleware):
    """
    Middleware for centralized exception handling.
    Captures specific exceptions and formats the response accordingly.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.time()
        client = request.client.host if request.client else "N/A"
        try:
            response = await call_next(request)
            response.headers["X-Process-Time"] = str(time.time() - start_time)
            return response

        except DomainException as exc:
            status_code = STATUS_BY_CODE.get(exc.internal_code, status.HTTP_400_BAD_REQUEST)
            log = logger.error if status_code >= 500 else logger.warning
            log(f"Domain exception: {exc} | Code: {exc.internal_code} | Path: {request.url.path}")
            return _error(status_code, str(exc), exc.internal_code, exc.details)

        except IntegrityError as exc:
            constraint_name = self._extract_constraint_name(str(exc))
            logger.error(
                f"Integrity error: Constraint={constraint_name or 'N/A'} | "
                f"Path: {request.url.path} | Client: {client}"
            )
            detail = "Database integrity error" if settings.ENVIRONMENT == "production" else str(exc)
            return _error(
                status.HTTP_409_CONFLICT,
                detail,
                f"INTEGRITY_ERROR{f'_{constraint_name}' if constraint_name else ''}",
            )

        except SQLAlchemyError as exc:
            logger.error(f"Database error: {type(exc).__name__}: {exc} | Path: {request.url.path} | Client: {client}")
            detail = "Internal database error" if settings.ENVIRONMENT == "production" else str(exc)
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, detail, "DATABASE_ERROR")

        except (JWTError, ExpiredSignatureError) as exc:
            error_type = "Expired token" if isinstance(exc, ExpiredSignatureError) else "Invalid token"
            logger.warning(f"Authentication error: {error_type} | Path: {request.url.path} | Client: {client}")
            return _error(status.HTTP_401_UNAUTHORIZED, f"{error_type}. Please login again.", "INVALID_TOKEN")

        except Exception as exc:
            logger.exception(f"Unhandled exception: {type(exc).__name__} | Path: {request.url.path} | Client: {client}")
            detail = "Internal server error" if settings.ENVIRONMENT == "production" else str(exc)
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, detail, "INTERNAL_SERVER_ERROR")

    def _extract_constraint_name(self, error_message: str) -> Optional[str]:
        """
        Attempts to extract the constraint name from an integrity error message.
        """
        for pattern in CONSTRAINT_PATTERNS:
            match = re.search(pattern, error_message)
            if match:
                return match.group(1)
        return None
