# backoffice/domain/exceptions.py

"""
Application specific exceptions.

Domain exceptions carry a stable, human-readable message and an
``internal_code``. They do not know about HTTP: the exception middleware
maps each ``internal_code`` to a status code.
"""

from typing import Any, Dict, Iterable, Optional


class DomainException(Exception):
    """
    Base exception for every error raised by the back-office core.
    """

    def __init__(
            self,
            detail: Any = None,
            internal_code: Optional[str] = None,
            details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(detail)
        self.detail = detail
        self.internal_code = internal_code
        self.details = details or {}

    def __str__(self) -> str:
        return str(self.detail)


class ResourceNotFoundException(DomainException):
    """Resource not found."""

    def __init__(self, detail: str = "Resource not found", resource_id: Any = None):
        resource_info = f" (ID: {resource_id})" if resource_id is not None else ""
        super().__init__(
            detail=f"{detail}{resource_info}",
            internal_code="RESOURCE_NOT_FOUND"
        )


class ResourceAlreadyExistsException(DomainException):
    """Resource already exists (duplicate code or name)."""

    def __init__(self, detail: str = "Resource already exists", resource_id: Any = None):
        resource_info = f" (ID: {resource_id})" if resource_id is not None else ""
        super().__init__(
            detail=f"{detail}{resource_info}",
            internal_code="RESOURCE_ALREADY_EXISTS"
        )


class ResourceConflictException(DomainException):
    """Resource is still referenced and cannot be removed."""

    def __init__(self, detail: str = "Resource is in use", resource_id: Any = None):
        resource_info = f" (ID: {resource_id})" if resource_id is not None else ""
        super().__init__(
            detail=f"{detail}{resource_info}",
            internal_code="RESOURCE_CONFLICT"
        )


class PermissionDeniedException(DomainException):
    """Permission denied."""

    def __init__(
            self,
            detail: str = "Permission denied",
            permission: Optional[str] = None,
            missing_ids: Optional[Iterable[int]] = None,
    ):
        permission_info = f" (Required permission: {permission})" if permission else ""
        details = {"missing_permission_ids": sorted(missing_ids)} if missing_ids else None
        super().__init__(
            detail=f"{detail}{permission_info}",
            internal_code="PERMISSION_DENIED",
            details=details,
        )


class InvalidCredentialsException(DomainException):
    """Invalid or missing credentials."""

    def __init__(self, detail: str = "Invalid credentials"):
        super().__init__(
            detail=detail,
            internal_code="INVALID_CREDENTIALS"
        )


class DatabaseOperationException(DomainException):
    """Database operation failed."""

    def __init__(self, detail: str = "Error executing database operation",
                 original_error: Optional[Exception] = None):
        error_info = f": {str(original_error)}" if original_error else ""
        super().__init__(
            detail=f"{detail}{error_info}",
            internal_code="DATABASE_OPERATION_ERROR"
        )
        self.original_error = original_error


class InvalidInputException(DomainException):
    """Invalid input data."""

    def __init__(self, detail: str = "Invalid input data", fields: Optional[Dict[str, str]] = None):
        field_errors = ""
        if fields:
            field_errors = ": " + ", ".join([f"{field}: {error}" for field, error in fields.items()])

        super().__init__(
            detail=f"{detail}{field_errors}",
            internal_code="INVALID_INPUT",
            details=fields,
        )
