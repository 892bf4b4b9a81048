# backoffice/domain/__init__.py

"""
Domain components of the back-office authorization core.

This module re-exports the domain exceptions.
"""

from backoffice.domain.exceptions import (
    DomainException,
    ResourceNotFoundException,
    ResourceAlreadyExistsException,
    ResourceConflictException,
    PermissionDeniedException,
    InvalidCredentialsException,
    DatabaseOperationException,
    InvalidInputException,
)

__all__ = [
    "DomainException",
    "ResourceNotFoundException",
    "ResourceAlreadyExistsException",
    "ResourceConflictException",
    "PermissionDeniedException",
    "InvalidCredentialsException",
    "DatabaseOperationException",
    "InvalidInputException",
]
