# backoffice/application/use_cases/__init__.py

"""
Application service module.

This package contains the application services that implement the
authorization logic, organized according to functional domains.
"""

from backoffice.application.use_cases.authorization_use_cases import (
    AsyncAuthorizationService,
    AsyncDelegationValidator,
    AsyncPrincipalPermissionResolver,
)
from backoffice.application.use_cases.role_use_cases import AsyncRoleService
from backoffice.application.use_cases.permission_use_cases import AsyncPermissionService

__all__ = [
    "AsyncPrincipalPermissionResolver",
    "AsyncDelegationValidator",
    "AsyncAuthorizationService",
    "AsyncRoleService",
    "AsyncPermissionService",
]
