# backoffice/adapters/outbound/persistence/repositories/__init__.py

"""
CRUD (Create, Read, Update, Delete) module.

This module exports classes and instances of the repositories
for the authorization entities, implementing the Repository pattern.
"""

# CRUD classes
from backoffice.adapters.outbound.persistence.repositories.base_repository import AsyncCRUDBase
from backoffice.adapters.outbound.persistence.repositories.permission_repository import AsyncPermissionCRUD
from backoffice.adapters.outbound.persistence.repositories.role_repository import AsyncRoleCRUD
from backoffice.adapters.outbound.persistence.repositories.admin_repository import AsyncAdminCRUD

# Singleton CRUD instances
from backoffice.adapters.outbound.persistence.repositories.permission_repository import permission_repository
from backoffice.adapters.outbound.persistence.repositories.role_repository import role_repository
from backoffice.adapters.outbound.persistence.repositories.admin_repository import admin_repository

__all__ = [
    # Classes
    "AsyncCRUDBase",
    "AsyncPermissionCRUD",
    "AsyncRoleCRUD",
    "AsyncAdminCRUD",

    # Instances
    "permission_repository",
    "role_repository",
    "admin_repository",
]
