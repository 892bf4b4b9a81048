# backoffice/adapters/outbound/persistence/models/__init__.py

"""
Data models module.

Exports every SQLAlchemy model of the system so that the metadata
is complete wherever ``Base`` is used.
"""

from backoffice.adapters.outbound.persistence.models.base_model import Base

# Association tables
from backoffice.adapters.outbound.persistence.models.role_permissions import role_permissions
from backoffice.adapters.outbound.persistence.models.admin_roles import admin_roles

# Authorization models
from backoffice.adapters.outbound.persistence.models.permission_model import Permission
from backoffice.adapters.outbound.persistence.models.role_model import Role
from backoffice.adapters.outbound.persistence.models.admin_model import Admin

__all__ = [
    "Base",

    # Association tables
    "role_permissions",
    "admin_roles",

    # Models
    "Permission",
    "Role",
    "Admin",
]
