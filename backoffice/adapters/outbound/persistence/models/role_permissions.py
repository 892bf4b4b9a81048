# backoffice/adapters/outbound/persistence/models/role_permissions.py

"""
Association table between roles and permissions.
"""

from sqlalchemy import Table, Column, BigInteger, ForeignKey, UniqueConstraint
from backoffice.adapters.outbound.persistence.models.base_model import Base

role_permissions = Table(
    "role_permissions",
    Base.metadata,

    Column("role_id", BigInteger, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column("permission_id", BigInteger, ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),

    UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),

    comment="Many-to-many association between roles and permissions"
)
